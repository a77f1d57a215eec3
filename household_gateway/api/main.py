"""FastAPI application factory"""

import logging
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.responses import Response

from household_gateway.api.middleware import RequestContextMiddleware
from household_gateway.api.v1 import statements, projects, tasks
from household_gateway.infrastructure.database.session import get_db
from household_gateway.infrastructure.observability.logging import setup_logging
from household_gateway.config import settings

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Build the overspend service: statement, project and task routers plus ops endpoints"""
    app = FastAPI(
        title="Household Overspend Gateway",
        description="Credit card overspend detection and accountability plans",
        version="0.1.0",
    )
    app.add_middleware(RequestContextMiddleware)

    @app.get("/health")
    def health_check(db: Session = Depends(get_db)):
        # Health tracks database reachability
        try:
            db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logging.error(f"Health check failed: {e}")
            return JSONResponse(
                status_code=503,
                content={"status": "degraded", "service": settings.service_name, "database": "unavailable"},
            )
        return {"status": "ok", "service": settings.service_name, "database": "ok"}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    for router, tag in (
        (statements.router, "statements"),
        (projects.router, "overspend-projects"),
        (tasks.router, "tasks"),
    ):
        app.include_router(router, prefix="/v1", tags=[tag])

    return app


app = create_app()
