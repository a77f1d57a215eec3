"""Structured JSON logging for production observability"""

import logging
import sys
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from household_gateway.config import settings
from household_gateway.utils.date_utils import utc_now


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level and service name to every record"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = utc_now().isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)


def log_statement_processed(
    household_id: str,
    statement_id: str,
    overspend_count: int,
    project_count: int,
    notification_count: int,
    error_count: int,
    duration_ms: float,
) -> None:
    """Log structured statement processing outcome"""
    logging.info(
        "Statement processing complete",
        extra={
            "household_id": household_id,
            "statement_id": statement_id,
            "step": "statement_processed",
            "overspend_count": overspend_count,
            "project_count": project_count,
            "notification_count": notification_count,
            "error_count": error_count,
            "duration_ms": duration_ms,
        },
    )
