"""Dependency injection for FastAPI endpoints"""

from fastapi import Header, Request
from household_gateway.infrastructure.clients.notifier import NotificationClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_current_user_id(x_user_id: str = Header(..., min_length=1, description="Authenticated user identifier")) -> str:
    """Caller identity, set by the authenticating proxy in front of this service"""
    return x_user_id


def get_optional_user_id(x_user_id: str | None = Header(None)) -> str | None:
    return x_user_id


def get_notification_client() -> NotificationClient:
    """Provide notification webhook client instance"""
    return NotificationClient()
