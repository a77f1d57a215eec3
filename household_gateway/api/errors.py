"""Map domain failures onto HTTP responses"""

import logging
import uuid
from fastapi import HTTPException
from household_gateway.domain.exceptions import (
    AuthorizationError,
    DomainException,
    HouseholdNotFoundError,
    InvalidPaymentError,
    InvalidTransitionError,
    NotFoundError,
    StatementAlreadyProcessedError,
)

STATUS_CODES = {
    AuthorizationError: 403,
    HouseholdNotFoundError: 404,
    NotFoundError: 404,
    InvalidTransitionError: 409,
    InvalidPaymentError: 422,
    StatementAlreadyProcessedError: 400,
}


def to_http_exception(exc: DomainException, request_id: str) -> HTTPException:
    """Translate a domain exception; anything unmapped is a 422"""
    status_code = STATUS_CODES.get(type(exc), 422)
    logging.warning(f"Request rejected: {exc}", extra={"request_id": request_id, "status_code": status_code})
    return HTTPException(status_code=status_code, detail=str(exc))


def parse_id(value: str, label: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID format")
