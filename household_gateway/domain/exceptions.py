"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidChargeError(DomainException):
    """Charge data is malformed and cannot be totalled"""

    pass


class UnknownMemberError(DomainException):
    """Charge is attributed to someone outside the household roster"""

    pass


class HouseholdNotFoundError(DomainException):
    """Household has no configuration record"""

    pass


class NotFoundError(DomainException):
    """Project, task or statement does not exist in the given household"""

    pass


class AuthorizationError(DomainException):
    """Caller's household role does not permit the requested action"""

    pass


class InvalidTransitionError(DomainException):
    """Requested lifecycle change is not allowed from the current status"""

    pass


class StatementAlreadyProcessedError(DomainException):
    """Statement charges were already run through overspend detection"""

    pass


class InvalidPaymentError(DomainException):
    """Payment amount or week is outside the accepted range"""

    pass
