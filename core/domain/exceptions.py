"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions. Each family maps to one
HTTP status in the API exception handler.
"""
from typing import Any, Dict, Optional


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: str = None, details: Optional[Dict[str, Any]] = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            details: Extra data returned alongside the error
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}


class ValidationFailedError(DomainException):
    """Raised when a request violates an input or business rule (400)."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR", details=None):
        super().__init__(message, code=code, details=details)


class NotFoundError(DomainException):
    """Raised when a referenced entity does not exist (404)."""

    def __init__(self, message: str = "Resource not found", code: str = "NOT_FOUND"):
        super().__init__(message, code=code)


class AuthenticationRequiredError(DomainException):
    """Raised when no authenticated session is present (401)."""

    def __init__(self, message: str = "Unauthorized. Please login."):
        super().__init__(message, code="UNAUTHORIZED")


class PermissionDeniedError(DomainException):
    """Raised when the caller is authenticated but not allowed (403)."""

    def __init__(self, message: str = "Permission denied", code: str = "FORBIDDEN"):
        super().__init__(message, code=code)


class UpstreamServiceError(DomainException):
    """Raised when an external collaborator fails (500)."""

    def __init__(self, message: str = "Upstream service failure", code: str = "UPSTREAM_ERROR"):
        super().__init__(message, code=code)


class AdminRequiredError(PermissionDeniedError):
    """Raised when an authenticated user has no admin record."""

    def __init__(self, message: str = "Access denied. Admin account required."):
        super().__init__(message, code="ADMIN_REQUIRED")


class AdminNotFoundError(NotFoundError):
    """Raised when an admin is not found."""

    def __init__(self, message: str = "Admin not found"):
        super().__init__(message, code="ADMIN_NOT_FOUND")


class InvalidEmailError(ValidationFailedError):
    """Raised when an email address is malformed."""

    def __init__(self, message: str = "Valid email address is required"):
        super().__init__(message, code="INVALID_EMAIL")


class LicenseNotFoundError(NotFoundError):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class DuplicateLicenseError(ValidationFailedError):
    """Raised when a license for the email already exists in scope."""

    def __init__(self, message: str = "A license for this email already exists"):
        super().__init__(message, code="DUPLICATE_LICENSE")


class SeatLimitExceededError(ValidationFailedError):
    """Raised when there are not enough available seats."""

    def __init__(self, message: str = "No available licenses. Please purchase more licenses."):
        super().__init__(message, code="SEAT_LIMIT_EXCEEDED")


class LicenseAlreadyActivatedError(ValidationFailedError):
    """Raised when an activated license would be activated or resent again."""

    def __init__(self, message: str = "License is already activated"):
        super().__init__(message, code="LICENSE_ALREADY_ACTIVATED")


class ActivatedLicenseImmutableError(ValidationFailedError):
    """Raised when editing an activated license."""

    def __init__(self, message: str = "Cannot edit email for activated licenses"):
        super().__init__(message, code="LICENSE_IMMUTABLE")


class InvalidLicenseCountError(ValidationFailedError):
    """Raised when a purchase count is not a positive integer."""

    def __init__(self, message: str = "Invalid license count"):
        super().__init__(message, code="INVALID_LICENSE_COUNT")


class EmailDeliveryError(UpstreamServiceError):
    """Raised when a notification could not be delivered."""

    def __init__(self, message: str = "Failed to send email"):
        super().__init__(message, code="EMAIL_DELIVERY_FAILED")


class PaymentFailedError(ValidationFailedError):
    """Raised when a payment callback does not report a completed license purchase."""

    def __init__(self, message: str = "Payment was not completed"):
        super().__init__(message, code="PAYMENT_FAILED")


class PaymentVerificationError(PermissionDeniedError):
    """Raised when a payment callback signature does not verify."""

    def __init__(self, message: str = "Invalid payment signature"):
        super().__init__(message, code="INVALID_PAYMENT_SIGNATURE")


class TeamNotFoundError(NotFoundError):
    """Raised when a team is not found."""

    def __init__(self, message: str = "Team not found"):
        super().__init__(message, code="TEAM_NOT_FOUND")


class TeamMemberNotFoundError(NotFoundError):
    """Raised when a team member is not found."""

    def __init__(self, message: str = "Member not found"):
        super().__init__(message, code="MEMBER_NOT_FOUND")


class InvitationNotFoundError(NotFoundError):
    """Raised when an invitation is not found."""

    def __init__(self, message: str = "Invitation not found"):
        super().__init__(message, code="INVITATION_NOT_FOUND")


class InvalidInvitationError(ValidationFailedError):
    """Raised when an invitation is not actionable."""

    def __init__(self, message: str = "Invalid or expired invitation", details=None):
        super().__init__(message, code="INVALID_INVITATION", details=details)


class AlreadyTeamMemberError(ValidationFailedError):
    """Raised when an admin already belongs to a team."""

    def __init__(self, message: str = "You are already a member of a team"):
        super().__init__(message, code="ALREADY_TEAM_MEMBER")


class OwnerImmutableError(ValidationFailedError):
    """Raised when an operation targets the team owner."""

    def __init__(self, message: str = "Cannot change owner role"):
        super().__init__(message, code="OWNER_IMMUTABLE")
