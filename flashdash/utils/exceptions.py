from typing import Any, Optional

from fastapi import HTTPException, status


class BaseAPIException(HTTPException):
    """Base exception for API errors.
    Ensures clarity and actionable next steps."""

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred. Please try again.",
        error: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error = error or {}


# ============== Request Validation ==============


class InvalidInputException(BaseAPIException):
    """Client must fix the request before retrying."""

    def __init__(self, detail: str = "Invalid request.", error: Optional[dict[str, Any]] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error=error,
        )


class MissingFieldsException(InvalidInputException):
    """Lead payload is missing one or more required fields."""

    def __init__(self, missing: list[str]):
        super().__init__(
            detail=f"Missing required fields: {', '.join(missing)}",
            error={"missing": list(missing)},
        )
        self.missing = list(missing)


class EmployeeAlreadyExistsException(InvalidInputException):
    """Prevents duplicate employee accounts."""

    def __init__(self, detail: str = "An employee with this email already exists."):
        super().__init__(detail=detail)


# ============== Authentication & Authorization ==============


class InvalidCredentialsException(BaseAPIException):
    """Triggered when login fails. Same body for every cause."""

    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
        )


class UnauthorizedException(BaseAPIException):
    """Missing, malformed or expired bearer token."""

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenException(BaseAPIException):
    """Valid token, wrong role."""

    def __init__(self, detail: str = "Admin access required"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


class SeedDisabledException(BaseAPIException):
    """Seeding is only allowed outside production with the flag on."""

    def __init__(self, detail: str = "Seed disabled"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


# ============== General Operational Exceptions ==============


class ResourceNotFoundException(BaseAPIException):
    """Generic fallback for missing resources."""

    def __init__(self, detail: str = "The requested resource could not be found."):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
        )


class ServerMisconfiguredException(BaseAPIException):
    """A required secret or endpoint is not configured."""

    def __init__(self, detail: str = "Server misconfiguration"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )


# ============== ForthCRM ==============


class UpstreamFailureException(BaseAPIException):
    """ForthCRM rejected the lead or could not be reached."""

    def __init__(self, details: Any, detail: str = "Failed to submit to Forth"):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
            error={"details": details},
        )
        self.details = details
