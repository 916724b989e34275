"""
Platform exception classes

Every service failure is raised as a PlatformError subclass carrying the HTTP
status it maps to and, where clients branch on it, a machine-readable code.
"""

from typing import Optional

from fastapi import status


class PlatformError(Exception):
    """Base exception for all platform errors"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        code: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class NotFoundError(PlatformError):
    """Unknown tenant, resource or slug"""

    def __init__(self, resource_type: str, resource_id: Optional[str] = None):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} '{resource_id}' not found"
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class BadRequestError(PlatformError):
    def __init__(self, message: str = "Bad request"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class UnauthorizedError(PlatformError):
    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED)


class TokenExpiredError(UnauthorizedError):
    """Raised for expired tokens so clients can attempt a refresh"""

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)
        self.code = "token_expired"


class ForbiddenError(PlatformError):
    def __init__(self, message: str = "Forbidden", code: Optional[str] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, code)


class PaymentRequiredError(PlatformError):
    def __init__(self, message: str = "Trial period has expired"):
        super().__init__(message, status.HTTP_402_PAYMENT_REQUIRED, "TRIAL_EXPIRED")


class InvalidOrExpiredError(PlatformError):
    def __init__(self, message: str = "Reset token is invalid or has expired"):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, "INVALID_OR_EXPIRED")


class ServerError(PlatformError):
    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class StorageError(ServerError):
    """A JSON document could not be written"""

    def __init__(self, path: str):
        super().__init__(f"Failed to persist {path}")
        self.path = path
