"""Custom exceptions for the ERG tracking backend."""


class ErgTrackingException(Exception):
    """Base exception for all ERG tracking errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        """Initialize exception with message and optional details.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationException(ErgTrackingException):
    """Configuration error."""

    pass


class OAuthException(ErgTrackingException):
    """The identity provider rejected or failed the login handshake."""

    pass


class WebhookDeliveryException(ErgTrackingException):
    """A webhook notification could not be delivered."""

    pass


class APIException(ErgTrackingException):
    """API-related exceptions."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict | None = None,
    ) -> None:
        """Initialize API exception.

        Args:
            message: Error message
            status_code: HTTP status code
            details: Additional error details
        """
        super().__init__(message, details)
        self.status_code = status_code


class NotFoundException(APIException):
    """Resource not found."""

    def __init__(self, message: str = "not found", details: dict | None = None) -> None:
        """Initialize with 404 status code."""
        super().__init__(message, status_code=404, details=details)


class BadRequestException(APIException):
    """Bad request."""

    def __init__(self, message: str = "bad request", details: dict | None = None) -> None:
        """Initialize with 400 status code."""
        super().__init__(message, status_code=400, details=details)


class UnauthorizedException(APIException):
    """Request has no authenticated session."""

    def __init__(self, message: str = "unauthenticated", details: dict | None = None) -> None:
        """Initialize with 401 status code."""
        super().__init__(message, status_code=401, details=details)


class PayloadTooLargeException(APIException):
    """Request body exceeds the configured limit."""

    def __init__(self, message: str = "payload too large", details: dict | None = None) -> None:
        """Initialize with 413 status code."""
        super().__init__(message, status_code=413, details=details)
