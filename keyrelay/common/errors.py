"""
Error Definitions

Defines custom exception classes used in the proxy for unified error handling.
Every error is rendered to the caller as a plain-text body with its status code.
"""


class ProxyError(Exception):
    """
    Proxy Base Exception

    Base class for all custom exceptions, carrying the message and HTTP status code.
    """

    def __init__(self, message: str, status_code: int = 500):
        """
        Initialize exception

        Args:
            message: Error message returned to the caller
            status_code: HTTP status code
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ClientError(ProxyError):
    """
    Caller Error

    Raised for problems with the inbound request itself. Never retried and
    never forwarded upstream.
    """

    default_message = "Bad request"
    default_status_code = 400

    def __init__(self, message: str | None = None):
        super().__init__(
            message=message or self.default_message,
            status_code=self.default_status_code,
        )


class BadRequestError(ClientError):
    """Raised when the request body is malformed or a field has the wrong type."""

    default_message = "Bad request"
    default_status_code = 400


class AuthenticationError(ClientError):
    """Raised when the caller's shared secret is missing or wrong."""

    default_message = "Unauthorized."
    default_status_code = 401


class NotFoundError(ClientError):
    """Raised for any path or method other than the proxied endpoint."""

    default_message = "Not found"
    default_status_code = 404


class UnsupportedMediaTypeError(ClientError):
    """Raised when the request is not sent as application/json."""

    default_message = "Unsupported media type. Use 'application/json' content type"
    default_status_code = 415
