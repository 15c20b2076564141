"""
Error taxonomy for the gateway.

Every error the gateway raises on purpose carries the HTTP status it maps to.
The API layer renders all of them the same way: {"ok": false, "error": msg}.
"""


class GatewayError(Exception):
    """Base class for errors with a known HTTP status."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthMissingError(GatewayError):
    """Auth is enabled but the request carried no credential."""

    status_code = 401

    def __init__(self, message: str = "Missing auth header") -> None:
        super().__init__(message)


class AuthInvalidError(GatewayError):
    """A credential was present but did not match the configured secret."""

    status_code = 403

    def __init__(self, message: str = "Invalid auth token") -> None:
        super().__init__(message)


class MissingFieldsError(GatewayError):
    """One or more required request fields were absent or empty."""

    status_code = 400

    def __init__(self, fields: list[str], message: str | None = None) -> None:
        self.fields = fields
        super().__init__(message or f"Missing required fields: {', '.join(fields)}")


class PayloadTooLargeError(GatewayError):
    """Request body exceeds the configured cap."""

    status_code = 413


class StorageError(GatewayError):
    """Raised when storage operations fail."""

    status_code = 500


class StorageUnavailableError(StorageError):
    """No bucket is configured, so storage routes are disabled."""

    def __init__(self, message: str = "Bucket not configured") -> None:
        super().__init__(message)
