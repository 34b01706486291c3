"""Domain errors raised by services and mapped to HTTP responses in one place."""


class StorefrontError(Exception):
    """Base class for errors that carry a client-safe message and an HTTP status."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(StorefrontError):
    """Malformed, missing or out-of-range input."""

    status_code = 400


class AuthenticationError(StorefrontError):
    """Bad credentials, or a missing, invalid or expired token."""

    status_code = 401


class NotFoundError(StorefrontError):
    """No record for the given identifier."""

    status_code = 404


class ConflictError(StorefrontError):
    """Uniqueness violation (e.g. duplicate email)."""

    status_code = 400


class StorageError(StorefrontError):
    """Database or filesystem failure. The message is safe to return to clients."""

    status_code = 500
