"""Exceptions for the lattice-objects client."""

from typing import Optional


class ObjectStoreError(Exception):
    """Base exception for all lattice-objects errors."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """Initialize ObjectStoreError.

        Args:
            message: Error message
            status_code: HTTP status code if applicable
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class LocalInputError(ObjectStoreError):
    """Raised when user input is malformed, before any request is issued."""

    pass


class LocalIOError(ObjectStoreError):
    """Raised when a local file cannot be read, created or written."""

    pass


class RemoteError(ObjectStoreError):
    """Raised when the object store or the transport to it reports a failure."""

    pass


class ValidationError(RemoteError):
    """Raised when the service rejects a request as invalid."""

    def __init__(self, message: str) -> None:
        """Initialize ValidationError.

        Args:
            message: Error message
        """
        super().__init__(message, status_code=400)


class AuthenticationError(RemoteError):
    """Raised when the service rejects the bearer tokens."""

    def __init__(self, message: str = "Authentication failed", status_code: int = 401) -> None:
        """Initialize AuthenticationError.

        Args:
            message: Error message
            status_code: 401 or 403
        """
        super().__init__(message, status_code=status_code)


class ObjectNotFoundError(RemoteError):
    """Raised when a path does not exist in the object store."""

    def __init__(self, path: str) -> None:
        """Initialize ObjectNotFoundError.

        Args:
            path: Object path that was not found
        """
        super().__init__(f"Object not found: {path}", status_code=404)
        self.path = path


class ServerError(RemoteError):
    """Raised when the service returns a 5xx response."""

    pass


class ConnectionError(RemoteError):
    """Raised when connection to the service fails."""

    pass


class TimeoutError(RemoteError):
    """Raised when a request times out."""

    pass


def with_context(error: ObjectStoreError, context: str) -> ObjectStoreError:
    """Build a copy of an error whose message is prefixed with context.

    The copy keeps the concrete error type and status code so callers can
    still tell a missing path from an authentication failure.
    """
    message = f"{context}: {error.message}"
    wrapped = ObjectStoreError.__new__(type(error))
    ObjectStoreError.__init__(wrapped, message, status_code=error.status_code)
    if isinstance(error, ObjectNotFoundError):
        wrapped.path = error.path
    return wrapped
