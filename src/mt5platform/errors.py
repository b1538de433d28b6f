from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class NoSessionProvidedError(AuthenticationError):
    """Raised when the request carries no bearer session token."""

    def __init__(self) -> None:
        super().__init__("No session provided")


class InvalidSessionError(AuthenticationError):
    """Raised when the session token is malformed or unknown."""

    def __init__(self) -> None:
        super().__init__("Invalid session")


class SessionExpiredError(AuthenticationError):
    """Raised when the session exists but its validity window has passed."""

    def __init__(self) -> None:
        super().__init__("Session expired")


class AccessDeniedError(UserError):
    """Raised when a user tries to access a resource they do not have permission for."""


class InsufficientRoleError(AccessDeniedError):
    """Raised when the principal's role is not in a guard's allow-list.

    The message is the guard's static label and never names the caller's role.
    """


class ValidationError(UserError):
    """Raised when user input fails validation."""


class StoreUnavailableError(Exception):
    """Raised when the key-value store cannot serve a request.

    Not a UserError: the underlying driver message must never reach clients.
    """

    def __init__(self, operation: str) -> None:
        super().__init__(f"Key-value store unavailable during '{operation}'")
        self.operation = operation
