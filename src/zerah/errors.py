from abc import ABC


class UserError(ABC, Exception):
    """Base class for user-related errors.

    All errors that inherit from UserError will have their messages
    displayed to the user. These errors should not contain any
    sensitive information.
    """


class NotFoundError(UserError):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Document not found") -> None:
        super().__init__(message)


class AuthenticationError(UserError):
    """Raised when authentication fails."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


class NotFoundOrExpiredError(AuthenticationError):
    """Raised when a one-time code is unknown, already used or expired.

    The message is fixed: callers must not be able to tell a wrong code
    from an expired one.
    """

    def __init__(self) -> None:
        super().__init__("Invalid or expired code")


class ValidationError(UserError):
    """Raised when user input fails validation."""


class DeliveryError(Exception):
    """Raised when an email could not be delivered.

    Not a UserError: the underlying reason may contain transport details,
    so it is reported to the client as a generic server error.
    """
