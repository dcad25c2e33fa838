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


class ValidationError(UserError):
    """Raised when user input fails validation."""


class ConflictError(UserError):
    """Raised when a control number could not be allocated without colliding."""

    def __init__(self, message: str = "Control number allocation conflict, please retry") -> None:
        super().__init__(message)


class SequenceConflictError(Exception):
    """Raised by a record store when a sequence number is already taken in its partition.

    Not a UserError: the record service handles it by repairing the counters and retrying.
    """
