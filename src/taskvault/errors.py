"""Exceptions raised by the taskvault store and its mutation pipeline."""


class TaskVaultError(Exception):
    """Base exception for all taskvault errors."""


class InvariantViolation(TaskVaultError):
    """Raised when a write would break a task invariant or uses a forbidden field."""


class ListReferenceError(TaskVaultError):
    """Raised when a task references a list that does not exist."""


class ReadOnlyViewError(TaskVaultError):
    """Raised when writing through a read-only or already committed task view."""


class TaskNotFoundError(TaskVaultError):
    """Raised when a task id does not resolve to a stored row."""


class StoreFailure(TaskVaultError):
    """Raised when the underlying SQLite store fails."""


class PropertyNotFoundError(TaskVaultError):
    """Raised when a property id does not resolve to a stored row."""
