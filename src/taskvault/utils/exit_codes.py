"""
Exit codes for the taskvault CLI.

Semantic exit codes so scripts can tell a rejected write from a missing
task or a broken database.
"""

from taskvault.errors import (
    InvariantViolation,
    ListReferenceError,
    PropertyNotFoundError,
    ReadOnlyViewError,
    StoreFailure,
    TaskNotFoundError,
    TaskVaultError,
)

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or rejected values
ERROR_INVALID_ARGS = 2

# Task, list or property not found
ERROR_NOT_FOUND = 5

# Database failure
ERROR_STORE = 7


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_NOT_FOUND: "ERROR_NOT_FOUND",
        ERROR_STORE: "ERROR_STORE",
    }
    return code_names.get(code, f"UNKNOWN({code})")


def exit_code_for(error: TaskVaultError) -> int:
    """Map a taskvault error to the exit code the CLI reports."""
    if isinstance(error, (TaskNotFoundError, PropertyNotFoundError, ListReferenceError)):
        return ERROR_NOT_FOUND
    if isinstance(error, (InvariantViolation, ReadOnlyViewError)):
        return ERROR_INVALID_ARGS
    if isinstance(error, StoreFailure):
        return ERROR_STORE
    return ERROR_GENERAL
