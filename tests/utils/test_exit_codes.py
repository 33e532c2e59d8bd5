"""Unit tests for taskvault.utils.exit_codes."""

from __future__ import annotations

import pytest

from taskvault.errors import (
    InvariantViolation,
    ListReferenceError,
    PropertyNotFoundError,
    ReadOnlyViewError,
    StoreFailure,
    TaskNotFoundError,
    TaskVaultError,
)
from taskvault.utils.exit_codes import (
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
    ERROR_NOT_FOUND,
    ERROR_STORE,
    SUCCESS,
    exit_code_for,
    get_exit_code_name,
)


class TestExitCodeConstants:
    def test_all_constants_are_unique(self):
        codes = [SUCCESS, ERROR_GENERAL, ERROR_INVALID_ARGS, ERROR_NOT_FOUND, ERROR_STORE]
        assert len(codes) == len(set(codes))

    def test_success_is_zero(self):
        assert SUCCESS == 0


class TestGetExitCodeName:
    @pytest.mark.parametrize(
        "code, name",
        [
            (SUCCESS, "SUCCESS"),
            (ERROR_GENERAL, "ERROR_GENERAL"),
            (ERROR_INVALID_ARGS, "ERROR_INVALID_ARGS"),
            (ERROR_NOT_FOUND, "ERROR_NOT_FOUND"),
            (ERROR_STORE, "ERROR_STORE"),
        ],
    )
    def test_known_codes(self, code, name):
        assert get_exit_code_name(code) == name

    def test_unknown_code(self):
        assert get_exit_code_name(99) == "UNKNOWN(99)"


class TestExitCodeFor:
    @pytest.mark.parametrize(
        "error, code",
        [
            (TaskNotFoundError("x"), ERROR_NOT_FOUND),
            (PropertyNotFoundError("x"), ERROR_NOT_FOUND),
            (ListReferenceError("x"), ERROR_NOT_FOUND),
            (InvariantViolation("x"), ERROR_INVALID_ARGS),
            (ReadOnlyViewError("x"), ERROR_INVALID_ARGS),
            (StoreFailure("x"), ERROR_STORE),
            (TaskVaultError("x"), ERROR_GENERAL),
        ],
    )
    def test_mapping(self, error, code):
        assert exit_code_for(error) == code
