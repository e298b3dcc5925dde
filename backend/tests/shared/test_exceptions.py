"""Tests for shared/exceptions.py."""

import pytest

from shared.exceptions import (
    LogitrackError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ConnectivityError,
    DataStoreError,
)


class TestLogitrackError:
    def test_message(self):
        error = LogitrackError("Colis introuvable")
        assert error.message == "Colis introuvable"
        assert str(error) == "Colis introuvable"

    def test_default_code(self):
        """Without an explicit code the class name is used."""
        assert LogitrackError("x").code == "LogitrackError"
        assert NotFoundError("x").code == "NotFoundError"

    def test_to_dict(self):
        """to_dict is the API error body, including whether to offer a retry."""
        error = LogitrackError("x", code="COLIS_NOT_FOUND", details={"colis_id": "COL-1"})
        assert error.to_dict() == {
            "error": "COLIS_NOT_FOUND",
            "message": "x",
            "details": {"colis_id": "COL-1"},
            "retryable": False,
        }

    @pytest.mark.parametrize("error_class", [
        NotFoundError,
        ValidationError,
        AuthenticationError,
        AuthorizationError,
    ])
    def test_caller_errors_are_not_retryable(self, error_class):
        assert error_class("x").retryable is False


class TestConnectivityError:
    def test_retryable_with_backend(self):
        """An unreachable backend is worth retrying and names the backend."""
        error = ConnectivityError("Failed to fetch")
        assert error.retryable is True
        assert error.code == "CONNECTION_ERROR"
        assert error.details == {"backend": "database"}

    def test_subclass_names_its_backend(self):
        class AuthDown(ConnectivityError):
            backend = "auth"

        assert AuthDown("down").details["backend"] == "auth"

    def test_explicit_details_are_kept(self):
        error = ConnectivityError("down", details={"backend": "auth", "attempt": 2})
        assert error.details == {"backend": "auth", "attempt": 2}


class TestDataStoreError:
    def test_operation_in_details(self):
        """The failed step is recorded next to the caller's details."""

        class InsertFailed(DataStoreError):
            operation = "insert_history"

        error = InsertFailed("insert failed", code="HISTORY_INSERT_FAILED", details={"colis_id": "COL-1"})
        assert error.details == {"colis_id": "COL-1", "operation": "insert_history"}
        assert error.retryable is False

    def test_default_operation(self):
        assert DataStoreError("x").details == {"operation": "query"}
