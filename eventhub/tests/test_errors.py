"""
Test error mapping at the HTTP boundary.
"""
import logging

import pytest
from fastapi.testclient import TestClient

from eventhub.core.errors import error_response
from eventhub.database.db import Base
from eventhub.database.store import get_store
from eventhub.main import app
from eventhub.services.exceptions import (
    AlreadyJoinedError,
    CapacityConflictError,
    EventFullError,
    EventNotFoundError,
    EventValidationError,
    NoFieldsToUpdateError,
    StorageError,
)


class ExplodingStore:
    """Store whose every call fails unexpectedly."""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise RuntimeError("connection reset by peer")

        return fail


@pytest.fixture
def override_store():
    def _override(store):
        app.dependency_overrides[get_store] = lambda: store

    yield _override
    app.dependency_overrides = {}


class TestErrorTaxonomy:
    """Test status codes and kinds of the domain errors."""

    @pytest.mark.parametrize(
        "error_class, status_code, kind",
        [
            (EventValidationError, 400, "invalid_field"),
            (NoFieldsToUpdateError, 400, "no_fields"),
            (CapacityConflictError, 400, "capacity_conflict"),
            (EventNotFoundError, 404, "not_found"),
            (AlreadyJoinedError, 409, "already_joined"),
            (EventFullError, 409, "event_full"),
            (StorageError, 500, "storage_error"),
        ],
    )
    def test_error_defaults(self, error_class, status_code, kind):
        """Test status codes and kinds of the domain errors."""
        error = error_class()
        assert error.status_code == status_code
        assert error.kind == kind
        assert str(error) == error.message

    def test_custom_message(self):
        """Test overriding the default message."""
        error = EventValidationError("capacity must be a positive integer")
        assert error.message == "capacity must be a positive integer"

    def test_error_response_body(self):
        """Test the error body shape."""
        response = error_response(409, "Event is full")
        assert response.status_code == 409
        assert response.body == b'{"error":"Event is full"}'


class TestUnexpectedErrors:
    """Unexpected failures become a generic 500."""

    def test_unexpected_exception(self, override_store, caplog):
        """Test that unexpected errors are logged but not leaked."""
        override_store(ExplodingStore())

        with TestClient(app, raise_server_exceptions=False) as client:
            with caplog.at_level(logging.ERROR):
                response = client.get("/events")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert "connection reset by peer" not in response.text
        assert "connection reset by peer" in caplog.text

    def test_database_failure(self, override_store, sql_store, engine, caplog):
        """Test that database failures become a generic 500."""
        override_store(sql_store)
        Base.metadata.drop_all(bind=engine)

        with TestClient(app) as client:
            with caplog.at_level(logging.ERROR):
                response = client.get("/events/1")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert "Database error during get" in caplog.text
