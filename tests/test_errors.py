"""Every failure leaves the API in the same envelope."""
import logging

import pytest
from fastapi import APIRouter
from fastapi.testclient import TestClient
from sqlalchemy.exc import DataError, IntegrityError

from src.error_handlers import classify_integrity_error
from src.errors import ConflictError
from src.logging_config import APP_LOGGER_NAME
from src.main import create_app

ERROR_LOGGER = f"{APP_LOGGER_NAME}.src.error_handlers"


class _DriverError(Exception):
    def __init__(self, text, pgcode=None):
        super().__init__(text)
        self.pgcode = pgcode


def _integrity_error(text, pgcode=None):
    return IntegrityError("INSERT ...", {}, _DriverError(text, pgcode))


class TestIntegrityClassification:

    @pytest.mark.parametrize("error, kind", [
        (_integrity_error("anything", pgcode="23505"), "unique"),
        (_integrity_error("anything", pgcode="23503"), "foreign_key"),
        (_integrity_error("UNIQUE constraint failed: users.email"), "unique"),
        (_integrity_error("FOREIGN KEY constraint failed"), "foreign_key"),
        (_integrity_error("NOT NULL constraint failed: accounts.name"), "constraint"),
    ])
    def test_classify(self, error, kind):
        assert classify_integrity_error(error) == kind


@pytest.fixture
def broken_app(app):
    router = APIRouter()

    @router.get("/boom")
    def boom():
        raise RuntimeError("connection string postgres://secret@db")

    @router.get("/conflict")
    def conflict():
        raise ConflictError()

    @router.get("/integrity")
    def integrity():
        raise _integrity_error('duplicate key value violates unique constraint "uq_user_email"', pgcode="23505")

    @router.get("/overflow")
    def overflow():
        raise DataError("UPDATE accounts ...", {}, _DriverError("numeric field overflow", pgcode="22003"))

    app.include_router(router)
    return app


class TestEnvelope:

    def test_unknown_route(self, client):
        response = client.get("/api/nothing-here")

        assert response.status_code == 404
        assert set(response.json()) == {"error", "message", "statusCode"}
        assert response.json()["statusCode"] == 404

    def test_method_not_allowed(self, client):
        response = client.patch("/api/accounts")

        assert response.status_code == 405
        assert response.json()["statusCode"] == 405

    def test_malformed_json(self, client, owner):
        response = client.post(
            "/api/accounts",
            content=b'{"name": "Broken",',
            headers={**owner["headers"], "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request body"

    def test_validation_errors_list_fields(self, client, owner):
        response = client.post("/api/accounts", json={"name": "", "type": "nope"}, headers=owner["headers"])

        body = response.json()
        assert response.status_code == 400
        assert body["error"] == "ValidationError"
        assert body["message"] == "Validation failed"
        assert {e["field"] for e in body["errors"]} == {"body.name", "body.type"}
        assert all(e["message"] for e in body["errors"])

    def test_app_error(self, broken_app):
        response = TestClient(broken_app).get("/conflict")

        assert response.status_code == 409
        assert response.json() == {"error": "ConflictError", "message": "Duplicate record", "statusCode": 409}

    def test_driver_text_never_leaks(self, broken_app):
        response = TestClient(broken_app).get("/integrity")

        assert response.status_code == 409
        assert "uq_user_email" not in response.text

    def test_numeric_overflow_is_bad_request(self, broken_app):
        response = TestClient(broken_app).get("/overflow")

        assert response.status_code == 400
        assert response.json()["error"] == "ConstraintViolationError"
        assert "numeric field overflow" not in response.text

    def test_unexpected_error_is_500_with_stack_outside_production(self, broken_app):
        response = TestClient(broken_app, raise_server_exceptions=False).get("/boom")

        body = response.json()
        assert response.status_code == 500
        assert body["error"] == "InternalServerError"
        assert body["message"] == "Internal server error"
        assert "RuntimeError" in body["stack"]

    def test_no_stack_in_production(self, settings, database):
        app = create_app(settings=settings.model_copy(update={"environment": "production"}), database=database)
        router = APIRouter()

        @router.get("/boom")
        def boom():
            raise RuntimeError("secret detail")

        app.include_router(router)
        response = TestClient(app, raise_server_exceptions=False).get("/boom")

        assert response.status_code == 500
        assert "stack" not in response.json()
        assert "secret detail" not in response.text


class TestRateLimit:

    def test_too_many_requests(self, settings, database):
        limited = settings.model_copy(update={"rate_limit_enabled": True, "rate_limit_max": 2})
        client = TestClient(create_app(settings=limited, database=database))

        statuses = [client.get("/health").status_code for _ in range(3)]

        assert statuses == [200, 200, 429]
        assert client.get("/health").json()["statusCode"] == 429


@pytest.fixture
def error_log(caplog, monkeypatch):
    """Records from the error mapper; the app logger does not propagate by default"""
    monkeypatch.setattr(logging.getLogger(APP_LOGGER_NAME), "propagate", True)
    caplog.set_level(logging.INFO)

    def _records():
        return [record for record in caplog.records if record.name == ERROR_LOGGER]
    return _records


class TestErrorLogging:

    def test_internal_error_logged_with_request_context(self, broken_app, error_log):
        TestClient(broken_app, raise_server_exceptions=False).get("/boom")

        records = error_log()
        assert [r.levelno for r in records] == [logging.ERROR]
        message = records[0].getMessage()
        for key in ("'method': 'GET'", "'path': '/boom'", "'ip'"):
            assert key in message
        assert records[0].exc_info is not None

    def test_operational_error_logged_as_warning_without_body(self, client, make_user, caplog, error_log):
        make_user(email="logged@example.com")

        response = client.post(
            "/auth/login", json={"email": "logged@example.com", "password": "hunter2-wrong"}
        )

        records = error_log()
        assert response.status_code == 401
        assert [r.levelno for r in records] == [logging.WARNING]
        assert "'path': '/auth/login'" in records[0].getMessage()
        assert "hunter2-wrong" not in caplog.text
