"""Tests for reqtrack/middleware/error_handler.py.

Each handler is exercised through a minimal FastAPI test application so the
full request/response cycle (serialisation, status codes, headers) is verified.
"""

import logging

import pytest
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient
from pydantic import BaseModel
from starlette.exceptions import HTTPException

from reqtrack.middleware.error_handler import (
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)


class _Body(BaseModel):
    name: str
    count: int


def _make_app() -> FastAPI:
    app = FastAPI()
    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/http/{code}")
    async def raise_http(code: int, msg: str = "error message") -> dict[str, str]:  # type: ignore[return]
        raise HTTPException(status_code=code, detail=msg)

    @app.get("/auth")
    async def raise_auth() -> dict[str, str]:  # type: ignore[return]
        raise HTTPException(status_code=401, detail="nope", headers={"WWW-Authenticate": "Bearer"})

    @app.post("/validate-body")
    async def validate_body(body: _Body) -> dict[str, object]:
        return {"name": body.name, "count": body.count}

    @app.get("/crash")
    async def crash() -> dict[str, str]:  # type: ignore[return]
        raise RuntimeError("boom")

    return app


@pytest.fixture(scope="module")
def client() -> TestClient:
    return TestClient(_make_app(), raise_server_exceptions=False)


class TestHttpExceptionHandler:
    @pytest.mark.parametrize(
        ("status", "code"),
        [(401, "UNAUTHORIZED"), (404, "NOT_FOUND"), (503, "SERVICE_UNAVAILABLE"), (418, "HTTP_418")],
    )
    def test_status_maps_to_code(self, client: TestClient, status: int, code: str) -> None:
        res = client.get(f"/http/{status}")
        assert res.status_code == status
        assert res.json()["error"]["code"] == code

    def test_detail_becomes_message(self, client: TestClient) -> None:
        res = client.get("/http/404", params={"msg": "Log entry not found"})
        assert res.json()["error"]["message"] == "Log entry not found"

    def test_headers_are_forwarded(self, client: TestClient) -> None:
        res = client.get("/auth")
        assert res.headers["www-authenticate"] == "Bearer"

    def test_unknown_route_uses_envelope(self, client: TestClient) -> None:
        res = client.get("/does-not-exist")
        assert res.status_code == 404
        assert res.json()["error"]["code"] == "NOT_FOUND"


class TestValidationExceptionHandler:
    def test_returns_422_with_field_details(self, client: TestClient) -> None:
        res = client.post("/validate-body", json={"name": "x", "count": "many"})
        assert res.status_code == 422
        error = res.json()["error"]
        assert error["code"] == "UNPROCESSABLE_ENTITY"
        assert error["message"] == "Request validation failed"
        assert [d["field"] for d in error["details"]] == ["count"]

    def test_missing_fields_are_all_reported(self, client: TestClient) -> None:
        res = client.post("/validate-body", json={})
        fields = {d["field"] for d in res.json()["error"]["details"]}
        assert fields == {"name", "count"}


class TestUnhandledExceptionHandler:
    def test_returns_generic_500(self, client: TestClient) -> None:
        res = client.get("/crash")
        assert res.status_code == 500
        assert res.json() == {
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An internal server error occurred",
                "details": None,
            }
        }

    def test_does_not_leak_exception_text(self, client: TestClient) -> None:
        res = client.get("/crash")
        assert "boom" not in res.text

    def test_logs_at_error_with_traceback(
        self, client: TestClient, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.ERROR, logger="reqtrack.middleware.error_handler"):
            client.get("/crash")
        records = [r for r in caplog.records if r.name == "reqtrack.middleware.error_handler"]
        assert records
        assert "RuntimeError" in records[0].getMessage()
        assert records[0].exc_info is not None
