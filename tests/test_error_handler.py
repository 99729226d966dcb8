"""
Tests for the fallback error handler.

Covers:
- Negotiation, rendering and error-log wiring in ErrorHandler.handle
- Best-effort log writes
- The Starlette/FastAPI integration (status, headers, body)
"""

import json
import logging

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from errorpage.core.config import Settings
from errorpage.domain.failure import Failure
from errorpage.domain.negotiation import ContentType
from errorpage.main import create_app
from errorpage.shared.errors.handlers import ErrorHandler, register_error_handlers
from errorpage.shared.errors.renderers import GENERIC_MESSAGE


@pytest.fixture
def logs() -> list[str]:
    return []


@pytest.fixture
def chain() -> Failure:
    """Two-entry chain: a fault wrapping a driver error."""
    cause = Failure(
        kind="DriverError",
        message="connection reset",
        code=104,
        file="/srv/app/db.py",
        line=88,
        trace="#0 /srv/app/db.py(88): read()",
    )
    return Failure(
        kind="RuntimeFault",
        message="db down",
        code=0,
        file="/srv/app/service.py",
        line=12,
        trace="#0 /srv/app/service.py(12): load()",
        previous=cause,
    )


class TestHandle:
    """Tests for ErrorHandler.handle."""

    def test_json_with_details_hidden(self, logs: list[str]) -> None:
        """Generic JSON body for the client, full chain in one log write."""
        handler = ErrorHandler(display_error_details=False, log_sink=logs.append)
        failure = Failure(
            kind="RuntimeFault",
            message="db down",
            code=0,
            file="/srv/app/service.py",
            line=12,
        )

        rendered = handler.handle("application/json, text/html", failure)

        assert rendered.content_type is ContentType.JSON
        assert rendered.status_code == 500
        assert json.loads(rendered.body) == {"message": GENERIC_MESSAGE}
        assert len(logs) == 1
        assert "Type: RuntimeFault" in logs[0]
        assert "Message: db down" in logs[0]
        assert "File: /srv/app/service.py" in logs[0]
        assert "Line: 12" in logs[0]
        assert "Code:" not in logs[0]

    def test_html_with_details_shown(self, chain: Failure, logs: list[str]) -> None:
        """Empty Accept renders HTML with every entry and nothing is logged."""
        handler = ErrorHandler(display_error_details=True, log_sink=logs.append)

        rendered = handler.handle("", chain)

        assert rendered.content_type is ContentType.HTML
        assert rendered.body.count("<strong>Type:</strong>") == 2
        assert rendered.body.count("<h2>Previous error</h2>") == 1
        assert logs == []

    def test_log_has_section_per_previous_error(
        self, chain: Failure, logs: list[str]
    ) -> None:
        handler = ErrorHandler(log_sink=logs.append)
        handler.handle("text/xml", chain)
        assert len(logs) == 1
        assert logs[0].count("Previous error:") == 1
        assert "Type: DriverError" in logs[0]

    @pytest.mark.parametrize("accept", ["application/json", "application/xml", "text/html"])
    def test_hidden_details_never_reach_client(
        self, accept: str, chain: Failure, logs: list[str]
    ) -> None:
        handler = ErrorHandler(log_sink=logs.append)
        body = handler.handle(accept, chain).body
        for leaked in ("db down", "/srv/app", "load()", "DriverError"):
            assert leaked not in body

    def test_accepts_python_exceptions(self, logs: list[str]) -> None:
        """Exceptions are snapshotted with their cause before rendering."""
        handler = ErrorHandler(display_error_details=True, log_sink=logs.append)
        try:
            try:
                raise ValueError("bad row")
            except ValueError as exc:
                raise RuntimeError("import failed") from exc
        except RuntimeError as exc:
            rendered = handler.handle("application/json", exc)

        entries = json.loads(rendered.body)["error"]
        assert [e["type"] for e in entries] == ["RuntimeError", "ValueError"]
        assert entries[1]["message"] == "bad row"

    def test_flag_is_fixed_at_construction(self) -> None:
        handler = ErrorHandler(display_error_details=1)
        assert handler.display_error_details is True
        with pytest.raises(AttributeError):
            handler.display_error_details = False


class TestErrorLog:
    """Tests for the operational log side effect."""

    def test_default_sink_is_error_logger(
        self, chain: Failure, caplog: pytest.LogCaptureFixture
    ) -> None:
        handler = ErrorHandler()
        with caplog.at_level(logging.ERROR, logger="errorpage.errors"):
            handler.handle("", chain)

        records = [r for r in caplog.records if r.name == "errorpage.errors"]
        assert len(records) == 1
        assert records[0].levelno == logging.ERROR
        assert "Type: RuntimeFault" in records[0].getMessage()

    def test_failing_sink_does_not_reach_client(
        self, chain: Failure, caplog: pytest.LogCaptureFixture
    ) -> None:
        def broken_sink(message: str) -> None:
            raise OSError("log volume full")

        handler = ErrorHandler(log_sink=broken_sink)
        with caplog.at_level(logging.WARNING, logger="errorpage.shared.errors.handlers"):
            rendered = handler.handle("application/json", chain)

        assert json.loads(rendered.body) == {"message": GENERIC_MESSAGE}
        assert any("error log" in r.getMessage() for r in caplog.records)


def _app_raising(handler: ErrorHandler) -> FastAPI:
    app = FastAPI()
    register_error_handlers(app, handler)

    @app.get("/boom")
    def boom() -> None:
        try:
            raise KeyError("order-17")
        except KeyError as exc:
            raise RuntimeError("checkout failed") from exc

    return app


class TestHttpIntegration:
    """Tests for the handler registered on a FastAPI application."""

    @pytest.mark.parametrize(
        "accept", ["application/json", "application/xml", "text/xml", "text/html"]
    )
    def test_status_and_exact_content_type(self, accept: str, logs: list[str]) -> None:
        client = TestClient(
            _app_raising(ErrorHandler(log_sink=logs.append)),
            raise_server_exceptions=False,
        )
        response = client.get("/boom", headers={"Accept": accept})

        assert response.status_code == 500
        assert response.headers["content-type"] == accept
        assert GENERIC_MESSAGE in response.text
        assert "checkout failed" not in response.text
        assert len(logs) == 1
        assert "Message: checkout failed" in logs[0]

    def test_default_accept_renders_html(self, logs: list[str]) -> None:
        client = TestClient(
            _app_raising(ErrorHandler(log_sink=logs.append)),
            raise_server_exceptions=False,
        )
        response = client.get("/boom")
        assert response.headers["content-type"] == "text/html"

    def test_details_shown_over_http(self, logs: list[str]) -> None:
        client = TestClient(
            _app_raising(ErrorHandler(display_error_details=True, log_sink=logs.append)),
            raise_server_exceptions=False,
        )
        response = client.get("/boom", headers={"Accept": "application/json"})

        entries = response.json()["error"]
        assert [e["type"] for e in entries] == ["RuntimeError", "KeyError"]
        assert entries[0]["message"] == "checkout failed"
        assert entries[0]["file"].endswith("test_error_handler.py")
        assert logs == []

    def test_create_app_uses_settings_flag(self) -> None:
        app = create_app(Settings(display_error_details=True))

        @app.get("/fail")
        def fail() -> None:
            raise ValueError("bad input")

        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/fail", headers={"Accept": "application/json"})

        assert response.status_code == 500
        assert response.json()["error"][0]["message"] == "bad input"
        assert client.get("/api/v1/status").json()["display_error_details"] is True

    @pytest.mark.parametrize(
        "accept", ["application/json", "application/xml", "text/html"]
    )
    def test_undecodable_filename_in_message(self, accept: str, logs: list[str]) -> None:
        """Surrogate-escaped text still yields a negotiated, encodable body."""
        name = b"report-\xff.csv".decode("utf-8", "surrogateescape")
        app = FastAPI()
        register_error_handlers(
            app, ErrorHandler(display_error_details=True, log_sink=logs.append)
        )

        @app.get("/import")
        def import_report() -> None:
            raise ValueError(f"cannot parse {name}")

        client = TestClient(app, raise_server_exceptions=False)
        response = client.get("/import", headers={"Accept": accept})

        assert response.status_code == 500
        assert response.headers["content-type"] == accept
        assert "cannot parse report-\\udcff.csv" in response.text
