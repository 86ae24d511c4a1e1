"""Tests for structured logging."""
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient
from salon_scheduler.logging_config import (
    RequestIDMiddleware,
    generate_request_id,
    get_logger,
    resolve_request_id,
    setup_structured_logging,
)


class TestStructuredLogging:
    """Test structured logging with request IDs."""

    def test_setup_configures_structlog(self):
        """Should configure structlog processors."""
        setup_structured_logging(log_level="INFO")
        logger = get_logger(__name__)

        # Logger should be a structlog BoundLogger
        assert hasattr(logger, 'info')
        assert hasattr(logger, 'error')
        assert hasattr(logger, 'warning')

    def test_logger_methods_work(self):
        """Should have working log methods."""
        setup_structured_logging(log_level="INFO")
        logger = get_logger(__name__)

        # These should not raise
        logger.info("appointment_booked", appointment_id="appt-1")
        logger.warning("slot_conflict_on_commit", start_time="10:00")
        logger.error("Test error")

    def test_events_carry_their_fields(self):
        setup_structured_logging(log_level="INFO")

        with structlog.testing.capture_logs() as captured:
            get_logger(__name__).info("appointment_booked", appointment_id="appt-1")

        assert captured == [
            {"event": "appointment_booked", "appointment_id": "appt-1", "log_level": "info"}
        ]

    def test_generate_request_id_format(self):
        """Should generate request IDs with correct format."""
        request_id = generate_request_id()

        # Should start with "req-"
        assert request_id.startswith("req-")

        # Should have hex chars after prefix
        assert len(request_id) == 16  # "req-" (4) + 12 hex chars

        # Should be unique
        request_id2 = generate_request_id()
        assert request_id != request_id2

    def test_resolve_keeps_plain_incoming_id(self):
        assert resolve_request_id("req-abc.123_X") == "req-abc.123_X"

    def test_resolve_replaces_malformed_incoming_id(self):
        for incoming in (None, "", "a" * 65, "bad id", "id\nforged-line", "id;drop"):
            resolved = resolve_request_id(incoming)

            assert resolved.startswith("req-")
            assert len(resolved) == 16


class TestRequestIDMiddleware:

    def build_app(self):
        app = FastAPI()
        app.add_middleware(RequestIDMiddleware)

        @app.get("/test")
        def test_route():
            return {"status": "ok"}

        return app

    def test_request_id_middleware_adds_header(self):
        """Should add X-Request-ID header to responses."""
        with TestClient(self.build_app()) as client:
            response = client.get('/test')

        # Should have request ID header
        assert 'X-Request-ID' in response.headers
        request_id = response.headers['X-Request-ID']

        # Should match format
        assert request_id.startswith('req-')
        assert len(request_id) == 16

    def test_incoming_request_id_is_kept(self):
        with TestClient(self.build_app()) as client:
            response = client.get('/test', headers={"X-Request-ID": "req-from-proxy"})

        assert response.headers['X-Request-ID'] == "req-from-proxy"

    def test_oversized_incoming_request_id_replaced(self):
        with TestClient(self.build_app()) as client:
            response = client.get('/test', headers={"X-Request-ID": "x" * 500})

        assert response.headers['X-Request-ID'].startswith('req-')
        assert len(response.headers['X-Request-ID']) == 16
