"""Tests for request logging."""

import pytest
from structlog.testing import capture_logs

from natours.core.logging import mask_sensitive


def completed(logs: list[dict]) -> list[dict]:
    return [entry for entry in logs if entry["event"] == "request_completed"]


class TestRequestLogging:
    """One structured line per request while request logging is on."""

    @pytest.mark.asyncio
    async def test_successful_request_logged(self, make_client):
        # Build the app first: creating it reconfigures structlog
        client = make_client(log_requests=True, log_level="DEBUG")

        async with client:
            with capture_logs() as logs:
                response = await client.get("/health", headers={"X-Request-ID": "log-1"})

        assert response.status_code == 200
        [entry] = completed(logs)
        assert entry["log_level"] == "info"
        assert entry["method"] == "GET"
        assert entry["path"] == "/health"
        assert entry["status_code"] == 200
        assert entry["duration_ms"] >= 0
        assert entry["client_ip"]
        assert entry["request_id"] == "log-1"

    @pytest.mark.asyncio
    async def test_client_errors_logged_as_warning(self, make_client):
        client = make_client(log_requests=True, log_level="DEBUG")

        async with client:
            with capture_logs() as logs:
                response = await client.get("/api/v1/nowhere")

        assert response.status_code == 404
        [entry] = completed(logs)
        assert entry["log_level"] == "warning"
        assert entry["status_code"] == 404

    @pytest.mark.asyncio
    async def test_sensitive_query_values_masked(self, make_client):
        client = make_client(log_requests=True, log_level="DEBUG")

        async with client:
            with capture_logs() as logs:
                await client.get("/api/v1/echo?token=abc&page=2")

        [entry] = completed(logs)
        assert entry["query_params"] == {"token": "***MASKED***", "page": "2"}

    @pytest.mark.asyncio
    async def test_nothing_logged_when_disabled(self, make_client):
        client = make_client(log_requests=False, log_level="DEBUG")

        async with client:
            with capture_logs() as logs:
                await client.get("/health")

        assert completed(logs) == []


class TestMaskSensitive:
    def test_sensitive_keys_masked_case_insensitively(self):
        masked = mask_sensitive({"Password": "pass1234", "JWT": "abc", "name": "Jonas"})

        assert masked == {"Password": "***MASKED***", "JWT": "***MASKED***", "name": "Jonas"}

    def test_nested_dicts_masked(self):
        masked = mask_sensitive({"user": {"passwordConfirm": "pass1234", "email": "a@b.io"}})

        assert masked == {"user": {"passwordConfirm": "***MASKED***", "email": "a@b.io"}}
