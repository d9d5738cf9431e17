"""Unit tests for the backend APIClient.

Validates the connectivity check, multipart request construction, and
best-effort error message extraction from failed responses.
"""

import asyncio

import httpx
import pytest

from meetingai.core.exceptions import HttpError, UnexpectedError
from meetingai.core.models import UploadSelection
from meetingai.services.api_client import APIClient, extract_error_message


class TestExtractErrorMessage:
    """Verify the JSON -> text -> status line fallback chain."""

    def test_json_error_field(self):
        resp = httpx.Response(500, json={"error": "ASR timeout"})
        assert extract_error_message(resp) == "ASR timeout"

    def test_json_detail_field(self):
        resp = httpx.Response(422, json={"detail": "sourceLanguage is required"})
        assert extract_error_message(resp) == "sourceLanguage is required"

    def test_json_without_message_uses_status_line(self):
        resp = httpx.Response(500, json={"code": 17})
        assert extract_error_message(resp) == "HTTP 500: Internal Server Error"

    def test_plain_text_body(self):
        resp = httpx.Response(502, text="Bad gateway from upstream")
        assert extract_error_message(resp) == "Bad gateway from upstream"

    def test_empty_body_uses_status_line(self):
        resp = httpx.Response(503, text="")
        assert extract_error_message(resp) == "HTTP 503: Service Unavailable"


class TestCheckConnection:
    """Verify the health check never raises."""

    async def test_online(self, api_client, backend):
        assert await api_client.check_connection() is True
        assert backend.health_calls == 1

    async def test_non_ok_is_offline(self, api_client, backend):
        backend.health_status = 503
        assert await api_client.check_connection() is False

    async def test_network_failure_is_offline(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        async with APIClient(base_url="http://x", transport=httpx.MockTransport(handler)) as c:
            assert await c.check_connection() is False

    async def test_unanswered_health_check_times_out(self, backend):
        """A backend that accepts but never answers is offline, not a hang."""
        backend.health_hangs = True
        transport = httpx.MockTransport(backend.handler)

        async with APIClient(
            base_url="http://backend.test", transport=transport, health_timeout=0.05
        ) as c:
            online = await asyncio.wait_for(c.check_connection(), timeout=2.0)

        assert online is False
        assert backend.health_calls == 1


class TestProcessAudio:
    """Verify APIClient.process_audio() request construction and error mapping."""

    async def test_sends_multipart_form(self, api_client, backend, success_payload, selection):
        backend.reply_json(200, success_payload)

        payload = await api_client.process_audio(selection)

        assert payload["success"] is True
        request = backend.process_requests[0]
        assert request.method == "POST"
        assert request.url.path == "/api/process-audio/"
        assert request.headers["content-type"].startswith("multipart/form-data")
        body = request.content.decode("latin-1")
        assert 'name="audio"; filename="standup.wav"' in body
        assert 'name="sourceLanguage"\r\n\r\nhi' in body
        assert 'name="targetLanguage"\r\n\r\nen' in body
        assert "preMeetingNotes" not in body

    async def test_notes_are_trimmed_and_sent(self, api_client, backend, success_payload):
        backend.reply_json(200, success_payload)
        upload = UploadSelection(
            file_name="m.ogg",
            content=b"OggS",
            mime_type="audio/ogg",
            pre_meeting_notes="  Budget review  ",
        )

        await api_client.process_audio(upload)

        body = backend.process_requests[0].content.decode("latin-1")
        assert 'name="preMeetingNotes"\r\n\r\nBudget review\r\n' in body

    async def test_http_error(self, api_client, backend, selection):
        backend.reply_json(500, {"error": "ASR timeout"})

        with pytest.raises(HttpError) as exc_info:
            await api_client.process_audio(selection)

        assert exc_info.value.detail == "ASR timeout"
        assert exc_info.value.status_code == 500
        assert exc_info.value.retryable is True

    async def test_success_status_with_invalid_json(self, api_client, backend, selection):
        backend.reply_text(200, "<html>oops</html>")

        with pytest.raises(UnexpectedError, match="Invalid JSON"):
            await api_client.process_audio(selection)

    async def test_transport_failure(self, api_client, backend, selection):
        backend.fail_with(httpx.ReadError("connection reset"))

        with pytest.raises(UnexpectedError, match="Network error: connection reset"):
            await api_client.process_audio(selection)

    async def test_base_url_trailing_slash_is_stripped(self):
        async with APIClient(base_url="http://backend:8000/") as client:
            assert client.base_url == "http://backend:8000"
