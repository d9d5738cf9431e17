"""Shared pytest fixtures for the MeetingAI test suite.

Provides a mocked backend (``httpx.MockTransport``), an in-memory session
store, a controllable clock and canned backend payloads.
"""

import asyncio
from collections.abc import Callable

import httpx
import pytest

from meetingai.core.models import UploadSelection
from meetingai.services.api_client import APIClient

BASE_URL = "http://backend.test"


# ---------------------------------------------------------------------------
# Backend Fixtures
# ---------------------------------------------------------------------------


class FakeBackend:
    """Scriptable stand-in for the processing backend.

    ``health_status`` drives the connectivity check; ``responses`` is a queue
    of response factories used by successive process-audio calls, the last
    one repeating.
    """

    def __init__(self) -> None:
        self.health_status = 200
        self.health_hangs = False
        self.responses: list = []
        self.process_requests: list[httpx.Request] = []
        self.health_calls = 0
        self.before_response: Callable | None = None
        self.before_health: Callable | None = None

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/health":
            self.health_calls += 1
            if self.health_hangs:
                await asyncio.Event().wait()
            if self.before_health is not None:
                await self.before_health()
            return httpx.Response(self.health_status, json={"status": "ok"})

        await request.aread()
        self.process_requests.append(request)
        if self.before_response is not None:
            await self.before_response()
        factory = self.responses[min(len(self.process_requests), len(self.responses)) - 1]
        return factory()

    def reply_json(self, status: int, body) -> None:
        self.responses.append(lambda: httpx.Response(status, json=body))

    def reply_text(self, status: int, text: str) -> None:
        self.responses.append(lambda: httpx.Response(status, text=text))

    def fail_with(self, exc: Exception) -> None:
        def _raise():
            raise exc

        self.responses.append(_raise)

    def client(self) -> APIClient:
        return APIClient(base_url=BASE_URL, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def backend():
    """A FakeBackend whose health check succeeds by default."""
    return FakeBackend()


@pytest.fixture
async def api_client(backend):
    """APIClient wired to the fake backend."""
    async with backend.client() as client:
        yield client


# ---------------------------------------------------------------------------
# Payload Fixtures
# ---------------------------------------------------------------------------


def make_success_payload(**data_overrides) -> dict:
    """A complete success envelope, with optional ``data`` overrides."""
    data = {
        "transcript": "Namaste, aaj ki meeting shuru karte hain.",
        "translation": "Hello, let's start today's meeting.",
        "summary": "The team reviewed the quarterly budget.",
        "actionItems": [
            {
                "item": "Send budget report",
                "assignee": "Priya",
                "priority": "High",
                "dueDate": "2026-10-20",
            },
            {
                "item": "Book venue",
                "assignee": "Arjun",
                "priority": "Low",
                "dueDate": "2026-11-01",
            },
        ],
        "keyDecisions": ["Approved budget", "Hire two engineers"],
    }
    data.update(data_overrides)
    return {
        "success": True,
        "data": data,
        "metadata": {
            "sourceLanguage": "hi",
            "targetLanguage": "en",
            "audioFormat": "wav",
            "fileSize": 2048,
            "fileName": "standup.wav",
            "preMeetingNotesProvided": False,
            "processingTime": {"bhashini": 4.2, "gemini": 1.3, "total": 5.5},
        },
    }


@pytest.fixture
def success_payload():
    return make_success_payload()


@pytest.fixture
def make_payload():
    """Factory for success envelopes with custom ``data`` fields."""
    return make_success_payload


@pytest.fixture
def selection():
    """A small WAV upload, Hindi to English, without notes."""
    return UploadSelection(
        file_name="standup.wav",
        content=b"RIFF" + b"\x00" * 2044,
        mime_type="audio/wav",
    )


# ---------------------------------------------------------------------------
# Storage Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with tables, dispose after test."""
    from sqlalchemy.ext.asyncio import create_async_engine

    from meetingai.services.storage.database import init_db

    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_store(db_engine):
    """Return a SessionStore bound to the test engine."""
    from meetingai.services.storage.session_store import SessionStore

    return SessionStore(db_engine)


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()

