"""
Per-browser-session objects and async helpers for the Streamlit pages.

Streamlit scripts run synchronously, so every async workflow call goes
through ``run_workflow()``, which opens a fresh backend client and local
store for the duration of one ``asyncio.run`` and detaches them afterwards.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import TypeVar

import httpx
import streamlit as st

from meetingai.core.config import get_settings
from meetingai.core.models import SessionRecord
from meetingai.services.api_client import APIClient
from meetingai.services.speech import SpeechService
from meetingai.services.storage.database import create_engine
from meetingai.services.storage.session_store import SessionStore
from meetingai.services.workflow import SessionWorkflow
from meetingai.ui.browser import BrowserSpeechEngine, copy_to_clipboard

T = TypeVar("T")


def get_backend_url() -> str:
    return st.session_state.get("backend_url") or get_settings().backend_url


def get_workflow() -> SessionWorkflow:
    """Return this browser session's workflow, creating it on first use."""
    if "workflow" not in st.session_state:
        st.session_state.workflow = SessionWorkflow(
            client=APIClient(base_url=get_backend_url()),
            clipboard=copy_to_clipboard,
        )
    return st.session_state.workflow


def get_speech() -> SpeechService:
    if "speech" not in st.session_state:
        st.session_state.speech = SpeechService(BrowserSpeechEngine())
    return st.session_state.speech


@asynccontextmanager
async def open_store() -> AsyncIterator[SessionStore]:
    """Yield an initialized SessionStore on an engine owned by this event loop."""
    engine = create_engine()
    try:
        store = SessionStore(engine)
        await store.init()
        yield store
    finally:
        await engine.dispose()


def run_workflow(action: Callable[[SessionWorkflow], Awaitable[T]]) -> T:
    """Run an async workflow action with a loop-local client and store."""
    workflow = get_workflow()

    async def _runner() -> T:
        async with APIClient(base_url=get_backend_url()) as client, open_store() as store:
            workflow.client = client
            workflow.store = store
            try:
                return await action(workflow)
            finally:
                workflow.store = None

    return asyncio.run(_runner())


async def ping_backend(base_url: str, transport: httpx.AsyncBaseTransport | None = None) -> bool:
    """Health-check *base_url* with a throwaway client; no local store is opened."""
    async with APIClient(base_url=base_url, transport=transport) as client:
        return await client.check_connection()


def check_connection() -> bool:
    online = asyncio.run(ping_backend(get_backend_url()))
    get_workflow().online = online
    return online


def load_saved_sessions() -> list[SessionRecord]:
    async def _load() -> list[SessionRecord]:
        async with open_store() as store:
            return await store.list_sessions()

    return asyncio.run(_load())
