"""Unit tests for the Streamlit-independent helpers of the UI layer."""

import httpx
import pytest

from meetingai.core.exceptions import FileValidationError
from meetingai.core.models import WorkflowState
from meetingai.services.workflow import SessionWorkflow
from meetingai.ui import state
from meetingai.ui.components.uploader import release_cleared_upload

WAV = b"RIFF" + b"\x00" * 60


class TestPingBackend:
    """Verify the sidebar connectivity check stays off the local store."""

    async def test_health_check_does_not_open_store(self, backend, monkeypatch):
        def _no_store(*args, **kwargs):
            raise AssertionError("local store opened for a health check")

        monkeypatch.setattr(state, "open_store", _no_store)
        monkeypatch.setattr(state, "create_engine", _no_store)

        online = await state.ping_backend(
            "http://backend.test", transport=httpx.MockTransport(backend.handler)
        )

        assert online is True
        assert backend.health_calls == 1
        assert backend.process_requests == []

    async def test_health_check_offline(self, backend):
        backend.health_status = 502
        online = await state.ping_backend(
            "http://backend.test", transport=httpx.MockTransport(backend.handler)
        )
        assert online is False


class TestReleaseClearedUpload:
    """Verify clearing the file widget only drops the accepted selection."""

    async def test_clearing_rejected_file_keeps_selection(self, api_client):
        workflow = SessionWorkflow(client=api_client)
        workflow.select_file("standup.wav", WAV, "audio/wav")
        accepted = ("standup.wav", len(WAV), "id-1")
        with pytest.raises(FileValidationError):
            workflow.select_file("slides.pdf", b"%PDF", "application/pdf")
        rejected = ("slides.pdf", 4, "id-2")

        assert release_cleared_upload(workflow, rejected, accepted) is False

        assert workflow.state is WorkflowState.file_selected
        assert workflow.selection.file_name == "standup.wav"

    async def test_clearing_accepted_file_removes_selection(self, api_client):
        workflow = SessionWorkflow(client=api_client)
        workflow.select_file("standup.wav", WAV, "audio/wav")
        accepted = ("standup.wav", len(WAV), "id-1")

        assert release_cleared_upload(workflow, accepted, accepted) is True

        assert workflow.state is WorkflowState.idle
        assert workflow.selection is None

    async def test_nothing_cleared(self, api_client):
        workflow = SessionWorkflow(client=api_client)
        assert release_cleared_upload(workflow, None, None) is False
