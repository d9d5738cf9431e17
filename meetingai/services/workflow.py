"""Upload-and-process workflow controller.

Owns the lifecycle of one upload -> process -> display cycle::

    idle -> file_selected -> processing -> succeeded | failed
    failed -> processing   (retry, capped)
    any    -> idle         (reset / remove)

The controller is UI-independent: the backend client, session store,
clipboard writer and clock are injected, and the Streamlit pages only read
its attributes and call its methods.

Usage::

    workflow = SessionWorkflow(client=APIClient())
    workflow.select_file("standup.wav", data, "audio/wav")
    await workflow.submit()
    if workflow.state is WorkflowState.succeeded:
        export = workflow.export_text()
"""

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import PurePath

from meetingai.core.config import get_settings
from meetingai.core.exceptions import (
    ConnectivityError,
    FileValidationError,
    MeetingAIError,
    UnexpectedError,
    WorkflowStateError,
)
from meetingai.core.models import (
    ALLOWED_EXTENSIONS,
    ALLOWED_MIME_TYPES,
    DEFAULT_SOURCE_LANGUAGE,
    DEFAULT_TARGET_LANGUAGE,
    PROGRESS_STEPS,
    ExportFile,
    Language,
    ProcessedResult,
    ProcessingMetadata,
    ProgressStep,
    SessionRecord,
    UploadSelection,
    WorkflowState,
)
from meetingai.services.api_client import APIClient
from meetingai.services.audio_preview import AudioPreview
from meetingai.services.export import build_export
from meetingai.services.normalizer import normalize_response
from meetingai.services.progress import ProgressTicker
from meetingai.services.storage.session_store import SessionStore

logger = logging.getLogger(__name__)

INVALID_TYPE_MESSAGE = "Please select a valid audio file (WAV, MP3, FLAC, M4A, or OGG)"
NO_FILE_MESSAGE = "Please select an audio file first"
RETRY_EXHAUSTED_MESSAGE = "Maximum retry attempts reached. Please refresh and try again."
INITIAL_PHASE = "Initializing..."


def validate_upload(file_name: str, mime_type: str, size: int, max_size: int) -> None:
    """Check type and size of a candidate upload.

    The file passes the type check when either its mime type or its
    extension is allowed.

    Raises:
        FileValidationError: Disallowed type, or larger than *max_size* bytes.
    """
    extension = PurePath(file_name).suffix.lower()
    if mime_type not in ALLOWED_MIME_TYPES and extension not in ALLOWED_EXTENSIONS:
        raise FileValidationError(INVALID_TYPE_MESSAGE)
    if size > max_size:
        raise FileValidationError(f"File size must be less than {max_size // (1024 * 1024)}MB")


class SessionWorkflow:
    """State machine for one meeting upload.

    Args:
        client: Backend client used for the health check and the processing request.
        store: Saved-session store; created on first save when not provided.
        clipboard: Callable that writes text to the user's clipboard.
        clock: Monotonic clock used for acknowledgement expiry.
        on_progress: Called with every progress update (percent, phase).
        progress_interval: Ticker cadence override in seconds.
    """

    def __init__(
        self,
        client: APIClient,
        store: SessionStore | None = None,
        clipboard: Callable[[str], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        on_progress: Callable[[int, str], None] | None = None,
        progress_interval: float | None = None,
    ) -> None:
        settings = get_settings()
        self.client = client
        self.store = store
        self._clipboard = clipboard
        self._clock = clock
        self._ack_seconds = settings.ack_seconds
        self._progress_interval = progress_interval
        self.on_progress = on_progress
        self.max_file_size = settings.max_file_size_bytes
        self.max_retries = settings.max_retries

        self.state = WorkflowState.idle
        self.selection: UploadSelection | None = None
        self.source_language: Language = DEFAULT_SOURCE_LANGUAGE
        self.target_language: Language = DEFAULT_TARGET_LANGUAGE
        self.pre_meeting_notes = ""
        self.preview: AudioPreview | None = None

        self.result: ProcessedResult | None = None
        self.metadata: ProcessingMetadata | None = None
        self.error: str | None = None
        self.error_code: str | None = None
        self.error_retryable = False
        self.progress = 0
        self.phase = ""
        self.retry_count = 0
        self.online = True

        self._last_request: UploadSelection | None = None
        self._result_notes = ""
        self._generation = 0
        self._in_flight = False
        self._saved_until = 0.0
        self._copied_tag: str | None = None
        self._copied_until = 0.0

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def is_processing(self) -> bool:
        return self.state is WorkflowState.processing

    @property
    def request_in_flight(self) -> bool:
        """True while a health check or processing request is outstanding.

        Stays set after a reset until the abandoned request settles.
        """
        return self._in_flight

    @property
    def can_submit(self) -> bool:
        return self.selection is not None and not self._in_flight

    @property
    def can_retry(self) -> bool:
        return (
            self.state is WorkflowState.failed
            and self.error_retryable
            and self.retry_count < self.max_retries
        )

    @property
    def retries_exhausted(self) -> bool:
        return self.state is WorkflowState.failed and self.retry_count >= self.max_retries

    @property
    def saved(self) -> bool:
        """True for ``ack_seconds`` after a successful save."""
        return self._clock() < self._saved_until

    @property
    def copied_tag(self) -> str | None:
        """Tag of the last copied field, for ``ack_seconds`` after the copy."""
        if self._copied_tag is not None and self._clock() < self._copied_until:
            return self._copied_tag
        return None

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_file(self, file_name: str, content: bytes, mime_type: str = "") -> UploadSelection:
        """Select a file from the picker or a drop.

        On rejection the error is surfaced and everything else is left as
        it was.

        Raises:
            FileValidationError: Disallowed type or size.
            WorkflowStateError: A request is in flight.
        """
        if self.is_processing:
            raise WorkflowStateError("Cannot change the file while processing")

        try:
            validate_upload(file_name, mime_type, len(content), self.max_file_size)
        except FileValidationError as exc:
            self._set_error(exc)
            raise

        if self.preview is not None:
            self.preview.release()
        self.selection = UploadSelection(
            file_name=file_name,
            content=content,
            mime_type=mime_type,
            source_language=self.source_language,
            target_language=self.target_language,
            pre_meeting_notes=self.pre_meeting_notes,
        )
        self.preview = AudioPreview(self.selection)
        self.state = WorkflowState.file_selected
        self.result = None
        self.metadata = None
        self.retry_count = 0
        self._clear_error()
        logger.info("Selected %s (%d bytes)", file_name, len(content))
        return self.selection

    def set_languages(self, source: Language | str, target: Language | str) -> None:
        self.source_language = Language(source)
        self.target_language = Language(target)
        self._sync_selection()

    def set_notes(self, notes: str) -> None:
        self.pre_meeting_notes = notes
        self._sync_selection()

    def _sync_selection(self) -> None:
        if self.selection is not None:
            self.selection = self.selection.model_copy(
                update={
                    "source_language": self.source_language,
                    "target_language": self.target_language,
                    "pre_meeting_notes": self.pre_meeting_notes,
                }
            )

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    async def check_connection(self) -> bool:
        """Run the connectivity check and record the result in ``online``."""
        self.online = await self.client.check_connection()
        return self.online

    async def submit(self) -> WorkflowState:
        """Send the current selection to the backend.

        Returns:
            The state the workflow ended in.
        """
        if self._in_flight:
            logger.warning("Submit ignored: a request is already in flight")
            return self.state
        if self.selection is None:
            self.error = NO_FILE_MESSAGE
            self.error_code = None
            self.error_retryable = False
            return self.state
        return await self._process(self.selection)

    async def retry(self) -> WorkflowState:
        """Resubmit the last request while under the retry limit.

        At the limit this only shows the terminal message; no request is made.
        """
        if self.state is not WorkflowState.failed or self._last_request is None:
            raise WorkflowStateError("Nothing to retry")
        if self._in_flight:
            logger.warning("Retry ignored: a request is already in flight")
            return self.state
        if self.retry_count >= self.max_retries:
            self.error = RETRY_EXHAUSTED_MESSAGE
            self.error_retryable = False
            return self.state
        return await self._process(self._last_request)

    async def _process(self, request: UploadSelection) -> WorkflowState:
        self._in_flight = True
        try:
            return await self._run_request(request)
        finally:
            self._in_flight = False

    async def _run_request(self, request: UploadSelection) -> WorkflowState:
        checked_generation = self._generation
        online = await self.check_connection()
        if self._generation != checked_generation:
            logger.info("Dropping submission of %s: workflow was reset", request.file_name)
            return self.state
        if not online:
            self._set_error(ConnectivityError())
            return self.state

        self._generation += 1
        generation = self._generation
        self._last_request = request
        self.state = WorkflowState.processing
        self._clear_error()
        self._publish_progress(0, INITIAL_PHASE)

        def on_tick(step: ProgressStep) -> None:
            if self._generation == generation and self.is_processing:
                self._publish_progress(step.percent, step.label)

        try:
            async with ProgressTicker(on_tick, interval=self._progress_interval):
                payload = await self.client.process_audio(request)
            result, metadata = normalize_response(payload, request)
        except MeetingAIError as exc:
            if self._generation == generation:
                self._fail(exc)
            return self.state
        except Exception as exc:
            logger.exception("Processing %s failed unexpectedly", request.file_name)
            if self._generation == generation:
                self._fail(UnexpectedError(str(exc) or "An unexpected error occurred"))
            return self.state

        if self._generation != generation:
            logger.info("Discarding result for %s: workflow was reset", request.file_name)
            return self.state

        self.result = result
        self.metadata = metadata
        self._result_notes = request.notes
        self.state = WorkflowState.succeeded
        self._publish_progress(100, PROGRESS_STEPS[-1].label)
        logger.info(
            "Processed %s: %d action items, %d key decisions",
            request.file_name,
            len(result.action_items),
            len(result.key_decisions),
        )
        return self.state

    def _fail(self, exc: MeetingAIError) -> None:
        logger.warning("Processing failed (%s): %s", exc.code, exc.detail)
        self.state = WorkflowState.failed
        self._set_error(exc)
        self._publish_progress(0, "")
        self.retry_count += 1

    def _publish_progress(self, percent: int, phase: str) -> None:
        self.progress = percent
        self.phase = phase
        if self.on_progress is not None:
            self.on_progress(percent, phase)

    # ------------------------------------------------------------------
    # Reset
    # ------------------------------------------------------------------

    def remove_file(self) -> None:
        """Drop the selected file together with any result ("Remove")."""
        self._clear_all()

    def reset(self) -> None:
        """Return to idle for a new file ("Process New File")."""
        self._clear_all()
        self.progress = 0
        self.phase = ""

    def _clear_all(self) -> None:
        if self._in_flight:
            # The outstanding request is discarded when it settles.
            self._generation += 1
        if self.preview is not None:
            self.preview.release()
        self.preview = None
        self.selection = None
        self.result = None
        self.metadata = None
        self.retry_count = 0
        self._last_request = None
        self._clear_error()
        self.state = WorkflowState.idle

    def dismiss_error(self) -> None:
        self._clear_error()

    def _set_error(self, exc: MeetingAIError) -> None:
        self.error = exc.detail
        self.error_code = exc.code
        self.error_retryable = exc.retryable

    def _clear_error(self) -> None:
        self.error = None
        self.error_code = None
        self.error_retryable = False

    # ------------------------------------------------------------------
    # Side effects on a completed result
    # ------------------------------------------------------------------

    def _require_result(self) -> tuple[ProcessedResult, ProcessingMetadata]:
        if self.state is not WorkflowState.succeeded or self.result is None or self.metadata is None:
            raise WorkflowStateError("No processed result available")
        return self.result, self.metadata

    async def save(self) -> SessionRecord:
        """Append the current result to the local session store."""
        result, metadata = self._require_result()
        if self.store is None:
            self.store = SessionStore()
            await self.store.init()

        record = SessionRecord(
            timestamp=datetime.now(UTC).isoformat(),
            file_name=metadata.file_name,
            processed_data=result,
            metadata=metadata,
            pre_meeting_notes=self._result_notes,
        )
        await self.store.append(record)
        self._saved_until = self._clock() + self._ack_seconds
        return record

    def export_text(self) -> ExportFile:
        result, metadata = self._require_result()
        return build_export("txt", result, metadata, self._result_notes)

    def export_json(self) -> ExportFile:
        result, metadata = self._require_result()
        return build_export("json", result, metadata, self._result_notes)

    def copy(self, text: str, tag: str) -> bool:
        """Copy *text* to the clipboard and acknowledge it under *tag*.

        Clipboard failures are logged, not surfaced.
        """
        self._require_result()
        if self._clipboard is None:
            logger.warning("No clipboard available; cannot copy %s", tag)
            return False
        try:
            self._clipboard(text)
        except Exception:
            logger.exception("Failed to copy %s", tag)
            return False
        self._copied_tag = tag
        self._copied_until = self._clock() + self._ack_seconds
        return True
