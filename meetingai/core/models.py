"""
Pydantic v2 models shared by the workflow, the backend client and storage.

Wire-facing models serialize with camelCase aliases so exported and
persisted JSON matches the backend's response contract.
"""

from dataclasses import dataclass
from enum import StrEnum
from pathlib import PurePath

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# ---------------------------------------------------------------------------
# Languages
# ---------------------------------------------------------------------------


class Language(StrEnum):
    """Language tags accepted by the backend for source and target."""

    hi = "hi"
    en = "en"
    bn = "bn"
    te = "te"
    mr = "mr"
    ta = "ta"
    gu = "gu"
    kn = "kn"
    ml = "ml"
    pa = "pa"
    or_ = "or"
    as_ = "as"

    @property
    def display_name(self) -> str:
        return LANGUAGE_NAMES[self]


LANGUAGE_NAMES: dict[Language, str] = {
    Language.hi: "Hindi",
    Language.en: "English",
    Language.bn: "Bengali",
    Language.te: "Telugu",
    Language.mr: "Marathi",
    Language.ta: "Tamil",
    Language.gu: "Gujarati",
    Language.kn: "Kannada",
    Language.ml: "Malayalam",
    Language.pa: "Punjabi",
    Language.or_: "Odia",
    Language.as_: "Assamese",
}

DEFAULT_SOURCE_LANGUAGE = Language.hi
DEFAULT_TARGET_LANGUAGE = Language.en


class _WireModel(BaseModel):
    """Immutable model serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------

ALLOWED_MIME_TYPES = frozenset(
    {"audio/wav", "audio/mp3", "audio/mpeg", "audio/flac", "audio/m4a", "audio/ogg"}
)
ALLOWED_EXTENSIONS = frozenset({".wav", ".mp3", ".flac", ".m4a", ".ogg"})


class UploadSelection(BaseModel):
    """The audio file and options the user picked for one processing run."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    content: bytes = Field(repr=False)
    mime_type: str = ""
    source_language: Language = DEFAULT_SOURCE_LANGUAGE
    target_language: Language = DEFAULT_TARGET_LANGUAGE
    pre_meeting_notes: str = ""

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return PurePath(self.file_name).suffix.lower()

    @property
    def notes(self) -> str:
        """Trimmed notes; empty means none are sent."""
        return self.pre_meeting_notes.strip()


# ---------------------------------------------------------------------------
# Processed result
# ---------------------------------------------------------------------------


class Priority(StrEnum):
    """Action item priority."""

    low = "Low"
    medium = "Medium"
    high = "High"


class ActionItem(_WireModel):
    """A follow-up task extracted from the meeting."""

    item: str = ""
    assignee: str = ""
    priority: Priority = Priority.medium
    due_date: str = ""

    @field_validator("priority", mode="before")
    @classmethod
    def _coerce_priority(cls, value: object) -> Priority:
        if isinstance(value, Priority):
            return value
        for priority in Priority:
            if str(value or "").strip().lower() == priority.value.lower():
                return priority
        return Priority.medium


class ProcessedResult(_WireModel):
    """Transcript, translation and summary of one successful backend call."""

    transcript: str = ""
    translation: str = ""
    summary: str = ""
    action_items: tuple[ActionItem, ...] = ()
    key_decisions: tuple[str, ...] = ()


class ProcessingTime(_WireModel):
    """Per-service timings reported by the backend, in seconds."""

    source_service_seconds: float = Field(default=0.0, alias="bhashini")
    summarization_service_seconds: float = Field(default=0.0, alias="gemini")
    total_seconds: float = Field(default=0.0, alias="total")


class ProcessingMetadata(_WireModel):
    """Request parameters and timings paired with a ProcessedResult."""

    source_language: str
    target_language: str
    audio_format: str = "unknown"
    file_size: int = 0
    file_name: str = ""
    pre_meeting_notes_provided: bool = False
    processing_time: ProcessingTime = Field(default_factory=ProcessingTime)


class SessionRecord(_WireModel):
    """A saved snapshot of one processed meeting."""

    timestamp: str
    file_name: str
    processed_data: ProcessedResult
    metadata: ProcessingMetadata
    pre_meeting_notes: str = ""


# ---------------------------------------------------------------------------
# Workflow
# ---------------------------------------------------------------------------


class WorkflowState(StrEnum):
    """States of the upload-and-process workflow."""

    idle = "idle"
    file_selected = "file_selected"
    processing = "processing"
    succeeded = "succeeded"
    failed = "failed"


@dataclass(frozen=True)
class ProgressStep:
    """One checkpoint of the cosmetic progress bar."""

    percent: int
    label: str


PROGRESS_STEPS: tuple[ProgressStep, ...] = (
    ProgressStep(10, "Checking connectivity..."),
    ProgressStep(20, "Uploading audio file..."),
    ProgressStep(35, "Authenticating with speech service..."),
    ProgressStep(50, "Transcribing speech..."),
    ProgressStep(65, "Translating content..."),
    ProgressStep(80, "Generating AI summary..."),
    ProgressStep(95, "Finalizing results..."),
    ProgressStep(100, "Processing complete!"),
)


@dataclass(frozen=True)
class ExportFile:
    """A rendered export ready to be downloaded or written to disk."""

    file_name: str
    content: str
    mime_type: str
