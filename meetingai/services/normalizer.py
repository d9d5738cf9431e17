"""
Response normalization for the process-audio endpoint.

``normalize_response`` turns the raw JSON payload into a
``ProcessedResult`` / ``ProcessingMetadata`` pair. Every field is defaulted
so a partially populated backend response never yields a missing value;
metadata falls back to the parameters of the request that produced it.
"""

from typing import Any

from meetingai.core.exceptions import BusinessError
from meetingai.core.models import (
    ActionItem,
    ProcessedResult,
    ProcessingMetadata,
    ProcessingTime,
    UploadSelection,
)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, int | float):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _action_items(raw: Any) -> list[ActionItem]:
    if not isinstance(raw, list):
        return []
    items: list[ActionItem] = []
    for entry in raw:
        if isinstance(entry, str):
            items.append(ActionItem(item=entry))
        elif isinstance(entry, dict):
            items.append(
                ActionItem(
                    item=_text(entry.get("item")),
                    assignee=_text(entry.get("assignee")),
                    priority=entry.get("priority"),
                    due_date=_text(entry.get("dueDate")),
                )
            )
    return items


def _key_decisions(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [_text(decision) for decision in raw if decision is not None]


def normalize_result(data: dict) -> ProcessedResult:
    """Build a ProcessedResult from the ``data`` object of a response."""
    return ProcessedResult(
        transcript=_text(data.get("transcript")),
        translation=_text(data.get("translation")),
        summary=_text(data.get("summary")),
        action_items=_action_items(data.get("actionItems")),
        key_decisions=_key_decisions(data.get("keyDecisions")),
    )


def normalize_metadata(raw: Any, selection: UploadSelection) -> ProcessingMetadata:
    """Build ProcessingMetadata, falling back to the request's own parameters."""
    meta = raw if isinstance(raw, dict) else {}
    timing = meta.get("processingTime")
    timing = timing if isinstance(timing, dict) else {}

    file_size = meta.get("fileSize")
    if isinstance(file_size, bool) or not isinstance(file_size, int | float) or not file_size:
        file_size = selection.size

    return ProcessingMetadata(
        source_language=_text(meta.get("sourceLanguage")) or selection.source_language.value,
        target_language=_text(meta.get("targetLanguage")) or selection.target_language.value,
        audio_format=_text(meta.get("audioFormat")) or "unknown",
        file_size=int(file_size),
        file_name=_text(meta.get("fileName")) or selection.file_name,
        pre_meeting_notes_provided=bool(meta.get("preMeetingNotesProvided")) or bool(selection.notes),
        processing_time=ProcessingTime(
            source_service_seconds=_number(timing.get("bhashini")),
            summarization_service_seconds=_number(timing.get("gemini")),
            total_seconds=_number(timing.get("total")),
        ),
    )


def normalize_response(
    payload: Any,
    selection: UploadSelection,
) -> tuple[ProcessedResult, ProcessingMetadata]:
    """Validate the response envelope and normalize its contents.

    Args:
        payload: Parsed JSON body of a 2xx response.
        selection: The upload that produced the response.

    Returns:
        The normalized result and metadata.

    Raises:
        BusinessError: ``success`` is not true or ``data`` is missing.
    """
    if not isinstance(payload, dict) or not payload.get("success"):
        error = payload.get("error") if isinstance(payload, dict) else None
        raise BusinessError(_text(error) or "Processing failed - backend returned success=false")

    data = payload.get("data")
    if not isinstance(data, dict):
        raise BusinessError("Invalid response format: missing data field")

    return normalize_result(data), normalize_metadata(payload.get("metadata"), selection)
