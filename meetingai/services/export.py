"""
Plain-text and JSON export of a processed meeting.

Both renderers take the same ``ProcessedResult`` / ``ProcessingMetadata``
pair and list every action item and key decision exactly once, in order.
"""

import json
import logging
from datetime import UTC, date, datetime
from pathlib import Path

from meetingai.core.config import get_settings
from meetingai.core.models import ExportFile, ProcessedResult, ProcessingMetadata
from meetingai.core.utils import format_megabytes

logger = logging.getLogger(__name__)

TEXT_MIME = "text/plain"
JSON_MIME = "application/json"


def export_filename(fmt: str, today: date | None = None) -> str:
    """Return ``meeting-summary-<YYYY-MM-DD>.<fmt>``."""
    stamp = (today or datetime.now(UTC).date()).isoformat()
    return f"meeting-summary-{stamp}.{fmt}"


def _action_items_section(result: ProcessedResult) -> str:
    return "\n\n".join(
        f"{index}. {action.item}\n"
        f"   Assignee: {action.assignee}\n"
        f"   Priority: {action.priority.value}\n"
        f"   Due Date: {action.due_date}"
        for index, action in enumerate(result.action_items, start=1)
    )


def _key_decisions_section(result: ProcessedResult) -> str:
    return "\n".join(
        f"{index}. {decision}" for index, decision in enumerate(result.key_decisions, start=1)
    )


def render_text_report(
    result: ProcessedResult,
    metadata: ProcessingMetadata,
    pre_meeting_notes: str = "",
    generated_at: datetime | None = None,
) -> str:
    """Render the human-readable meeting report."""
    generated_at = generated_at or datetime.now()
    timing = metadata.processing_time
    sections = [
        f"Meeting Summary - {metadata.file_name}\n"
        f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        f"=== PRE-MEETING NOTES ===\n{pre_meeting_notes or 'No pre-meeting notes provided'}",
        f"=== RAW TRANSCRIPT ({metadata.source_language.upper()}) ===\n{result.transcript}",
        f"=== TRANSLATION ({metadata.target_language.upper()}) ===\n{result.translation}",
        f"=== AI SUMMARY ===\n{result.summary}",
        f"=== ACTION ITEMS ===\n{_action_items_section(result)}",
        f"=== KEY DECISIONS ===\n{_key_decisions_section(result)}",
        "=== PROCESSING METADATA ===\n"
        f"Source Language: {metadata.source_language}\n"
        f"Target Language: {metadata.target_language}\n"
        f"Audio Format: {metadata.audio_format}\n"
        f"File Size: {format_megabytes(metadata.file_size)}\n"
        f"Processing Time: {timing.total_seconds:g}s\n"
        f"Speech Service Time: {timing.source_service_seconds:g}s\n"
        f"Summary Service Time: {timing.summarization_service_seconds:g}s",
    ]
    return "\n\n".join(sections)


def render_json_report(
    result: ProcessedResult,
    metadata: ProcessingMetadata,
    pre_meeting_notes: str = "",
    exported_at: datetime | None = None,
) -> str:
    """Render the structured export document (2-space indent)."""
    exported_at = exported_at or datetime.now(UTC)
    document = {
        "preMeetingNotes": pre_meeting_notes,
        "rawTranscript": result.transcript,
        "translation": result.translation,
        "aiSummary": result.summary,
        "actionItems": [
            item.model_dump(mode="json", by_alias=True) for item in result.action_items
        ],
        "keyDecisions": list(result.key_decisions),
        "metadata": metadata.model_dump(mode="json", by_alias=True),
        "exportedAt": exported_at.isoformat(),
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def build_export(
    fmt: str,
    result: ProcessedResult,
    metadata: ProcessingMetadata,
    pre_meeting_notes: str = "",
) -> ExportFile:
    """Render *result* as ``"txt"`` or ``"json"`` with a date-stamped file name.

    Raises:
        ValueError: Unknown format.
    """
    if fmt == "txt":
        content = render_text_report(result, metadata, pre_meeting_notes)
        mime = TEXT_MIME
    elif fmt == "json":
        content = render_json_report(result, metadata, pre_meeting_notes)
        mime = JSON_MIME
    else:
        raise ValueError(f"Unsupported export format: {fmt!r}")
    return ExportFile(file_name=export_filename(fmt), content=content, mime_type=mime)


def write_export(export_file: ExportFile, output_dir: str | None = None) -> Path:
    """Write an export into *output_dir* (config default if None) and return its path."""
    directory = Path(output_dir or get_settings().exports_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_file.file_name
    path.write_text(export_file.content, encoding="utf-8")
    logger.info("Exported %s", path)
    return path
