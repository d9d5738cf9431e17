"""
Result display components.

Transcript / translation / summary cards with copy and read-aloud,
action items, key decisions, processing metadata and the save/export bar.
"""

from collections.abc import Sequence

import streamlit as st

from meetingai.core.exceptions import StorageError
from meetingai.core.models import ActionItem, Priority, ProcessingMetadata
from meetingai.core.utils import format_megabytes
from meetingai.services.export import write_export
from meetingai.ui.components.uploader import clear_uploader
from meetingai.ui.state import get_speech, get_workflow, run_workflow

_PRIORITY_BADGES = {
    Priority.high: "\U0001f534 High",
    Priority.medium: "\U0001f7e1 Medium",
    Priority.low: "\U0001f7e2 Low",
}


def _text_card(title: str, text: str, tag: str, speak_language: str | None = None) -> None:
    """Render one text field with Copy (and optionally Read aloud) buttons."""
    workflow = get_workflow()
    speech = get_speech()

    with st.container(border=True):
        col_title, col_copy, col_speak = st.columns([4, 1, 1])
        with col_title:
            st.markdown(f"**{title}**")
        with col_copy:
            label = "Copied!" if workflow.copied_tag == tag else "Copy"
            if st.button(label, key=f"copy_{tag}", disabled=not text):
                workflow.copy(text, tag)
                st.rerun()
        with col_speak:
            if speak_language is not None:
                label = "Stop" if speech.is_speaking(tag) else "Read aloud"
                if st.button(label, key=f"speak_{tag}", disabled=not text):
                    speech.toggle(text, speak_language, tag)
                    st.rerun()
        st.write(text or "_Nothing returned._")


def render_action_items(items: Sequence[ActionItem]) -> None:
    st.subheader(f"Action Items ({len(items)})")
    if not items:
        st.caption("No action items identified.")
        return
    for index, action in enumerate(items, start=1):
        with st.container(border=True):
            col_item, col_priority = st.columns([5, 1])
            with col_item:
                st.markdown(f"**{index}. {action.item}**")
                details = []
                if action.assignee:
                    details.append(f"Assignee: {action.assignee}")
                if action.due_date:
                    details.append(f"Due: {action.due_date}")
                if details:
                    st.caption("  |  ".join(details))
            with col_priority:
                st.caption(_PRIORITY_BADGES[action.priority])


def render_key_decisions(decisions: Sequence[str]) -> None:
    st.subheader(f"Key Decisions ({len(decisions)})")
    if not decisions:
        st.caption("No key decisions recorded.")
        return
    for index, decision in enumerate(decisions, start=1):
        st.markdown(f"{index}. {decision}")


def render_metadata(metadata: ProcessingMetadata, collapsible: bool = True) -> None:
    timing = metadata.processing_time
    container = st.expander("Processing details") if collapsible else st.container()
    with container:
        st.table(
            [
                {"Field": "File", "Value": metadata.file_name},
                {"Field": "Source language", "Value": metadata.source_language},
                {"Field": "Target language", "Value": metadata.target_language},
                {"Field": "Audio format", "Value": metadata.audio_format},
                {"Field": "File size", "Value": format_megabytes(metadata.file_size)},
                {
                    "Field": "Pre-meeting notes",
                    "Value": "Provided" if metadata.pre_meeting_notes_provided else "None",
                },
                {"Field": "Speech service", "Value": f"{timing.source_service_seconds:g}s"},
                {"Field": "Summary service", "Value": f"{timing.summarization_service_seconds:g}s"},
                {"Field": "Total", "Value": f"{timing.total_seconds:g}s"},
            ]
        )


def _render_actions() -> None:
    workflow = get_workflow()
    text_export = workflow.export_text()
    json_export = workflow.export_json()

    col_save, col_txt, col_json, col_new = st.columns(4)
    with col_save:
        if st.button("Saved!" if workflow.saved else "Save Session", use_container_width=True):
            try:
                run_workflow(lambda w: w.save())
            except StorageError as exc:
                st.error(exc.detail)
            else:
                st.rerun()
    with col_txt:
        st.download_button(
            "Export TXT",
            data=text_export.content,
            file_name=text_export.file_name,
            mime=text_export.mime_type,
            use_container_width=True,
        )
    with col_json:
        st.download_button(
            "Export JSON",
            data=json_export.content,
            file_name=json_export.file_name,
            mime=json_export.mime_type,
            use_container_width=True,
        )
    with col_new:
        if st.button("Process New File", type="primary", use_container_width=True):
            get_speech().stop()
            workflow.reset()
            clear_uploader()
            st.rerun()

    if st.button("Write exports to folder", key="write_exports"):
        paths = [write_export(text_export), write_export(json_export)]
        st.success("Exported: " + ", ".join(str(p) for p in paths))


def render_results() -> None:
    """Render the full result view for a succeeded workflow."""
    workflow = get_workflow()
    result, metadata = workflow.result, workflow.metadata
    if result is None or metadata is None:
        return

    st.success("Processing complete!")

    _text_card(f"Transcript ({metadata.source_language.upper()})", result.transcript, "transcript")
    _text_card(
        f"Translation ({metadata.target_language.upper()})",
        result.translation,
        "translation",
        speak_language=metadata.target_language,
    )
    _text_card("AI Summary", result.summary, "summary", speak_language="en")

    render_action_items(result.action_items)
    render_key_decisions(result.key_decisions)
    render_metadata(metadata)

    st.divider()
    _render_actions()
