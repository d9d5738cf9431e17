"""
Uploader component: file selection, language/notes options, processing
trigger, progress bar and error/retry display.
"""

import logging

import streamlit as st

from meetingai.core.exceptions import FileValidationError
from meetingai.core.models import LANGUAGE_NAMES, Language
from meetingai.core.utils import format_megabytes
from meetingai.services.workflow import SessionWorkflow
from meetingai.ui.state import get_workflow, run_workflow

logger = logging.getLogger(__name__)

_LANGUAGES = list(Language)


def _uploader_key() -> str:
    return f"audio_upload_{st.session_state.get('uploader_generation', 0)}"


def clear_uploader() -> None:
    """Reset the file_uploader widget by giving it a fresh key."""
    st.session_state.uploader_generation = st.session_state.get("uploader_generation", 0) + 1
    st.session_state.uploaded_file_key = None
    st.session_state.accepted_file_key = None


def release_cleared_upload(workflow: SessionWorkflow, cleared_key, accepted_key) -> bool:
    """Handle a file cleared from the widget itself.

    The selection is dropped only when the cleared file is the one the
    workflow accepted; clearing a rejected file keeps the earlier selection.
    """
    if cleared_key is None or cleared_key != accepted_key:
        return False
    workflow.remove_file()
    return True


def _handle_upload(workflow: SessionWorkflow) -> None:
    uploaded = st.file_uploader(
        "Drop an audio file here or browse (WAV, MP3, FLAC, M4A, OGG, max 50MB)",
        disabled=workflow.is_processing,
        key=_uploader_key(),
    )

    if uploaded is None:
        cleared_key = st.session_state.get("uploaded_file_key")
        if cleared_key is not None:
            if release_cleared_upload(
                workflow, cleared_key, st.session_state.get("accepted_file_key")
            ):
                st.session_state.accepted_file_key = None
            st.session_state.uploaded_file_key = None
        return

    file_key = (uploaded.name, uploaded.size, getattr(uploaded, "file_id", None))
    if file_key == st.session_state.get("uploaded_file_key"):
        return

    st.session_state.uploaded_file_key = file_key
    try:
        workflow.select_file(uploaded.name, uploaded.getvalue(), uploaded.type or "")
    except FileValidationError as exc:
        logger.info("Rejected upload %s: %s", uploaded.name, exc.detail)
    else:
        st.session_state.accepted_file_key = file_key


def _render_selected_file(workflow: SessionWorkflow) -> None:
    selection = workflow.selection
    if selection is None:
        return

    with st.container(border=True):
        st.markdown(f"**{selection.file_name}**")
        st.caption(format_megabytes(selection.size))

        preview = workflow.preview
        col_play, col_remove = st.columns(2)
        with col_play:
            label = "Hide player" if preview is not None and preview.is_open else "Preview"
            if st.button(label, key="preview_toggle", use_container_width=True):
                if preview is not None:
                    preview.toggle()
                st.rerun()
        with col_remove:
            if st.button(
                "Remove",
                key="remove_file",
                disabled=workflow.is_processing,
                use_container_width=True,
            ):
                workflow.remove_file()
                clear_uploader()
                st.rerun()

        if preview is not None and preview.is_open and preview.source is not None:
            # The native player owns play/pause/ended.
            st.audio(preview.source.data, format=preview.source.mime_type, autoplay=True)


def _render_options(workflow: SessionWorkflow) -> None:
    col_src, col_tgt = st.columns(2)
    with col_src:
        source = st.selectbox(
            "Source language",
            _LANGUAGES,
            index=_LANGUAGES.index(workflow.source_language),
            format_func=lambda lang: LANGUAGE_NAMES[lang],
            disabled=workflow.is_processing,
        )
    with col_tgt:
        target = st.selectbox(
            "Target language",
            _LANGUAGES,
            index=_LANGUAGES.index(workflow.target_language),
            format_func=lambda lang: LANGUAGE_NAMES[lang],
            disabled=workflow.is_processing,
        )
    if (source, target) != (workflow.source_language, workflow.target_language):
        workflow.set_languages(source, target)

    notes = st.text_area(
        "Pre-meeting notes (optional)",
        value=workflow.pre_meeting_notes,
        placeholder="Agenda, participants, context the summary should take into account...",
        disabled=workflow.is_processing,
    )
    if notes != workflow.pre_meeting_notes:
        workflow.set_notes(notes)


def _process(workflow: SessionWorkflow, retry: bool = False) -> None:
    """Run submit/retry with a live progress bar, then rerun the page."""
    bar = st.progress(0, text="Initializing...")
    workflow.on_progress = lambda percent, phase: bar.progress(percent, text=phase or " ")
    try:
        if retry:
            run_workflow(lambda w: w.retry())
        else:
            run_workflow(lambda w: w.submit())
    finally:
        workflow.on_progress = None
    st.rerun()


def render_uploader() -> None:
    """Render the upload card."""
    workflow = get_workflow()
    st.subheader("Upload Audio File")

    _handle_upload(workflow)
    _render_selected_file(workflow)
    _render_options(workflow)

    if st.button(
        "Processing..." if workflow.is_processing else "Process Audio",
        type="primary",
        disabled=not workflow.can_submit,
        use_container_width=True,
    ):
        _process(workflow)


def render_status() -> None:
    """Render progress, the inline error and the retry affordance."""
    workflow = get_workflow()

    if workflow.progress and workflow.phase:
        st.progress(workflow.progress, text=workflow.phase)

    if not workflow.error:
        return

    st.error(workflow.error)
    col_retry, col_dismiss = st.columns(2)
    with col_retry:
        if workflow.can_retry:
            if st.button(
                f"Retry ({workflow.retry_count}/{workflow.max_retries})",
                key="retry",
                use_container_width=True,
            ):
                _process(workflow, retry=True)
        elif workflow.retries_exhausted and workflow.error_code is not None:
            if st.button("Retry", key="retry_exhausted", use_container_width=True):
                # Shows the terminal message; no request is made.
                run_workflow(lambda w: w.retry())
                st.rerun()
    with col_dismiss:
        if st.button("Dismiss", key="dismiss_error", use_container_width=True):
            workflow.dismiss_error()
            st.rerun()
