"""
Saved Sessions page: browse sessions saved on this device and
re-download them as TXT or JSON.
"""

from datetime import datetime

import streamlit as st

from meetingai.services.export import (
    JSON_MIME,
    TEXT_MIME,
    export_filename,
    render_json_report,
    render_text_report,
)
from meetingai.ui.components.results import (
    render_action_items,
    render_key_decisions,
    render_metadata,
)
from meetingai.ui.state import load_saved_sessions

st.header("Saved Sessions")

try:
    sessions = load_saved_sessions()
except Exception as exc:
    st.error(f"Could not load saved sessions: {exc}")
    sessions = []

if not sessions:
    st.info("No saved sessions yet. Process a meeting and click **Save Session**.")
    st.stop()

st.caption(f"{len(sessions)} saved session(s)")

# Newest first; index keeps widget keys unique across identical timestamps.
for index, record in reversed(list(enumerate(sessions))):
    saved_at = datetime.fromisoformat(record.timestamp)
    label = f"{record.file_name}  |  {saved_at:%Y-%m-%d %H:%M}"
    with st.expander(label):
        if record.pre_meeting_notes:
            st.markdown("**Pre-meeting notes**")
            st.write(record.pre_meeting_notes)
        st.markdown("**Summary**")
        st.write(record.processed_data.summary or "_No summary._")
        render_action_items(record.processed_data.action_items)
        render_key_decisions(record.processed_data.key_decisions)
        render_metadata(record.metadata, collapsible=False)

        col_txt, col_json = st.columns(2)
        day = saved_at.date()
        with col_txt:
            st.download_button(
                "Download TXT",
                data=render_text_report(
                    record.processed_data, record.metadata, record.pre_meeting_notes
                ),
                file_name=export_filename("txt", day),
                mime=TEXT_MIME,
                key=f"session_txt_{index}",
            )
        with col_json:
            st.download_button(
                "Download JSON",
                data=render_json_report(
                    record.processed_data, record.metadata, record.pre_meeting_notes
                ),
                file_name=export_filename("json", day),
                mime=JSON_MIME,
                key=f"session_json_{index}",
            )
