"""
MeetingAI Streamlit UI main entry point.

Run with: ``streamlit run meetingai/ui/app.py``
"""

import streamlit as st

from meetingai.core.config import get_settings
from meetingai.core.utils import setup_logging
from meetingai.ui.browser import flush_scripts
from meetingai.ui.state import check_connection, get_speech

# ---------------------------------------------------------------------------
# Page setup; set_page_config has to run before any other st call
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="MeetingAI",
    page_icon="\U0001f3a4",
    layout="wide",
)

_settings = get_settings()
setup_logging(_settings.log_level)

# ---------------------------------------------------------------------------
# Per-browser-session defaults
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "backend_url": _settings.backend_url,
    "uploaded_file_key": None,
    "accepted_file_key": None,
}

for key, value in _DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = value

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("\U0001f3a4 MeetingAI")
    st.caption("Transcribe, translate and summarize your meetings")
    st.divider()
    st.session_state.backend_url = st.text_input(
        "Backend API URL",
        value=st.session_state.backend_url,
        help=f"URL of the processing backend (default: {_settings.backend_url})",
    )

    # Check the backend on every rerun
    if check_connection():
        st.success("Connected")
    else:
        st.error("Offline")

# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------
process_page = st.Page(
    "pages/01_process.py",
    title="Process Meeting",
    icon="\U0001f4e4",
    default=True,
)
sessions_page = st.Page(
    "pages/02_sessions.py",
    title="Saved Sessions",
    icon="\U0001f4cb",
)

nav = st.navigation([process_page, sessions_page])

if nav != process_page:
    # Leaving the results view stops any read-aloud in progress.
    get_speech().stop()

nav.run()
flush_scripts()
