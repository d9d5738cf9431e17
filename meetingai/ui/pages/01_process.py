"""
Process page: upload audio, send to backend, display results.

UX flow: idle -> file selected -> processing -> succeeded | failed
"""

import streamlit as st

from meetingai.core.models import WorkflowState
from meetingai.ui.components.results import render_results
from meetingai.ui.components.uploader import render_status, render_uploader
from meetingai.ui.state import get_workflow

st.header("AI Meeting Assistant")
st.caption(
    "Transform your meeting recordings into actionable insights with AI-powered "
    "transcription, translation, and summarization"
)

col_upload, col_results = st.columns([1, 2])

with col_upload:
    render_uploader()
    render_status()

with col_results:
    if get_workflow().state is WorkflowState.succeeded:
        render_results()
    else:
        st.info("Results will appear here once your audio has been processed.")
