"""
Browser bridges for Streamlit.

Clipboard and speech synthesis live in the user's browser, not in the
Streamlit server process, so both are driven by injecting a tiny script
into a zero-height component iframe. Button handlers usually end with
``st.rerun()``, so scripts are queued in session state and emitted by
``flush_scripts()`` at the end of the next run.
"""

import json

import streamlit as st
import streamlit.components.v1 as components

_QUEUE_KEY = "_pending_browser_scripts"


def _queue_script(body: str) -> None:
    st.session_state.setdefault(_QUEUE_KEY, []).append(body)


def flush_scripts() -> None:
    """Emit every queued script once."""
    for body in st.session_state.pop(_QUEUE_KEY, []):
        components.html(f"<script>{body}</script>", height=0)


def copy_to_clipboard(text: str) -> None:
    """Write *text* to the browser clipboard."""
    _queue_script(
        "window.parent.navigator.clipboard.writeText("
        f"{json.dumps(text)}"
        ").catch((err) => console.error('Failed to copy text: ', err));"
    )


_WORDS_PER_SECOND = 2.5  # Typical speechSynthesis rate at the default 1.0


class BrowserSpeechEngine:
    """``SpeechEngine`` backed by the browser's ``speechSynthesis`` singleton."""

    def speak(self, text: str, language: str) -> float:
        _queue_script(
            "const synth = window.parent.speechSynthesis;"
            "synth.cancel();"
            f"const utterance = new SpeechSynthesisUtterance({json.dumps(text)});"
            f"utterance.lang = {json.dumps(language)};"
            "synth.speak(utterance);"
        )
        return len(text.split()) / _WORDS_PER_SECOND + 1.0

    def cancel(self) -> None:
        _queue_script("window.parent.speechSynthesis.cancel();")
