"""
Read-aloud service for translation and summary text.

The speech engine is a process-wide singleton with at-most-one active
utterance: starting a new utterance cancels any in-flight one, and asking
to speak the channel that is already speaking stops it instead.

The browser engine cannot report back when an utterance finishes, so
``speak()`` returns an estimated duration and the channel counts as
speaking only until that estimate runs out.
"""

import logging
import time
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)


class SpeechEngine(Protocol):
    """Backend that actually produces speech (e.g. the browser's speechSynthesis)."""

    def speak(self, text: str, language: str) -> float | None:
        """Start an utterance; return its expected length in seconds, if known."""
        ...

    def cancel(self) -> None: ...


class SpeechService:
    """Tracks which text channel ("translation", "summary", ...) is speaking.

    Args:
        engine: The speech engine to drive.
        clock: Monotonic clock used to expire finished utterances.
    """

    def __init__(self, engine: SpeechEngine, clock: Callable[[], float] = time.monotonic) -> None:
        self._engine = engine
        self._clock = clock
        self._channel: str | None = None
        self._ends_at: float | None = None

    @property
    def speaking_channel(self) -> str | None:
        if self._channel is not None and self._ends_at is not None:
            if self._clock() >= self._ends_at:
                self._channel = None
                self._ends_at = None
        return self._channel

    def is_speaking(self, channel: str) -> bool:
        return self.speaking_channel == channel

    def toggle(self, text: str, language: str, channel: str) -> bool:
        """Speak *text* on *channel*, or stop it if that channel is speaking.

        Returns:
            True when an utterance was started.
        """
        was_speaking = self.speaking_channel
        self._cancel_engine()
        self._channel = None
        self._ends_at = None

        if was_speaking == channel or not text:
            return False

        try:
            duration = self._engine.speak(text, language)
        except Exception:
            logger.exception("Speech engine failed on %s channel", channel)
            return False

        self._channel = channel
        if isinstance(duration, int | float):
            self._ends_at = self._clock() + duration
        return True

    def stop(self) -> None:
        """Cancel any utterance (e.g. when the page is torn down)."""
        self._cancel_engine()
        self._channel = None
        self._ends_at = None

    def _cancel_engine(self) -> None:
        try:
            self._engine.cancel()
        except Exception:
            logger.warning("Speech engine cancel failed", exc_info=True)
