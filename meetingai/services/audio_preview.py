"""Audio preview of the selected upload.

The payload handed to the player is bound lazily the first time the
preview is opened and then reused. Playback itself (play, pause, ended)
belongs to the native audio element, so no playing flag is kept here.
"""

from dataclasses import dataclass

from meetingai.core.models import UploadSelection


@dataclass(frozen=True)
class PreviewSource:
    data: bytes
    mime_type: str


class AudioPreview:
    """Open/closed state of the player for an ``UploadSelection``."""

    def __init__(self, selection: UploadSelection) -> None:
        self._selection = selection
        self.source: PreviewSource | None = None
        self.is_open = False

    def toggle(self) -> bool:
        """Show or hide the player; returns the new ``is_open`` value."""
        if self.is_open:
            self.is_open = False
        else:
            if self.source is None:
                self.source = PreviewSource(
                    data=self._selection.content,
                    mime_type=self._selection.mime_type or "audio/wav",
                )
            self.is_open = True
        return self.is_open

    def release(self) -> None:
        """Drop the bound payload (file removed or replaced)."""
        self.source = None
        self.is_open = False
