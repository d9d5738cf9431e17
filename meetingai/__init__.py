"""MeetingAI - upload a meeting recording, get transcript, translation and summary."""

__version__ = "0.1.0"
