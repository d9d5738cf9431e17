"""
MeetingAI exception hierarchy.

All application-specific exceptions inherit from MeetingAIError, so the
workflow controller can convert any of them into an inline UI message.
``retryable`` marks the errors that offer a manual retry button.
"""

from datetime import UTC, datetime


class MeetingAIError(Exception):
    """Base exception for all MeetingAI errors."""

    retryable: bool = False

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "MEETINGAI_ERROR",
    ) -> None:
        self.detail = detail
        self.code = code
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class FileValidationError(MeetingAIError):
    """Raised when a selected file has a bad type or exceeds the size limit."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail=detail, code="FILE_VALIDATION_ERROR")


class ConnectivityError(MeetingAIError):
    """Raised when the health check fails before submission."""

    def __init__(
        self,
        detail: str = "No internet connection. Please check your network and try again.",
    ) -> None:
        super().__init__(detail=detail, code="CONNECTIVITY_ERROR")


class HttpError(MeetingAIError):
    """Raised when the backend answers with a non-2xx status."""

    retryable = True

    def __init__(self, detail: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(detail=detail, code="HTTP_ERROR")


class BusinessError(MeetingAIError):
    """Raised when the backend answers 2xx but reports failure or omits data."""

    retryable = True

    def __init__(self, detail: str = "Processing failed - backend returned success=false") -> None:
        super().__init__(detail=detail, code="BUSINESS_ERROR")


class UnexpectedError(MeetingAIError):
    """Raised for any other failure during processing (transport, bad JSON)."""

    retryable = True

    def __init__(self, detail: str = "An unexpected error occurred") -> None:
        super().__init__(detail=detail, code="UNEXPECTED_ERROR")


class WorkflowStateError(MeetingAIError):
    """Raised when an operation is invoked in a state that does not allow it."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail=detail, code="WORKFLOW_STATE_ERROR")


class StorageError(MeetingAIError):
    """Raised when the local session store cannot be written."""

    def __init__(self, detail: str = "Failed to save session") -> None:
        super().__init__(detail=detail, code="STORAGE_ERROR")
