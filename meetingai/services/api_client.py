"""
Asynchronous HTTP client for the MeetingAI processing backend.

Uses ``httpx.AsyncClient`` so the processing request can run alongside the
cosmetic progress ticker on one event loop.
"""

import asyncio
import logging

import httpx

from meetingai.core.config import get_settings
from meetingai.core.exceptions import HttpError, UnexpectedError
from meetingai.core.models import UploadSelection

logger = logging.getLogger(__name__)


def extract_error_message(response: httpx.Response) -> str:
    """Best-effort error message from a non-2xx response.

    Tries the JSON ``error`` (then ``detail``) field, then the raw body
    text, then the HTTP status line.
    """
    status_line = f"HTTP {response.status_code}: {response.reason_phrase}"
    try:
        body = response.json()
    except ValueError:
        logger.warning("Failed to parse error response as JSON")
        return response.text or status_line

    if isinstance(body, dict):
        message = body.get("error") or body.get("detail")
        if message:
            return str(message)
    return status_line


class APIClient:
    """Thin wrapper around httpx for calling the processing backend.

    Args:
        base_url: Base URL of the backend. Uses settings if not provided.
        transport: Optional httpx transport override (used in tests).
        timeout: Processing request timeout in seconds; ``None`` waits indefinitely.
        health_timeout: Upper bound for the health check, in seconds.
    """

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
        health_timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.backend_url).rstrip("/")
        self._health_path = settings.health_path
        self._process_path = settings.process_path
        self._health_timeout = (
            health_timeout if health_timeout is not None else settings.health_timeout
        )
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            transport=transport,
            timeout=timeout if timeout is not None else settings.request_timeout,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> "APIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -- health --

    async def check_connection(self) -> bool:
        """Call the health endpoint. Any 2xx means online; never raises.

        Bounded by ``health_timeout`` even when the client itself has no
        timeout: a backend that accepts the connection but never answers
        counts as offline.
        """
        try:
            async with asyncio.timeout(self._health_timeout):
                resp = await self._client.get(
                    self._health_path,
                    headers={"Cache-Control": "no-cache"},
                    timeout=self._health_timeout,
                )
        except TimeoutError:
            logger.warning("Health check timed out after %ss", self._health_timeout)
            return False
        except httpx.HTTPError as exc:
            logger.warning("Health check failed: %s", exc)
            return False
        return resp.is_success

    # -- processing --

    async def process_audio(self, selection: UploadSelection) -> dict:
        """Upload the audio and return the parsed JSON response body.

        Args:
            selection: The file, languages and notes to send.

        Returns:
            The decoded JSON payload of a 2xx response (envelope not validated).

        Raises:
            HttpError: The backend answered with a non-2xx status.
            UnexpectedError: Transport failure or a non-JSON success body.
        """
        data = {
            "sourceLanguage": selection.source_language.value,
            "targetLanguage": selection.target_language.value,
        }
        if selection.notes:
            data["preMeetingNotes"] = selection.notes
        files = {
            "audio": (
                selection.file_name,
                selection.content,
                selection.mime_type or "application/octet-stream",
            )
        }

        logger.info("Sending %s (%d bytes) to backend", selection.file_name, selection.size)
        try:
            resp = await self._client.post(self._process_path, data=data, files=files)
        except httpx.HTTPError as exc:
            raise UnexpectedError(f"Network error: {exc}") from exc

        logger.info("Response status: %s", resp.status_code)
        if not resp.is_success:
            raise HttpError(extract_error_message(resp), status_code=resp.status_code)

        try:
            return resp.json()
        except ValueError as exc:
            raise UnexpectedError(f"Invalid JSON in response: {exc}") from exc
