# client/api_client.py

import logging
from pathlib import Path
from typing import Any, List, Optional, Union

import backoff
import httpx

from api.schemas.songs import Song, UploadResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
MAX_READ_RETRIES = 3
MAX_RETRY_DELAY = 30


# =========================
# Errors
# =========================

class ApiError(Exception):
    """The backend answered with an error status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500


class BackendUnavailableError(Exception):
    """The backend could not be reached at all (connect error, timeout)."""


def _giveup(exc: Exception) -> bool:
    return isinstance(exc, ApiError) and exc.is_client_error


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if isinstance(body, dict):
        for key in ("error", "detail", "message"):
            if body.get(key):
                return str(body[key])
    return response.reason_phrase


# =========================
# Client
# =========================

class SongsApiClient:
    """
    HTTP client for the Song List API.

    Constructed once with its base URL and timeout and passed to whoever
    needs it. Owns its own httpx.Client.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_READ_RETRIES,
        retry_factor: float = 1.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.retry_factor = retry_factor
        self._http = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self._http.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.TransportError as e:
            raise BackendUnavailableError(
                f"Cannot reach backend at {self.base_url}: {e}"
            ) from e

        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))

        return response.json()

    # -------------------------
    # Reads (retried)
    # -------------------------

    def get_songs(self) -> List[Song]:
        """
        All songs ordered by band name.

        Retries transport failures and 5xx responses with exponential
        backoff; 4xx responses fail immediately.
        """
        fetch = backoff.on_exception(
            backoff.expo,
            (ApiError, BackendUnavailableError),
            max_tries=self.max_retries + 1,
            giveup=_giveup,
            max_value=MAX_RETRY_DELAY,
            factor=self.retry_factor,
        )(self._request)

        data = fetch("GET", "/songs")
        return [Song.model_validate(item) for item in data]

    def health_check(self) -> bool:
        """True if the backend answers its health endpoint."""
        try:
            self._request("GET", "/")
            return True
        except (ApiError, BackendUnavailableError) as e:
            logger.debug("Health check failed: %s", e)
            return False

    # -------------------------
    # Mutations (never retried)
    # -------------------------

    def upload_csv(self, path: Union[str, Path]) -> UploadResponse:
        path = Path(path)
        return self.upload_csv_bytes(path.name, path.read_bytes())

    def upload_csv_bytes(
        self,
        filename: str,
        content: bytes,
        content_type: str = "text/csv",
    ) -> UploadResponse:
        data = self._request(
            "POST",
            "/songs/upload-csv",
            files={"file": (filename, content, content_type)},
        )
        return UploadResponse.model_validate(data)

    def import_sample(self) -> UploadResponse:
        data = self._request("POST", "/songs/import")
        return UploadResponse.model_validate(data)
