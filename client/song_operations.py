# client/song_operations.py

import logging
from pathlib import Path
from typing import List, Optional, Union

from api.schemas.songs import Song, UploadResponse
from client.api_client import SongsApiClient
from client.query_cache import QueryCache

logger = logging.getLogger(__name__)

# Single logical key for the listing
SONGS_KEY = ("songs", "list")


class SongOperations:
    """
    Listing query plus the upload/import mutations.

    The listing is read through the cache; a successful mutation
    invalidates it so the next read goes back to the server.
    """

    def __init__(self, client: SongsApiClient, cache: Optional[QueryCache] = None):
        self.client = client
        self.cache = cache or QueryCache()
        self.is_loading = False
        self.error: Optional[Exception] = None
        self.is_uploading = False
        self.is_importing = False

    @property
    def songs(self) -> List[Song]:
        return self.cache.get(SONGS_KEY) or []

    @property
    def is_error(self) -> bool:
        return self.error is not None

    # =========================
    # Query
    # =========================

    def get_songs(self, force: bool = False) -> List[Song]:
        if not force:
            cached = self.cache.get(SONGS_KEY)
            if cached is not None:
                return cached

        self.is_loading = True
        try:
            songs = self.client.get_songs()
        except Exception as e:
            self.error = e
            raise
        finally:
            self.is_loading = False

        self.error = None
        self.cache.set(SONGS_KEY, songs)
        return songs

    def refresh(self) -> List[Song]:
        return self.get_songs(force=True)

    def invalidate(self) -> None:
        self.cache.invalidate(SONGS_KEY)

    # =========================
    # Mutations
    # =========================

    def upload_csv(self, path: Union[str, Path]) -> UploadResponse:
        self.is_uploading = True
        try:
            response = self.client.upload_csv(path)
        finally:
            self.is_uploading = False

        logger.info("Upload finished: %s", response.message)
        self.invalidate()
        return response

    def import_sample(self) -> UploadResponse:
        self.is_importing = True
        try:
            response = self.client.import_sample()
        finally:
            self.is_importing = False

        logger.info("Sample import finished: %s", response.message)
        self.invalidate()
        return response
