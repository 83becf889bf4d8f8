# data/song_store.py

import logging
from typing import Any, Dict, List, Sequence

from supabase import Client, create_client

from api.schemas.songs import Song, SongCreate

logger = logging.getLogger(__name__)

ORDER_COLUMN = "band_name"


class SongStoreError(RuntimeError):
    """Connectivity failure or a rejected query against the songs table."""


def _error_message(exc: Exception) -> str:
    # postgrest APIError keeps the server text on .message
    message = getattr(exc, "message", None)
    return str(message or exc)


class SongStore:
    """
    Persistence contract for song records.

    insert: one batch, all or nothing as far as the backend guarantees.
    list_all: every row ordered by band_name ascending.
    """

    def insert(self, songs: Sequence[SongCreate]) -> None:
        raise NotImplementedError

    def list_all(self) -> List[Song]:
        raise NotImplementedError

    def ping(self) -> None:
        raise NotImplementedError


class SupabaseSongStore(SongStore):
    """Song store backed by a Supabase (PostgREST) table."""

    def __init__(self, client: Client, table: str = "songs"):
        self.client = client
        self.table = table

    @classmethod
    def from_credentials(cls, url: str, key: str, table: str = "songs") -> "SupabaseSongStore":
        try:
            client = create_client(url, key)
        except Exception as e:
            logger.error("Failed to initialize Supabase client: %s", e)
            raise SongStoreError(f"Failed to initialize Supabase client: {e}") from e

        logger.info("Supabase client initialized for table %s", table)
        return cls(client, table)

    def insert(self, songs: Sequence[SongCreate]) -> None:
        rows: List[Dict[str, Any]] = [song.model_dump() for song in songs]
        if not rows:
            return

        try:
            self.client.table(self.table).insert(rows).execute()
        except Exception as e:
            logger.error("Insert of %d songs rejected: %s", len(rows), e)
            raise SongStoreError(f"Database error: {_error_message(e)}") from e

        logger.info("Inserted %d songs into %s", len(rows), self.table)

    def list_all(self) -> List[Song]:
        try:
            response = (
                self.client.table(self.table)
                .select("*")
                .order(ORDER_COLUMN, desc=False)
                .execute()
            )
        except Exception as e:
            logger.error("Listing songs failed: %s", e)
            raise SongStoreError(f"Database error: {_error_message(e)}") from e

        return [Song.model_validate(row) for row in response.data or []]

    def ping(self) -> None:
        try:
            self.client.table(self.table).select("id").limit(1).execute()
        except Exception as e:
            raise SongStoreError(f"Database error: {_error_message(e)}") from e
