"""
Test fixtures and configuration
"""
import os
from datetime import datetime, timezone
from typing import List, Optional, Sequence

# Settings are loaded when main is imported
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-service-key")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["METRICS_ENABLED"] = "false"

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_song_store
from api.schemas.songs import Song, SongCreate
from data.song_store import SongStore, SongStoreError
from main import app


class InMemorySongStore(SongStore):
    """Stands in for the Supabase table"""

    def __init__(self):
        self.rows: List[Song] = []
        self.insert_calls = 0
        self.fail_with: Optional[str] = None
        self._next_id = 1

    def insert(self, songs: Sequence[SongCreate]) -> None:
        self.insert_calls += 1
        if self.fail_with:
            raise SongStoreError(f"Database error: {self.fail_with}")

        for song in songs:
            self.rows.append(
                Song(
                    id=self._next_id,
                    created_at=datetime.now(timezone.utc),
                    **song.model_dump(),
                )
            )
            self._next_id += 1

    def list_all(self) -> List[Song]:
        if self.fail_with:
            raise SongStoreError(f"Database error: {self.fail_with}")
        # sorted() is stable, ties keep insertion order
        return sorted(self.rows, key=lambda s: s.band_name)

    def ping(self) -> None:
        if self.fail_with:
            raise SongStoreError(f"Database error: {self.fail_with}")


@pytest.fixture
def song_store():
    return InMemorySongStore()


@pytest.fixture
def client(song_store):
    """Test client fixture with the in-memory store injected"""
    app.dependency_overrides[get_song_store] = lambda: song_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def beatles_csv():
    return b"band,song,year\nThe Beatles,Hey Jude,1968\n"


@pytest.fixture
def sample_songs():
    """Sample song data for testing"""
    return [
        Song(id=1, song_name="hey jude", band_name="the beatles", year=1968),
        Song(id=2, song_name="bohemian rhapsody", band_name="queen", year=1975),
        Song(id=3, song_name="come as you are", band_name="nirvana", year=1991),
        Song(id=4, song_name="smells like teen spirit", band_name="nirvana", year=1991),
        Song(id=5, song_name="imagine", band_name="john lennon", year=None),
    ]
