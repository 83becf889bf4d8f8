"""
Song ingestion pipeline shared by the upload and sample-import endpoints.

file bytes -> parse_songs_csv -> SongStore.insert -> UploadResponse
"""
import logging
from pathlib import Path
from typing import Union

from api.schemas.songs import UploadResponse
from data.csv_ingest import parse_songs_csv
from data.song_store import SongStore

logger = logging.getLogger(__name__)

CSV_MEDIA_TYPES = {"application/vnd.ms-excel"}


class SampleFileMissingError(FileNotFoundError):
    pass


def is_csv_media_type(content_type: str) -> bool:
    """True for text/csv, application/csv and friends."""
    if not content_type:
        return False
    media_type = content_type.split(";")[0].strip().lower()
    return "csv" in media_type or media_type in CSV_MEDIA_TYPES


def ingest_csv(content: Union[str, bytes], store: SongStore, source: str) -> int:
    """
    Parse and insert in one go.

    Raises the ingestor's CsvIngestError subclasses for file-level
    problems and SongStoreError when the batch is rejected.
    """
    result = parse_songs_csv(content)
    store.insert(result.songs)

    logger.info(
        "Ingested %d songs from %s (%d rows dropped)",
        len(result.songs),
        source,
        result.rows_dropped,
    )
    return len(result.songs)


def upload_songs(content: bytes, filename: str, store: SongStore) -> UploadResponse:
    count = ingest_csv(content, store, source=filename or "upload")
    return UploadResponse(message=f"Successfully uploaded {count} songs", count=count)


def import_sample_songs(path: Path, store: SongStore) -> UploadResponse:
    if not path.is_file():
        raise SampleFileMissingError(f"Sample CSV not found: {path.name}")

    count = ingest_csv(path.read_bytes(), store, source=path.name)
    return UploadResponse(
        message=f"Successfully imported {count} songs from file",
        count=count,
    )
