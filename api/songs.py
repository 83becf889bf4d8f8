# api/songs.py

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status

from api.dependencies import get_app_settings, get_song_store, limiter, mutation_rate_limit
from api.schemas.songs import Song, UploadResponse
from config.settings import Settings
from data.csv_ingest import CsvIngestError
from data.song_store import SongStore, SongStoreError
from services.song_ingestion import (
    SampleFileMissingError,
    import_sample_songs,
    is_csv_media_type,
    upload_songs,
)

logger = logging.getLogger(__name__)

router = APIRouter()


# =========================
# Listing (READ)
# =========================

@router.get(
    "",
    response_model=List[Song],
    summary="List all songs ordered by band name",
)
def list_songs(store: SongStore = Depends(get_song_store)):
    try:
        return store.list_all()
    except SongStoreError as e:
        logger.error("Error fetching songs: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to fetch songs: {e}",
        )


# =========================
# Upload (WRITE)
# =========================

@router.post(
    "/upload-csv",
    response_model=UploadResponse,
    summary="Upload a CSV of songs",
)
@router.post("/upload", response_model=UploadResponse, include_in_schema=False)
@limiter.limit(mutation_rate_limit)
def upload_csv(
    request: Request,
    file: Optional[UploadFile] = File(None),
    store: SongStore = Depends(get_song_store),
    settings: Settings = Depends(get_app_settings),
):
    """
    Multipart field `file`.

    - 400: no file, not a CSV, undecodable, or no valid rows
    - 413: larger than MAX_UPLOAD_BYTES
    - 500: rejected by the database
    """
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")

    if not is_csv_media_type(file.content_type or ""):
        raise HTTPException(status_code=400, detail="File must be a CSV")

    content = file.file.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds {settings.max_upload_bytes} bytes",
        )

    try:
        return upload_songs(content, file.filename or "upload.csv", store)
    except CsvIngestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SongStoreError as e:
        logger.error("Error processing CSV %s: %s", file.filename, e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to process CSV file: {e}",
        )


# =========================
# Sample import (WRITE)
# =========================

@router.post(
    "/import",
    response_model=UploadResponse,
    summary="Import the bundled sample CSV",
)
@router.post("/import-sample", response_model=UploadResponse, include_in_schema=False)
@limiter.limit(mutation_rate_limit)
def import_sample(
    request: Request,
    store: SongStore = Depends(get_song_store),
    settings: Settings = Depends(get_app_settings),
):
    try:
        return import_sample_songs(settings.sample_csv_path, store)
    except CsvIngestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (SampleFileMissingError, SongStoreError) as e:
        logger.error("Error importing sample CSV: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to import CSV file: {e}",
        )
