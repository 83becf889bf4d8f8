# api/schemas/songs.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------
# Songs
# ---------
class SongCreate(BaseModel):
    """Row shape written to the songs table."""

    song_name: str = Field(..., min_length=1)
    band_name: str = Field(..., min_length=1)
    year: Optional[int] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "song_name": "hey jude",
                "band_name": "the beatles",
                "year": 1968,
            }
        }
    )


class Song(SongCreate):
    id: Optional[int] = None
    created_at: Optional[datetime] = None


class UploadResponse(BaseModel):
    message: str
    count: int = Field(0, ge=0)


# ---------
# Health
# ---------
class HealthStatus(BaseModel):
    status: str
    timestamp: str
    uptime: float


class AppInfo(BaseModel):
    name: str
    version: str
    environment: str
