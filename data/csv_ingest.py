# data/csv_ingest.py

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Union

from api.schemas.songs import SongCreate

logger = logging.getLogger(__name__)

MIN_FIELDS = 3

# Header aliases, compared after lowercasing and dropping spaces/underscores
SONG_HEADERS = {"song", "songname", "name", "title"}
BAND_HEADERS = {"band", "bandname", "artist"}
YEAR_HEADERS = {"year"}

POSITIONAL_COLUMNS = {"song_name": 0, "band_name": 1, "year": 2}

_LEADING_INT = re.compile(r"^[+-]?\d+")

# Range of the Postgres INTEGER year column
YEAR_MIN = -2147483648
YEAR_MAX = 2147483647


class CsvIngestError(ValueError):
    """Base class for file-level ingestion failures."""


class CsvDecodeError(CsvIngestError):
    pass


class NoValidSongsError(CsvIngestError):
    def __init__(self, message: str = "No valid songs found in CSV file"):
        super().__init__(message)


@dataclass
class IngestResult:
    songs: List[SongCreate] = field(default_factory=list)
    rows_examined: int = 0

    @property
    def rows_dropped(self) -> int:
        return self.rows_examined - len(self.songs)


# -------------------------
# Helpers
# -------------------------

def detect_delimiter(header_line: str) -> str:
    return ";" if ";" in header_line else ","


def _clean(value: str) -> str:
    return value.strip().replace('"', "").strip()


def _header_key(value: str) -> str:
    return _clean(value).lower().replace(" ", "").replace("_", "")


def resolve_columns(headers: List[str]) -> Dict[str, int]:
    """
    Map song/band/year to field positions.

    Named headers win when all three columns are recognised;
    anything else falls back to song, band, year by position.
    """
    keys = [_header_key(h) for h in headers]
    found: Dict[str, int] = {}

    for index, key in enumerate(keys):
        if key in SONG_HEADERS and "song_name" not in found:
            found["song_name"] = index
        elif key in BAND_HEADERS and "band_name" not in found:
            found["band_name"] = index
        elif key in YEAR_HEADERS and "year" not in found:
            found["year"] = index

    if len(found) == len(POSITIONAL_COLUMNS):
        return found
    return dict(POSITIONAL_COLUMNS)


def parse_year(value: Optional[str], current_year: Optional[int] = None) -> int:
    """
    Leading integer of the field, e.g. "1968", " 1968 " or "1968 (remaster)".

    Missing, non-numeric, zero and out-of-range values become the current
    year.
    """
    fallback = current_year or datetime.now().year
    if value is None:
        return fallback

    match = _LEADING_INT.match(value.strip())
    if not match:
        return fallback

    digits = match.group()
    if len(digits.lstrip("+-")) > len(str(YEAR_MAX)):
        return fallback

    year = int(digits)
    if not YEAR_MIN <= year <= YEAR_MAX:
        return fallback
    return year or fallback


def decode_csv(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise CsvDecodeError(f"CSV file must be UTF-8 encoded: {e}") from e


# -------------------------
# Public API
# -------------------------

def parse_songs_csv(
    content: Union[str, bytes],
    current_year: Optional[int] = None,
) -> IngestResult:
    """
    Parse CSV text into song records.

    Malformed rows are dropped silently. Raises NoValidSongsError
    when nothing usable is left.
    """
    text = decode_csv(content) if isinstance(content, bytes) else content
    lines = text.split("\n")

    header_line = lines[0] if lines else ""
    delimiter = detect_delimiter(header_line)
    columns = resolve_columns(header_line.split(delimiter))

    result = IngestResult()

    for line in lines[1:]:
        if not line.strip():
            continue

        result.rows_examined += 1
        values = [_clean(v) for v in line.split(delimiter)]

        if len(values) < MIN_FIELDS:
            continue

        song_name = _field(values, columns["song_name"]).lower().strip()
        band_name = _field(values, columns["band_name"]).lower().strip()

        if not song_name or not band_name:
            continue

        result.songs.append(
            SongCreate(
                song_name=song_name,
                band_name=band_name,
                year=parse_year(_optional_field(values, columns["year"]), current_year),
            )
        )

    logger.info(
        "Parsed CSV: delimiter=%r examined=%d accepted=%d",
        delimiter,
        result.rows_examined,
        len(result.songs),
    )

    if not result.songs:
        raise NoValidSongsError()

    return result


def _field(values: List[str], index: int) -> str:
    return values[index] if index < len(values) else ""


def _optional_field(values: List[str], index: int) -> Optional[str]:
    return values[index] if index < len(values) else None
