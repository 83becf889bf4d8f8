# client/views.py

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Sequence, Set, Tuple

from api.schemas.songs import Song

SORT_FIELDS = ("song_name", "band_name", "year")
ASC = "asc"
DESC = "desc"

COLUMN_TITLES = {"song_name": "Song", "band_name": "Band", "year": "Year"}
CARD_WIDTH = 28


# =========================
# Filtering / sorting
# =========================

def matches_search(song: Song, term: str) -> bool:
    term = term.strip().lower()
    if not term:
        return True
    return term in (song.song_name or "").lower() or term in (song.band_name or "").lower()


def matches_years(song: Song, years: Set[int]) -> bool:
    return not years or song.year in years


def _sort_key(song: Song, sort_field: str):
    value = getattr(song, sort_field)
    # Missing years sort after real ones when ascending
    return (value is None, value if value is not None else 0)


def sort_songs(songs: Sequence[Song], sort_field: str = "band_name", direction: str = ASC) -> List[Song]:
    if sort_field not in SORT_FIELDS:
        raise ValueError(f"Cannot sort by {sort_field}")
    return sorted(songs, key=lambda s: _sort_key(s, sort_field), reverse=direction == DESC)


def year_options(songs: Sequence[Song]) -> List[Tuple[int, int]]:
    """(year, count) pairs, newest first."""
    counts = Counter(song.year for song in songs if song.year and song.year > 0)
    return sorted(counts.items(), key=lambda item: item[0], reverse=True)


@dataclass
class SongTableState:
    """Client-side view over the fetched songs. Never triggers a fetch."""

    search: str = ""
    sort_field: str = "band_name"
    sort_direction: str = ASC
    selected_years: Set[int] = field(default_factory=set)

    def toggle_sort(self, sort_field: str) -> None:
        if sort_field not in SORT_FIELDS:
            raise ValueError(f"Cannot sort by {sort_field}")

        if sort_field == self.sort_field:
            self.sort_direction = DESC if self.sort_direction == ASC else ASC
        else:
            self.sort_field = sort_field
            self.sort_direction = ASC

    def toggle_year(self, year: int) -> None:
        if year in self.selected_years:
            self.selected_years.discard(year)
        else:
            self.selected_years.add(year)

    def clear_years(self) -> None:
        self.selected_years.clear()

    def apply(self, songs: Sequence[Song]) -> List[Song]:
        visible = [
            song for song in songs
            if matches_search(song, self.search) and matches_years(song, self.selected_years)
        ]
        return sort_songs(visible, self.sort_field, self.sort_direction)


# =========================
# Rendering
# =========================

def _year_text(song: Song) -> str:
    return str(song.year) if song.year else "N/A"


def render_table(songs: Sequence[Song]) -> str:
    """List view: one aligned row per song."""
    if not songs:
        return "No songs found."

    rows = [(s.song_name, s.band_name, _year_text(s)) for s in songs]
    headers = tuple(COLUMN_TITLES[f] for f in SORT_FIELDS)
    widths = [max(len(h), *(len(r[i]) for r in rows)) for i, h in enumerate(headers)]

    def line(values):
        return "  ".join(v.ljust(w) for v, w in zip(values, widths)).rstrip()

    out = [line(headers), line("-" * w for w in widths)]
    out.extend(line(r) for r in rows)
    return "\n".join(out)


def render_grid(songs: Sequence[Song], columns: int = 3) -> str:
    """Card view: songs laid out `columns` per row."""
    if not songs:
        return "No songs found."

    def card(song: Song) -> List[str]:
        inner = CARD_WIDTH - 4
        return [
            "+" + "-" * (CARD_WIDTH - 2) + "+",
            "| " + song.song_name[:inner].ljust(inner) + " |",
            "| " + song.band_name[:inner].ljust(inner) + " |",
            "| " + _year_text(song).ljust(inner) + " |",
            "+" + "-" * (CARD_WIDTH - 2) + "+",
        ]

    blocks = []
    for start in range(0, len(songs), columns):
        cards = [card(s) for s in songs[start:start + columns]]
        blocks.append("\n".join(" ".join(parts) for parts in zip(*cards)))
    return "\n".join(blocks)
