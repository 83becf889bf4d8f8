# client/preferences.py

import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

THEMES = ("light", "dark", "auto")
VIEW_MODES = ("list", "grid")


@dataclass(frozen=True)
class UIPreferences:
    theme: str = "dark"
    view_mode: str = "list"

    def __post_init__(self):
        if self.theme not in THEMES:
            raise ValueError(f"Unknown theme: {self.theme}")
        if self.view_mode not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {self.view_mode}")

    @property
    def is_grid_view(self) -> bool:
        return self.view_mode == "grid"


# -------------------------
# Persistence port
# -------------------------

class PreferenceStore:
    def load(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def save(self, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class JSONFilePreferenceStore(PreferenceStore):
    """Preferences as a small JSON document, written atomically."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        if not self.path.exists():
            return None

        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable preferences %s: %s", self.path, e)
            return None

        return data if isinstance(data, dict) else None

    def save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, indent=2))
        tmp.replace(self.path)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


# -------------------------
# Manager
# -------------------------

class PreferencesManager:
    """
    Loaded once at startup, saved on every change.
    """

    def __init__(self, store: PreferenceStore):
        self.store = store
        self.preferences = self._load()

    def _load(self) -> UIPreferences:
        data = self.store.load() or {}
        known = {k: v for k, v in data.items() if k in UIPreferences.__dataclass_fields__}
        try:
            return UIPreferences(**known)
        except (TypeError, ValueError) as e:
            logger.warning("Falling back to default preferences: %s", e)
            return UIPreferences()

    def update(self, **changes) -> UIPreferences:
        self.preferences = replace(self.preferences, **changes)
        self.store.save(asdict(self.preferences))
        return self.preferences

    def toggle_view_mode(self) -> UIPreferences:
        view_mode = "list" if self.preferences.is_grid_view else "grid"
        return self.update(view_mode=view_mode)

    def reset(self) -> UIPreferences:
        self.preferences = UIPreferences()
        self.store.clear()
        return self.preferences
