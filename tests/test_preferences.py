"""
Unit tests for UI preferences and their persistence
"""
import json

import pytest

from client.preferences import (
    JSONFilePreferenceStore,
    PreferencesManager,
    PreferenceStore,
    UIPreferences,
)


class MemoryPreferenceStore(PreferenceStore):
    def __init__(self, data=None):
        self.data = data
        self.saves = 0

    def load(self):
        return self.data

    def save(self, data):
        self.saves += 1
        self.data = dict(data)

    def clear(self):
        self.data = None


def test_defaults_when_nothing_saved():
    manager = PreferencesManager(MemoryPreferenceStore())

    assert manager.preferences == UIPreferences(theme="dark", view_mode="list")


def test_loaded_at_startup():
    manager = PreferencesManager(MemoryPreferenceStore({"theme": "light", "view_mode": "grid"}))

    assert manager.preferences.theme == "light"
    assert manager.preferences.is_grid_view


def test_saved_on_every_change():
    store = MemoryPreferenceStore()
    manager = PreferencesManager(store)

    manager.update(theme="auto")
    manager.toggle_view_mode()

    assert store.saves == 2
    assert store.data == {"theme": "auto", "view_mode": "grid"}


def test_invalid_saved_values_fall_back_to_defaults():
    manager = PreferencesManager(MemoryPreferenceStore({"theme": "neon", "sidebar": True}))

    assert manager.preferences == UIPreferences()


def test_invalid_update_is_rejected():
    manager = PreferencesManager(MemoryPreferenceStore())

    with pytest.raises(ValueError):
        manager.update(view_mode="carousel")


def test_reset():
    store = MemoryPreferenceStore({"theme": "light", "view_mode": "grid"})
    manager = PreferencesManager(store)

    manager.reset()

    assert manager.preferences == UIPreferences()
    assert store.data is None


class TestJSONFileStore:

    def test_round_trip_through_file(self, tmp_path):
        path = tmp_path / "prefs" / "preferences.json"
        PreferencesManager(JSONFilePreferenceStore(path)).update(view_mode="grid")

        assert json.loads(path.read_text()) == {"theme": "dark", "view_mode": "grid"}
        assert PreferencesManager(JSONFilePreferenceStore(path)).preferences.view_mode == "grid"

    def test_corrupt_file_is_ignored(self, tmp_path):
        path = tmp_path / "preferences.json"
        path.write_text("{not json")

        assert JSONFilePreferenceStore(path).load() is None

    def test_clear_missing_file(self, tmp_path):
        JSONFilePreferenceStore(tmp_path / "none.json").clear()
