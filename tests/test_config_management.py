"""
Tests for SettingsManager

Tests cover:
- Defaults and persistence
- Environment overrides with type coercion
- Broken settings files
"""

import json

from flashdeck.config import SettingsManager


def fresh(path):
    SettingsManager.reset_instance()
    return SettingsManager(str(path))


class TestDefaults:

    def test_defaults_written_on_first_load(self, settings):
        assert settings.get("STORAGE_BACKEND") == "json"
        assert settings.get("CONFIRM_DELETE") is True
        stored = json.loads(settings.settings_file.read_text(encoding="utf-8"))
        assert stored["EXPORT_DIR"] == "data/export"

    def test_singleton(self, settings):
        assert SettingsManager() is settings

    def test_get_returns_copies(self, settings):
        style = settings.get("CARD_STYLE")
        style["front_start"] = "#000000"
        assert settings.get("CARD_STYLE")["front_start"] == "#6366F1"

    def test_unknown_key_default(self, settings):
        assert settings.get("NOPE", 42) == 42


class TestPersistence:

    def test_set_survives_reload(self, settings, tmp_path):
        settings.set("CONFIRM_DELETE", False)
        assert fresh(tmp_path / "settings.json").get("CONFIRM_DELETE") is False

    def test_set_without_persist(self, settings, tmp_path):
        settings.set("THEME_MODE", "light", persist=False)
        assert settings.get("THEME_MODE") == "light"
        stored = json.loads(settings.settings_file.read_text(encoding="utf-8"))
        assert stored["THEME_MODE"] == "dark"

    def test_reset_single_key(self, settings):
        settings.set("THEME_MODE", "light")
        settings.set("LOG_LEVEL", "DEBUG")
        settings.reset("THEME_MODE")
        assert settings.get("THEME_MODE") == "dark"
        assert settings.get("LOG_LEVEL") == "DEBUG"

    def test_reset_all(self, settings):
        settings.set("THEME_MODE", "light")
        settings.reset()
        assert settings.get_all() == SettingsManager.DEFAULTS

    def test_card_style_fills_missing_keys(self, settings):
        settings.set("CARD_STYLE", {"front_start": "#111111"})
        style = settings.get_card_style()
        assert style["front_start"] == "#111111"
        assert style["back_text"] == "#1F2937"


class TestBrokenFiles:

    def test_invalid_json_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{nope", encoding="utf-8")
        assert fresh(path).get("STORAGE_BACKEND") == "json"

    def test_non_object_is_ignored(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert fresh(path).get("THEME_MODE") == "dark"


class TestEnvironment:

    def test_bool_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CONFIRM_DELETE", "no")
        assert fresh(tmp_path / "env.json").get("CONFIRM_DELETE") is False

    def test_string_override_beats_file(self, tmp_path, monkeypatch):
        path = tmp_path / "env.json"
        path.write_text(json.dumps({"STORAGE_BACKEND": "json"}), encoding="utf-8")
        monkeypatch.setenv("STORAGE_BACKEND", "sqlite")
        assert fresh(path).get("STORAGE_BACKEND") == "sqlite"

    def test_dict_override(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CARD_STYLE", '{"front_start": "#222222"}')
        assert fresh(tmp_path / "env.json").get_card_style()["front_start"] == "#222222"

    def test_bad_dict_override_keeps_default(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CARD_STYLE", "not json")
        assert fresh(tmp_path / "env.json").get("CARD_STYLE") == SettingsManager.DEFAULTS["CARD_STYLE"]

    def test_update_writes_once_for_many_keys(self, settings, tmp_path):
        settings.update(THEME_MODE="light", LOG_LEVEL="DEBUG")
        reloaded = fresh(tmp_path / "settings.json")
        assert reloaded.get("THEME_MODE") == "light"
        assert reloaded.get("LOG_LEVEL") == "DEBUG"
