import json

import pytest

from petverse.core.logging import logger
from petverse.system.settings import Settings, SettingsData


@pytest.fixture(autouse=True)
def _restore_log_level():
    yield
    logger.set_level("INFO")


def test_defaults_when_file_missing(tmp_path):
    s = Settings.load(tmp_path / "settings.json")
    assert s.data == SettingsData()


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "settings.json"
    s = Settings.load(path)
    s.data.seed = 12
    s.data.max_turns = 40
    s.save()
    loaded = Settings.load(path)
    assert loaded.data.seed == 12
    assert loaded.data.max_turns == 40


def test_corrupt_file_falls_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    assert Settings.load(path).data == SettingsData()


def test_unknown_keys_ignored_and_values_normalized(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"log_level": "loud", "max_turns": "0", "seed": "7", "colour": "red"}))
    data = Settings.load(path).data
    assert data.log_level == "INFO"
    assert data.max_turns == 100
    assert data.seed == 7


def test_update_notifies_and_applies_level(tmp_path):
    s = Settings.load(tmp_path / "settings.json")
    seen = []
    s.on_change(lambda d: seen.append(d.log_level))
    s.update(log_level="error")
    assert seen == ["ERROR"]
    assert not logger.is_enabled("WARN")
    with pytest.raises(AttributeError):
        s.update(volume=3)


def test_env_override_location(tmp_path, monkeypatch):
    target = tmp_path / "custom.json"
    target.write_text(json.dumps({"max_turns": 12}))
    monkeypatch.setenv("PETVERSE_SETTINGS", str(target))
    s = Settings.load()
    assert s.path == target
    assert s.data.max_turns == 12
