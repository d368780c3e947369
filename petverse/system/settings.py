"""User settings for the simulator (log level, narration, turn cap, seed).

Stored as JSON in the home directory (``$PETVERSE_SETTINGS`` overrides the
location). Unknown keys are ignored and bad values fall back to defaults,
so an old or hand-edited file never stops a battle from running.
"""
from __future__ import annotations
import json, os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional

from petverse.core.logging import logger

SETTINGS_FILENAME = ".petverse_settings.json"
SETTINGS_ENV = "PETVERSE_SETTINGS"
LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")
DEFAULT_MAX_TURNS = 100


@dataclass
class SettingsData:
    log_level: str = "INFO"        # DEBUG / INFO / WARN / ERROR
    debug: bool = False            # Echo battle narration through the logger
    max_turns: int = DEFAULT_MAX_TURNS
    seed: Optional[int] = None     # Fixed RNG seed for reproducible battles

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SettingsData":
        known = {f.name for f in fields(cls)}
        data = cls(**{k: v for k, v in raw.items() if k in known})
        data.normalize()
        return data

    def normalize(self):
        level = str(self.log_level).upper()
        self.log_level = level if level in LOG_LEVELS else "INFO"
        self.debug = bool(self.debug)
        self.max_turns = _as_int(self.max_turns, DEFAULT_MAX_TURNS)
        if self.max_turns < 1:
            self.max_turns = DEFAULT_MAX_TURNS
        if self.seed is not None:
            self.seed = _as_int(self.seed, None)


def _as_int(value: Any, default: Optional[int]) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def default_settings_path() -> Path:
    override = os.environ.get(SETTINGS_ENV)
    if override:
        return Path(override)
    home = Path(os.path.expanduser("~"))
    base = home if home.is_dir() and os.access(home, os.W_OK) else Path.cwd()
    return base / SETTINGS_FILENAME


class Settings:
    def __init__(self, data: SettingsData, path: Path):
        self.data = data
        self.path = path
        self._listeners: List[Callable[[SettingsData], None]] = []

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Settings":
        path = Path(path) if path is not None else default_settings_path()
        if not path.exists():
            return cls(SettingsData(), path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            data = SettingsData.from_dict(raw)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warn("SettingsParseFailedUsingDefaults", path=str(path), error=str(e))
            return cls(SettingsData(), path)
        logger.debug("SettingsLoaded", path=str(path))
        return cls(data, path)

    def save(self):
        try:
            self.path.write_text(json.dumps(asdict(self.data), indent=2), encoding="utf-8")
        except OSError as e:
            logger.error("SettingsSaveFailed", path=str(self.path), error=str(e))
            return
        logger.debug("SettingsSaved", path=str(self.path))

    def update(self, **changes: Any):
        """Set fields, normalize, apply the log level and notify listeners."""
        unknown = [k for k in changes if not hasattr(self.data, k)]
        if unknown:
            raise AttributeError(f"Unknown setting: {', '.join(unknown)}")
        for key, value in changes.items():
            setattr(self.data, key, value)
        self.data.normalize()
        self.apply_log_level()
        self._notify()

    def apply_log_level(self):
        logger.set_level(self.data.log_level)  # type: ignore[arg-type]

    def on_change(self, fn: Callable[[SettingsData], None]):
        self._listeners.append(fn)

    def _notify(self):
        for fn in self._listeners:
            fn(self.data)
