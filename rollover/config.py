import dataclasses
import os
from collections.abc import Mapping
from pathlib import Path

import yaml

from .core.errors import ConfigError
from .lib.dates import parse_weekday

ROLLOVER_DIR = Path.home() / ".rollover"
DB_PATH = ROLLOVER_DIR / "rollover.db"
CONFIG_PATH = ROLLOVER_DIR / "config.yaml"
LOG_FILE = ROLLOVER_DIR / "rollover.log"
LOCK_PATH = ROLLOVER_DIR / "run.lock"
CREDENTIALS_PATH = ROLLOVER_DIR / "credentials.json"

ENV_PREFIX = "ROLLOVER_"

DEFAULTS: dict[str, object] = {
    "inbox_list_name": "Inbox",
    "inbox_list_id": None,
    "daily_list_prefix": "[Daily]",
    "time_zone": None,
    "execution_timeout_seconds": 270,
    "auto_move_due_tasks": True,
    "track_rollover_count": True,
    "weekly_digest_day": "monday",
    "lock_timeout_seconds": 30,
    "notify_email": None,
    "api_retries": 5,
    "native_move": False,
}

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


class Config:
    """YAML-backed key/value store. Reads once on construction."""

    def __init__(self, path: Path | None = None):
        self.path = path if path else CONFIG_PATH
        self._data: dict[str, object] = {}
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            self._data = {}
            return
        with self.path.open() as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"unreadable config {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"config {self.path} must be a mapping")
        self._data = data

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w") as f:
            yaml.dump(self._data, f, default_flow_style=False, allow_unicode=True)

    def get(self, key: str, default: object = None) -> object:
        return self._data.get(key, default)

    def set(self, key: str, value: object) -> None:
        self._data[key] = value
        self._save()

    def unset(self, key: str) -> None:
        self._data.pop(key, None)
        self._save()

    def items(self) -> dict[str, object]:
        return dict(self._data)


@dataclasses.dataclass(frozen=True)
class Settings:
    inbox_list_name: str = "Inbox"
    inbox_list_id: str | None = None
    daily_list_prefix: str = "[Daily]"
    time_zone: str | None = None
    execution_timeout_seconds: int = 270
    auto_move_due_tasks: bool = True
    track_rollover_count: bool = True
    weekly_digest_day: int = 1
    lock_timeout_seconds: int = 30
    notify_email: str | None = None
    api_retries: int = 5
    native_move: bool = False


def _as_bool(key: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    raw = str(value).strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ConfigError(f"{key}: expected true/false, got '{value}'")


def _as_int(key: str, value: object) -> int:
    try:
        result = int(str(value).strip())
    except ValueError:
        raise ConfigError(f"{key}: expected an integer, got '{value}'") from None
    if result < 0:
        raise ConfigError(f"{key}: must not be negative")
    return result


def _as_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def load_settings(config: Config | None = None, environ: Mapping[str, str] | None = None) -> Settings:
    """Typed settings: environment overrides config file overrides defaults."""
    config = config if config else Config()
    environ = environ if environ is not None else os.environ

    def raw(key: str) -> object:
        env_key = ENV_PREFIX + key.upper()
        if env_key in environ:
            return environ[env_key]
        return config.get(key, DEFAULTS[key])

    return Settings(
        inbox_list_name=_as_str(raw("inbox_list_name")) or "Inbox",
        inbox_list_id=_as_str(raw("inbox_list_id")),
        daily_list_prefix=_as_str(raw("daily_list_prefix")) or "[Daily]",
        time_zone=_as_str(raw("time_zone")),
        execution_timeout_seconds=_as_int(
            "execution_timeout_seconds", raw("execution_timeout_seconds")
        ),
        auto_move_due_tasks=_as_bool("auto_move_due_tasks", raw("auto_move_due_tasks")),
        track_rollover_count=_as_bool("track_rollover_count", raw("track_rollover_count")),
        weekly_digest_day=parse_weekday(raw("weekly_digest_day")),
        lock_timeout_seconds=_as_int("lock_timeout_seconds", raw("lock_timeout_seconds")),
        notify_email=_as_str(raw("notify_email")),
        api_retries=_as_int("api_retries", raw("api_retries")),
        native_move=_as_bool("native_move", raw("native_move")),
    )
