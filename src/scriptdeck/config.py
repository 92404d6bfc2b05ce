"""Application settings using TOML + environment variables."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

import tomli_w

APP_NAME = "scriptdeck"


def default_data_dir() -> Path:
    """Platform application-data directory for scriptdeck."""
    if env_home := os.environ.get("SCRIPTDECK_HOME"):
        return Path(env_home).expanduser()
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME
    if os.name == "nt":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        return base / APP_NAME
    xdg = os.environ.get("XDG_DATA_HOME")
    base = Path(xdg).expanduser() if xdg else Path.home() / ".local" / "share"
    return base / APP_NAME


DATA_DIR = default_data_dir()
SETTINGS_FILE = DATA_DIR / "settings.toml"
CONFIG_FILE = DATA_DIR / "config.json"
COMMANDS_FILE = DATA_DIR / "commands.json"
LOG_FILE = DATA_DIR / "scriptdeck.log"


@dataclass
class LoggingSettings:
    level: str = "WARNING"
    file: str = str(LOG_FILE)


@dataclass
class HistorySettings:
    enabled: bool = True
    db_path: str = str(DATA_DIR / "history.db")


@dataclass
class ExecutionSettings:
    # Empty means the platform shell (sh -c / cmd /C).
    shell: str = ""


@dataclass
class AppSettings:
    data_dir: str = str(DATA_DIR)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    history: HistorySettings = field(default_factory=HistorySettings)
    execution: ExecutionSettings = field(default_factory=ExecutionSettings)

    @property
    def config_file(self) -> Path:
        return Path(self.data_dir).expanduser() / "config.json"

    @property
    def commands_file(self) -> Path:
        return Path(self.data_dir).expanduser() / "commands.json"


def ensure_data_dir() -> None:
    """Create the data directory with owner-only permissions."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    if os.name != "nt":
        os.chmod(DATA_DIR, 0o700)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("true", "1", "yes", "on")


def load_settings() -> AppSettings:
    """Load settings from TOML file with env var overrides."""
    settings = AppSettings()

    if SETTINGS_FILE.exists():
        with open(SETTINGS_FILE, "rb") as f:
            data = tomllib.load(f)

        logging_cfg = data.get("logging", {})
        settings.logging.level = logging_cfg.get("level", settings.logging.level)
        settings.logging.file = logging_cfg.get("file", settings.logging.file)

        history = data.get("history", {})
        settings.history.enabled = history.get("enabled", settings.history.enabled)
        settings.history.db_path = history.get("db_path", settings.history.db_path)

        execution = data.get("execution", {})
        settings.execution.shell = execution.get("shell", settings.execution.shell)

    # Environment variable overrides
    if env_log_level := os.environ.get("SCRIPTDECK_LOG_LEVEL"):
        settings.logging.level = env_log_level
    if env_log_file := os.environ.get("SCRIPTDECK_LOG_FILE"):
        settings.logging.file = env_log_file
    if env_history := os.environ.get("SCRIPTDECK_HISTORY_ENABLED"):
        settings.history.enabled = _parse_bool(env_history)
    if env_db := os.environ.get("SCRIPTDECK_DB_PATH"):
        settings.history.db_path = env_db
    if env_shell := os.environ.get("SCRIPTDECK_SHELL"):
        settings.execution.shell = env_shell

    return settings


def save_settings(settings: AppSettings) -> None:
    """Save settings to TOML file."""
    ensure_data_dir()

    data = {
        "logging": {
            "level": settings.logging.level,
            "file": settings.logging.file,
        },
        "history": {
            "enabled": settings.history.enabled,
            "db_path": settings.history.db_path,
        },
        "execution": {
            "shell": settings.execution.shell,
        },
    }

    with open(SETTINGS_FILE, "wb") as f:
        tomli_w.dump(data, f)


# Global singleton
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or load the global settings singleton."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings (for testing)."""
    global _settings
    _settings = None
