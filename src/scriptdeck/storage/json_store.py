"""JSON-backed command and config stores."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Optional

from scriptdeck.errors import NotFoundError, StorageError
from scriptdeck.storage.models import Command, Config

logger = logging.getLogger(__name__)

_locks_guard = threading.Lock()
_path_locks: dict[str, threading.RLock] = {}


def file_lock(path: Path) -> threading.RLock:
    """Return the lock serializing reads and writes of one backing file."""
    key = str(path.expanduser().resolve())
    with _locks_guard:
        lock = _path_locks.get(key)
        if lock is None:
            lock = _path_locks[key] = threading.RLock()
        return lock


def read_json(path: Path) -> Optional[Any]:
    """Read a JSON document. Returns None if the file does not exist."""
    if not path.exists():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        raise StorageError(f"Failed to read {path}: {e}", path=str(path)) from e


def write_json(path: Path, data: Any) -> None:
    """Write a JSON document via temp file + rename so readers never see a partial file."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
                f.write("\n")
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except (OSError, TypeError, ValueError) as e:
        raise StorageError(f"Failed to write {path}: {e}", path=str(path)) from e


class ConfigStore:
    """Loads config.json lazily and persists full replacements."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._cached: Config | None = None

    def load(self) -> Config:
        with file_lock(self.path):
            if self._cached is None:
                data = read_json(self.path)
                if data is None:
                    logger.debug("No config at %s, using defaults", self.path)
                    self._cached = Config()
                else:
                    self._cached = Config.from_dict(data)
            return Config(
                safe_mode=self._cached.safe_mode,
                commands_path=self._cached.commands_path,
                accessibility_notice_dismissed=self._cached.accessibility_notice_dismissed,
                extra=dict(self._cached.extra),
            )

    def save(self, config: Config) -> None:
        with file_lock(self.path):
            write_json(self.path, config.to_dict())
            self._cached = Config.from_dict(config.to_dict())
        logger.info("Config saved: safe_mode=%s commands_path=%s", config.safe_mode, config.commands_path)


class CommandStore:
    """Ordered command list stored as a JSON array.

    The backing path is re-resolved on every access so a changed
    ``commands_path`` takes effect immediately.
    """

    def __init__(self, config_store: ConfigStore, default_path: Path) -> None:
        self.config_store = config_store
        self.default_path = default_path

    @property
    def path(self) -> Path:
        override = self.config_store.load().commands_path
        if override:
            return Path(override).expanduser()
        return self.default_path

    def lock(self) -> threading.RLock:
        """Lock held by callers doing read-modify-write on the command list."""
        return file_lock(self.path)

    def list(self) -> list[Command]:
        path = self.path
        with file_lock(path):
            data = read_json(path)
        if data is None:
            return []
        if not isinstance(data, list):
            raise StorageError(f"Expected a list of commands in {path}", path=str(path))
        return [Command.from_dict(item) for item in data]

    def get(self, command_id: str) -> Command:
        for command in self.list():
            if command.id == command_id:
                return command
        raise NotFoundError(command_id)

    def persist(self, commands: list[Command]) -> None:
        path = self.path
        with file_lock(path):
            write_json(path, [c.to_dict() for c in commands])
        logger.debug("Persisted %d commands to %s", len(commands), path)

    def ensure_directory(self) -> Path:
        """Create parent directories for the current backing path."""
        path = self.path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create {path.parent}: {e}", path=str(path)) from e
        return path
