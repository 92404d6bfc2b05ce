"""Data models for scriptdeck."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from scriptdeck.errors import StorageError, ValidationError

_OPTIONAL_COMMAND_FIELDS = ("kill_script", "shortcut", "description")


def _required_str(data: dict[str, Any], key: str, kind: str) -> str:
    if key not in data:
        raise StorageError(f"{kind} entry is missing field '{key}'")
    value = data[key]
    if not isinstance(value, str):
        raise StorageError(f"{kind} field '{key}' must be a string, got {type(value).__name__}")
    return value


def _optional_str(data: dict[str, Any], key: str, kind: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise StorageError(f"{kind} field '{key}' must be a string or null, got {type(value).__name__}")
    return value


def _optional_bool(data: dict[str, Any], key: str, kind: str) -> bool:
    # Missing and null both read as false.
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise StorageError(f"{kind} field '{key}' must be a boolean, got {type(value).__name__}")
    return value


@dataclass
class Command:
    """A user-defined shell script with an optional kill script and shortcut."""

    id: str
    name: str
    script: str
    kill_script: Optional[str] = None
    shortcut: Optional[str] = None
    description: Optional[str] = None

    def validate(self) -> None:
        for attr in ("id", "name", "script"):
            if not getattr(self, attr).strip():
                raise ValidationError(f"Command {attr} must not be empty")

    def has_kill_script(self) -> bool:
        return bool(self.kill_script and self.kill_script.strip())

    def to_dict(self) -> dict[str, Any]:
        """Serialize, leaving absent optional fields out of the document."""
        data: dict[str, Any] = {"id": self.id, "name": self.name, "script": self.script}
        for attr in _OPTIONAL_COMMAND_FIELDS:
            value = getattr(self, attr)
            if value is not None:
                data[attr] = value
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Command:
        if not isinstance(data, dict):
            raise StorageError(f"Expected a command object, got {type(data).__name__}")
        return cls(
            id=_required_str(data, "id", "Command"),
            name=_required_str(data, "name", "Command"),
            script=_required_str(data, "script", "Command"),
            kill_script=_optional_str(data, "kill_script", "Command"),
            shortcut=_optional_str(data, "shortcut", "Command"),
            description=_optional_str(data, "description", "Command"),
        )


@dataclass
class Config:
    """Process-wide settings persisted in config.json.

    Keys this package does not know about are kept in ``extra`` and written
    back unchanged on save.
    """

    safe_mode: bool = False
    commands_path: Optional[str] = None
    accessibility_notice_dismissed: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.extra)
        data["safe_mode"] = self.safe_mode
        data["commands_path"] = self.commands_path
        data["accessibility_notice_dismissed"] = self.accessibility_notice_dismissed
        return data

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        if not isinstance(data, dict):
            raise StorageError(f"Expected a config object, got {type(data).__name__}")
        known = ("safe_mode", "commands_path", "accessibility_notice_dismissed")
        return cls(
            safe_mode=_optional_bool(data, "safe_mode", "Config"),
            commands_path=_optional_str(data, "commands_path", "Config") or None,
            accessibility_notice_dismissed=_optional_bool(data, "accessibility_notice_dismissed", "Config"),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass
class ExecutionResult:
    """Result of running a command's script."""

    command_id: str
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    execution_time_ms: int = 0
    terminated: bool = False

    @property
    def output(self) -> str:
        """Combined stdout followed by stderr."""
        return f"{self.stdout}{self.stderr}"


@dataclass
class TerminationResult:
    """How a terminate request was carried out."""

    command_id: str
    method: str  # "kill_script" or "signal"
    pid: Optional[int] = None
    exit_code: Optional[int] = None


@dataclass
class ExecutionRecord:
    """A stored execution history entry."""

    id: int = 0
    command_id: str = ""
    name: str = ""
    output: str = ""
    exit_code: int = 0
    terminated: bool = False
    execution_time_ms: int = 0
    source: str = "manual"
    created_at: str = ""
