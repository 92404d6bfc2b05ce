"""Error types raised by the command execution core."""

from __future__ import annotations

from typing import Optional


class ScriptDeckError(Exception):
    """Base error for scriptdeck."""

    def __init__(self, message: str, *, user_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.user_message = user_message or message


class StorageError(ScriptDeckError):
    """Reading or writing a JSON document failed."""

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class NotFoundError(ScriptDeckError):
    """No command with the given id exists."""

    def __init__(self, command_id: str) -> None:
        super().__init__(f"Command not found: {command_id}")
        self.command_id = command_id


class DuplicateCommandError(ScriptDeckError):
    """A command with the same id is already stored."""

    def __init__(self, command_id: str) -> None:
        super().__init__(f"Command already exists: {command_id}")
        self.command_id = command_id


class ValidationError(ScriptDeckError):
    """A command definition is missing a required field."""


class SafeModeBlockedError(ScriptDeckError):
    """Execution refused because safe mode is on."""

    def __init__(self, command_id: str) -> None:
        super().__init__(
            f"Safe mode is active; refusing to run {command_id}",
            user_message="Safe mode is on. Turn it off to run commands.",
        )
        self.command_id = command_id


class AlreadyRunningError(ScriptDeckError):
    """The command already has a running instance."""

    def __init__(self, command_id: str) -> None:
        super().__init__(f"Command is already running: {command_id}")
        self.command_id = command_id


class SpawnError(ScriptDeckError):
    """The OS failed to start the child process."""

    def __init__(self, command_id: str, cause: BaseException) -> None:
        super().__init__(f"Failed to execute command {command_id}: {cause}")
        self.command_id = command_id
        self.cause = cause


class TerminationError(ScriptDeckError):
    """Nothing to terminate: no kill script and no tracked process."""

    def __init__(self, command_id: str) -> None:
        super().__init__(
            f"Command is not running: {command_id}",
            user_message="Command is not running.",
        )
        self.command_id = command_id
