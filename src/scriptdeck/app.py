"""CommandCenter: the operations exposed to the CLI and shortcut layers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from scriptdeck.config import AppSettings
from scriptdeck.errors import DuplicateCommandError, NotFoundError
from scriptdeck.services.executor import Executor
from scriptdeck.services.registry import ProcessRegistry
from scriptdeck.services.shortcuts import ShortcutDispatcher
from scriptdeck.services.terminator import Terminator
from scriptdeck.storage.json_store import CommandStore, ConfigStore
from scriptdeck.storage.models import Command, Config, ExecutionResult, TerminationResult

logger = logging.getLogger(__name__)


class CommandCenter:
    """Owns the stores and the single ProcessRegistry shared by executions and kills."""

    def __init__(self, settings: AppSettings, registry: Optional[ProcessRegistry] = None) -> None:
        self.settings = settings
        self.config_store = ConfigStore(settings.config_file)
        self.command_store = CommandStore(self.config_store, settings.commands_file)
        self.registry = registry or ProcessRegistry()
        self.executor = Executor(
            self.command_store,
            self.config_store,
            self.registry,
            shell=settings.execution.shell,
        )
        self.terminator = Terminator(self.command_store, self.registry, shell=settings.execution.shell)
        self.shortcuts = ShortcutDispatcher(self)

    # --- Commands ---

    def get_commands(self) -> list[Command]:
        return self.command_store.list()

    def add_command(self, command: Command) -> None:
        command.validate()
        with self.command_store.lock():
            commands = self.command_store.list()
            if any(c.id == command.id for c in commands):
                raise DuplicateCommandError(command.id)
            commands.append(command)
            self.command_store.persist(commands)
        logger.info("Added command %s (%s)", command.id, command.name)
        self.shortcuts.refresh(commands)

    def update_command(self, command: Command) -> None:
        command.validate()
        with self.command_store.lock():
            commands = self.command_store.list()
            for index, existing in enumerate(commands):
                if existing.id == command.id:
                    commands[index] = command
                    break
            else:
                raise NotFoundError(command.id)
            self.command_store.persist(commands)
        logger.info("Updated command %s", command.id)
        self.shortcuts.refresh(commands)

    def delete_command(self, command_id: str) -> None:
        with self.command_store.lock():
            commands = self.command_store.list()
            remaining = [c for c in commands if c.id != command_id]
            if len(remaining) == len(commands):
                raise NotFoundError(command_id)
            self.command_store.persist(remaining)
        logger.info("Deleted command %s", command_id)
        self.shortcuts.refresh(remaining)

    # --- Execution ---

    async def execute_command(self, command_id: str, source: str = "manual") -> ExecutionResult:
        return await self.executor.execute(command_id, source=source)

    async def kill_command(self, command_id: str) -> TerminationResult:
        return await self.terminator.terminate(command_id)

    # --- Config ---

    def get_config(self) -> Config:
        return self.config_store.load()

    def update_config(self, config: Config) -> None:
        self.config_store.save(config)

    def ensure_storage_directory(self) -> Path:
        path = self.command_store.ensure_directory()
        logger.info("Commands storage directory ready: %s", path.parent)
        return path
