"""Command script executor."""

from __future__ import annotations

import asyncio
import logging
import time

from scriptdeck.errors import AlreadyRunningError, SafeModeBlockedError, SpawnError
from scriptdeck.services.registry import ProcessRegistry
from scriptdeck.storage.database import save_execution
from scriptdeck.storage.json_store import CommandStore, ConfigStore
from scriptdeck.storage.models import ExecutionResult
from scriptdeck.utils.system import kill_process, shell_argv, spawn_options

logger = logging.getLogger(__name__)


class Executor:
    """Run a stored command's script and track its process while it runs."""

    def __init__(
        self,
        commands: CommandStore,
        config: ConfigStore,
        registry: ProcessRegistry,
        shell: str = "",
    ) -> None:
        self.commands = commands
        self.config = config
        self.registry = registry
        self.shell = shell

    async def execute(self, command_id: str, source: str = "manual") -> ExecutionResult:
        """Execute a command by id and wait for it to exit.

        A non-zero exit code is reported in the result, not raised. Raises
        SafeModeBlockedError, NotFoundError, AlreadyRunningError or SpawnError
        when no process could be started.
        """
        if self.config.load().safe_mode:
            logger.warning("Safe mode blocked execution of %s", command_id)
            raise SafeModeBlockedError(command_id)

        command = self.commands.get(command_id)

        if not self.registry.claim(command_id):
            raise AlreadyRunningError(command_id)

        start = time.monotonic()
        try:
            try:
                proc = await asyncio.create_subprocess_exec(
                    *shell_argv(self.shell),
                    command.script,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    **spawn_options(),
                )
            except OSError as e:
                logger.error("Failed to spawn %s: %s", command_id, e)
                raise SpawnError(command_id, e) from e

            self.registry.register(command_id, proc.pid)
            logger.info("Executing %s (%s) as pid %d", command_id, command.name, proc.pid)

            try:
                stdout_bytes, stderr_bytes = await proc.communicate()
            except asyncio.CancelledError:
                # Never leave an untracked child behind.
                try:
                    kill_process(proc.pid)
                except ProcessLookupError:
                    pass
                raise
        finally:
            entry = self.registry.unregister(command_id)

        exit_code = proc.returncode if proc.returncode is not None else -1
        kill_requested = entry is not None and entry.kill_requested
        terminated = exit_code < 0 or (kill_requested and exit_code != 0)
        elapsed_ms = int((time.monotonic() - start) * 1000)

        result = ExecutionResult(
            command_id=command_id,
            stdout=stdout_bytes.decode("utf-8", errors="replace"),
            stderr=stderr_bytes.decode("utf-8", errors="replace"),
            exit_code=exit_code,
            execution_time_ms=elapsed_ms,
            terminated=terminated,
        )
        logger.info(
            "Command %s %s with exit code %d after %dms",
            command_id,
            "terminated" if terminated else "exited",
            exit_code,
            elapsed_ms,
        )

        await save_execution(command.name, result, source=source)
        return result
