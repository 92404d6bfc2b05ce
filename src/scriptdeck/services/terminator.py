"""Stop running commands via kill script or signal."""

from __future__ import annotations

import asyncio
import logging

from scriptdeck.errors import ScriptDeckError, TerminationError
from scriptdeck.services.registry import ProcessRegistry
from scriptdeck.storage.json_store import CommandStore
from scriptdeck.storage.models import TerminationResult
from scriptdeck.utils.system import kill_process, shell_argv

logger = logging.getLogger(__name__)


class Terminator:
    """Terminate a command's running instance.

    A kill script always wins over signalling the tracked pid. Registry
    cleanup is left to the Executor that owns the process.
    """

    def __init__(self, commands: CommandStore, registry: ProcessRegistry, shell: str = "") -> None:
        self.commands = commands
        self.registry = registry
        self.shell = shell

    async def terminate(self, command_id: str) -> TerminationResult:
        command = self.commands.get(command_id)

        if command.has_kill_script():
            self.registry.mark_kill_requested(command_id)
            exit_code = await self._run_kill_script(command_id, command.kill_script)
            return TerminationResult(command_id=command_id, method="kill_script", exit_code=exit_code)

        pid = self.registry.mark_kill_requested(command_id, require_pid=True)
        if pid is None:
            raise TerminationError(command_id)

        try:
            kill_process(pid)
        except ProcessLookupError as e:
            raise TerminationError(command_id) from e
        except OSError as e:
            raise ScriptDeckError(f"Failed to kill {command_id} (pid {pid}): {e}") from e

        logger.info("Sent kill signal to %s (pid %d)", command_id, pid)
        return TerminationResult(command_id=command_id, method="signal", pid=pid)

    async def _run_kill_script(self, command_id: str, kill_script: str) -> int | None:
        """Run the kill script to completion. Failures count as attempted."""
        logger.info("Running kill script for %s", command_id)
        try:
            proc = await asyncio.create_subprocess_exec(
                *shell_argv(self.shell),
                kill_script,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr_bytes = await proc.communicate()
        except OSError as e:
            logger.warning("Kill script for %s could not be started: %s", command_id, e)
            return None

        if proc.returncode:
            logger.warning(
                "Kill script for %s exited with %d: %s",
                command_id,
                proc.returncode,
                stderr_bytes.decode("utf-8", errors="replace").strip(),
            )
        return proc.returncode
