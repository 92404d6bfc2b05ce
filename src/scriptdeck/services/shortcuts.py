"""Map global shortcut presses to command executions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from scriptdeck.errors import ScriptDeckError
from scriptdeck.storage.models import Command, ExecutionResult

if TYPE_CHECKING:
    from scriptdeck.app import CommandCenter

logger = logging.getLogger(__name__)


class ShortcutDispatcher:
    """Holds the shortcut -> command id table and runs the bound command on a press.

    Binding shortcuts to an OS listener is up to the host; it reads
    ``bindings`` after each ``refresh``. The table is loaded on first
    dispatch if nothing refreshed it before.
    """

    def __init__(self, center: CommandCenter) -> None:
        self.center = center
        self.bindings: dict[str, str] = {}
        self._loaded = False

    def refresh(self, commands: Optional[list[Command]] = None) -> dict[str, str]:
        """Rebuild the binding table from the command list."""
        if commands is None:
            commands = self.center.get_commands()
        bindings: dict[str, str] = {}
        for command in commands:
            shortcut = (command.shortcut or "").strip()
            if not shortcut:
                continue
            if shortcut in bindings:
                logger.error(
                    "Shortcut '%s' of %s is already bound to %s; skipping",
                    shortcut,
                    command.id,
                    bindings[shortcut],
                )
                continue
            bindings[shortcut] = command.id
        self.bindings = bindings
        self._loaded = True
        logger.debug("Shortcut bindings refreshed: %d bound", len(bindings))
        return bindings

    async def dispatch(self, shortcut: str) -> Optional[ExecutionResult]:
        """Run the command bound to a pressed shortcut. Errors are logged, not raised."""
        if not self._loaded:
            try:
                self.refresh()
            except ScriptDeckError as e:
                logger.error("Failed to load shortcut bindings: %s", e)
                return None
        command_id = self.bindings.get(shortcut.strip())
        if command_id is None:
            logger.warning("No command bound to shortcut '%s'", shortcut)
            return None
        try:
            return await self.center.execute_command(command_id, source="shortcut")
        except ScriptDeckError as e:
            logger.error("Failed to execute shortcut command %s: %s", command_id, e)
            return None
