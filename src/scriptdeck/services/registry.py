"""In-memory registry of running command processes."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class RegistryEntry:
    # None while the process is being spawned.
    pid: Optional[int] = None
    kill_requested: bool = False


class ProcessRegistry:
    """Maps command id to the pid of its running instance.

    One lock guards the map; it is never held across process I/O.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, RegistryEntry] = {}

    def claim(self, command_id: str) -> bool:
        """Reserve a slot before spawning. False if the id already has one."""
        with self._lock:
            if command_id in self._entries:
                return False
            self._entries[command_id] = RegistryEntry()
            return True

    def register(self, command_id: str, pid: int) -> None:
        with self._lock:
            previous = self._entries.get(command_id)
            if previous is not None and previous.pid is not None and previous.pid != pid:
                logger.warning("Overwriting stale registry entry for %s (pid %d)", command_id, previous.pid)
            kill_requested = previous is not None and previous.pid is None and previous.kill_requested
            self._entries[command_id] = RegistryEntry(pid=pid, kill_requested=kill_requested)

    def unregister(self, command_id: str) -> Optional[RegistryEntry]:
        """Remove and return the entry; no-op if absent."""
        with self._lock:
            return self._entries.pop(command_id, None)

    def lookup(self, command_id: str) -> Optional[int]:
        with self._lock:
            entry = self._entries.get(command_id)
            return entry.pid if entry is not None else None

    def mark_kill_requested(self, command_id: str, require_pid: bool = False) -> Optional[int]:
        """Flag the entry as being terminated and return its pid.

        With ``require_pid`` an entry still waiting for its spawn is left unflagged.
        """
        with self._lock:
            entry = self._entries.get(command_id)
            if entry is None or (require_pid and entry.pid is None):
                return None
            entry.kill_requested = True
            return entry.pid

    def running(self) -> dict[str, int]:
        """Snapshot of ids with a live pid."""
        with self._lock:
            return {cid: e.pid for cid, e in self._entries.items() if e.pid is not None}

    def __contains__(self, command_id: object) -> bool:
        with self._lock:
            return command_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
