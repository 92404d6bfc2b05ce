"""Shared test fixtures."""

from __future__ import annotations

import asyncio

import pytest

from scriptdeck.app import CommandCenter
from scriptdeck.config import AppSettings, ExecutionSettings, HistorySettings, LoggingSettings
from scriptdeck.services.registry import ProcessRegistry
from scriptdeck.storage.models import Command


@pytest.fixture
def settings(tmp_path):
    """Create test settings rooted in a temp data dir."""
    return AppSettings(
        data_dir=str(tmp_path / "data"),
        logging=LoggingSettings(level="DEBUG", file=str(tmp_path / "test.log")),
        history=HistorySettings(enabled=True, db_path=str(tmp_path / "history.db")),
        execution=ExecutionSettings(shell=""),
    )


@pytest.fixture
def center(settings):
    return CommandCenter(settings)


@pytest.fixture
def sleep_command():
    return Command(id="1", name="sleep", script="sleep 5")


async def wait_for_pid(registry: ProcessRegistry, command_id: str, timeout: float = 5.0) -> int:
    """Poll the registry until the command has a live pid."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while (pid := registry.lookup(command_id)) is None:
        if loop.time() > deadline:
            raise AssertionError(f"{command_id} never registered a pid")
        await asyncio.sleep(0.01)
    return pid
