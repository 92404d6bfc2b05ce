"""Tests for database module."""

from __future__ import annotations

import pytest

from scriptdeck.storage.database import close_db, get_recent_executions, init_db, is_initialized, save_execution
from scriptdeck.storage.models import ExecutionResult


class TestDatabase:
    @pytest.mark.asyncio
    async def test_init_and_save(self, tmp_path):
        await init_db(str(tmp_path / "test.db"))

        await save_execution(
            "echo",
            ExecutionResult(command_id="1", stdout="hello\n", exit_code=0, execution_time_ms=50),
        )

        records = await get_recent_executions(limit=5)
        assert len(records) == 1
        assert records[0].command_id == "1"
        assert records[0].output == "hello\n"
        assert records[0].exit_code == 0
        assert records[0].source == "manual"

        await close_db()

    @pytest.mark.asyncio
    async def test_multiple_executions_ordering(self, tmp_path):
        await init_db(str(tmp_path / "test2.db"))

        for i in range(5):
            await save_execution(f"cmd_{i}", ExecutionResult(command_id=str(i), execution_time_ms=i * 10))

        records = await get_recent_executions(limit=3)
        assert len(records) == 3
        # Most recent first
        assert records[0].name == "cmd_4"
        assert records[2].name == "cmd_2"

        await close_db()

    @pytest.mark.asyncio
    async def test_terminated_flag_round_trips(self, tmp_path):
        await init_db(str(tmp_path / "test3.db"))

        await save_execution(
            "sleep",
            ExecutionResult(command_id="1", exit_code=-9, terminated=True),
            source="shortcut",
        )

        records = await get_recent_executions(limit=1)
        assert records[0].terminated is True
        assert records[0].source == "shortcut"

        await close_db()

    @pytest.mark.asyncio
    async def test_invalid_source_is_logged_not_raised(self, tmp_path, caplog):
        await init_db(str(tmp_path / "test4.db"))

        await save_execution("x", ExecutionResult(command_id="1"), source="telepathy")

        assert "Failed to save execution history" in caplog.text
        assert await get_recent_executions() == []
        await close_db()

    @pytest.mark.asyncio
    async def test_save_without_db_is_noop(self):
        assert not is_initialized()
        await save_execution("x", ExecutionResult(command_id="1"))
