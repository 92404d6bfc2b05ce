"""SQLite database management for execution history."""

from __future__ import annotations

import logging
from pathlib import Path

import aiosqlite

from scriptdeck.storage.models import ExecutionRecord, ExecutionResult

logger = logging.getLogger(__name__)

_db: aiosqlite.Connection | None = None


async def init_db(db_path: str) -> None:
    """Initialize database and create tables."""
    global _db
    resolved = Path(db_path).expanduser().resolve()
    resolved.parent.mkdir(parents=True, exist_ok=True)

    _db = await aiosqlite.connect(str(resolved))
    _db.row_factory = aiosqlite.Row
    await _db.execute("PRAGMA journal_mode = WAL")

    await _db.execute("""
        CREATE TABLE IF NOT EXISTS executions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            command_id TEXT NOT NULL,
            name TEXT NOT NULL,
            output TEXT DEFAULT '',
            exit_code INTEGER,
            terminated INTEGER DEFAULT 0,
            execution_time_ms INTEGER,
            source TEXT DEFAULT 'manual'
                CHECK(source IN ('manual', 'shortcut')),
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    await _db.execute("CREATE INDEX IF NOT EXISTS idx_executions_created_at ON executions(created_at)")
    await _db.commit()
    logger.info("Database initialized: %s", resolved)


def is_initialized() -> bool:
    return _db is not None


async def get_db() -> aiosqlite.Connection:
    """Get the database connection."""
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _db


async def close_db() -> None:
    """Close the database connection."""
    global _db
    if _db is not None:
        await _db.close()
        _db = None
        logger.info("Database closed")


async def save_execution(name: str, result: ExecutionResult, source: str = "manual") -> None:
    """Append a finished execution to history. Never raises."""
    if _db is None:
        logger.debug("History disabled; not recording %s", result.command_id)
        return
    try:
        db = await get_db()
        await db.execute(
            """INSERT INTO executions (command_id, name, output, exit_code, terminated, execution_time_ms, source)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                result.command_id,
                name,
                result.output,
                result.exit_code,
                int(result.terminated),
                result.execution_time_ms,
                source,
            ),
        )
        await db.commit()
    except Exception:
        logger.exception("Failed to save execution history")


async def get_recent_executions(limit: int = 10) -> list[ExecutionRecord]:
    """Get recent execution history, newest first."""
    db = await get_db()
    cursor = await db.execute(
        """SELECT id, command_id, name, output, exit_code, terminated, execution_time_ms, source, created_at
           FROM executions ORDER BY id DESC LIMIT ?""",
        (limit,),
    )
    rows = await cursor.fetchall()
    return [
        ExecutionRecord(
            id=row["id"],
            command_id=row["command_id"],
            name=row["name"],
            output=row["output"] or "",
            exit_code=row["exit_code"],
            terminated=bool(row["terminated"]),
            execution_time_ms=row["execution_time_ms"],
            source=row["source"],
            created_at=str(row["created_at"]),
        )
        for row in rows
    ]
