"""Output formatting helpers for the CLI."""

from __future__ import annotations

from scriptdeck.storage.models import ExecutionRecord, ExecutionResult

MAX_PREVIEW_LENGTH = 60


def format_duration(ms: int) -> str:
    """Format milliseconds to human-readable duration."""
    if ms < 1000:
        return f"{ms}ms"
    elif ms < 60000:
        return f"{ms / 1000:.1f}s"
    else:
        minutes = ms // 60000
        seconds = (ms % 60000) // 1000
        return f"{minutes}m {seconds}s"


def status_label(exit_code: int, terminated: bool) -> str:
    if terminated:
        return "KILLED"
    return "OK" if exit_code == 0 else f"ERR({exit_code})"


def format_execution_result(result: ExecutionResult, name: str) -> str:
    """Format a finished execution for display."""
    icon = status_label(result.exit_code, result.terminated)
    elapsed = format_duration(result.execution_time_ms)
    output = result.output or "(no output)"
    return f"{name} [{icon}] {elapsed}\n\n{output}"


def preview(text: str, max_len: int = MAX_PREVIEW_LENGTH) -> str:
    """Single-line preview of a script or output."""
    line = " ".join(text.split())
    if len(line) <= max_len:
        return line
    return line[: max_len - 3] + "..."


def format_history_row(record: ExecutionRecord) -> tuple[str, str, str, str, str]:
    return (
        record.created_at,
        record.name,
        status_label(record.exit_code, record.terminated),
        format_duration(record.execution_time_ms),
        record.source,
    )
