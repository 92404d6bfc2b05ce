"""CLI entry point using typer."""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
import uuid
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from scriptdeck import __version__
from scriptdeck.app import CommandCenter
from scriptdeck.config import AppSettings, get_settings
from scriptdeck.errors import ScriptDeckError
from scriptdeck.storage.database import close_db, get_recent_executions, init_db
from scriptdeck.storage.models import Command, ExecutionResult
from scriptdeck.utils.formatting import format_execution_result, format_history_row, preview
from scriptdeck.utils.system import check_shell

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="scriptdeck",
    help="Run named shell scripts on demand or from global shortcuts.",
    add_completion=False,
)
console = Console()

CONFIG_KEYS = ("safe_mode", "commands_path", "accessibility_notice_dismissed")


def _setup_logging(settings: AppSettings) -> None:
    log_path = Path(settings.logging.file).expanduser().resolve()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, settings.logging.level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.FileHandler(str(log_path)),
            logging.StreamHandler(),
        ],
    )


def _center() -> CommandCenter:
    return CommandCenter(get_settings())


def _fail(error: ScriptDeckError) -> typer.Exit:
    console.print(f"[red]{error.user_message}[/red]")
    return typer.Exit(1)


def _blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value


def _command_name(center: CommandCenter, command_id: str) -> str:
    """Display name for a command, or its id if it was removed meanwhile."""
    try:
        return center.command_store.get(command_id).name
    except ScriptDeckError:
        return command_id


async def _with_history(center: CommandCenter, coro):
    if center.settings.history.enabled:
        await init_db(center.settings.history.db_path)
    try:
        return await coro
    finally:
        await close_db()


async def _kill_on_signal(center: CommandCenter, command_id: str) -> None:
    try:
        outcome = await center.kill_command(command_id)
        logger.info("Terminated %s via %s", command_id, outcome.method)
    except ScriptDeckError as e:
        logger.error("Failed to terminate %s: %s", command_id, e)


async def _run_until_done(center: CommandCenter, command_id: str) -> ExecutionResult:
    """Execute a command; SIGINT/SIGTERM terminate it instead of the CLI."""
    loop = asyncio.get_running_loop()
    task = asyncio.ensure_future(center.execute_command(command_id))
    pending: set[asyncio.Future] = set()

    def _signal_handler() -> None:
        logger.info("Interrupt received, terminating %s", command_id)
        kill = asyncio.ensure_future(_kill_on_signal(center, command_id))
        pending.add(kill)
        kill.add_done_callback(pending.discard)

    installed: list[signal.Signals] = []
    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, _signal_handler)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            pass
    try:
        return await task
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)


@app.command("list")
def list_commands() -> None:
    """List stored commands."""
    center = _center()
    try:
        commands = center.get_commands()
    except ScriptDeckError as e:
        raise _fail(e)

    if not commands:
        console.print("[dim]No commands yet. Add one with 'scriptdeck add'.[/dim]")
        return

    table = Table(title="Commands")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Script")
    table.add_column("Shortcut", style="magenta")
    table.add_column("Kill script", style="dim")
    for cmd in commands:
        table.add_row(
            cmd.id,
            cmd.name,
            preview(cmd.script),
            cmd.shortcut or "",
            preview(cmd.kill_script) if cmd.kill_script else "",
        )
    console.print(table)


@app.command()
def add(
    name: str = typer.Option(..., "--name", "-n", help="Display name"),
    script: str = typer.Option(..., "--script", "-s", help="Shell script to run"),
    kill_script: str = typer.Option(None, "--kill-script", "-k", help="Script used to stop the command"),
    shortcut: str = typer.Option(None, "--shortcut", help="Global shortcut, e.g. CommandOrControl+Shift+K"),
    description: str = typer.Option(None, "--description", "-d", help="Free text description"),
    command_id: str = typer.Option(None, "--id", help="Explicit id (default: random UUID)"),
) -> None:
    """Add a new command."""
    command = Command(
        id=command_id or str(uuid.uuid4()),
        name=name,
        script=script,
        kill_script=_blank_to_none(kill_script),
        shortcut=_blank_to_none(shortcut),
        description=_blank_to_none(description),
    )
    try:
        _center().add_command(command)
    except ScriptDeckError as e:
        raise _fail(e)
    console.print(f"[green]Added {command.name}[/green] (id: {command.id})")


@app.command()
def edit(
    command_id: str = typer.Argument(..., help="Command id"),
    name: str = typer.Option(None, "--name", "-n"),
    script: str = typer.Option(None, "--script", "-s"),
    kill_script: str = typer.Option(None, "--kill-script", "-k", help="Empty string clears it"),
    shortcut: str = typer.Option(None, "--shortcut", help="Empty string clears it"),
    description: str = typer.Option(None, "--description", "-d", help="Empty string clears it"),
) -> None:
    """Replace fields of an existing command."""
    center = _center()
    try:
        current = center.command_store.get(command_id)
        updated = Command(
            id=current.id,
            name=name if name is not None else current.name,
            script=script if script is not None else current.script,
            kill_script=_blank_to_none(kill_script) if kill_script is not None else current.kill_script,
            shortcut=_blank_to_none(shortcut) if shortcut is not None else current.shortcut,
            description=_blank_to_none(description) if description is not None else current.description,
        )
        center.update_command(updated)
    except ScriptDeckError as e:
        raise _fail(e)
    console.print(f"[green]Updated {updated.name}[/green]")


@app.command()
def remove(command_id: str = typer.Argument(..., help="Command id")) -> None:
    """Delete a command."""
    try:
        _center().delete_command(command_id)
    except ScriptDeckError as e:
        raise _fail(e)
    console.print(f"[green]Deleted {command_id}[/green]")


@app.command()
def run(command_id: str = typer.Argument(..., help="Command id")) -> None:
    """Run a command and print its output. Ctrl+C terminates it."""
    settings = get_settings()
    _setup_logging(settings)
    center = CommandCenter(settings)
    try:
        result = asyncio.run(_with_history(center, _run_until_done(center, command_id)))
    except ScriptDeckError as e:
        raise _fail(e)

    console.print(format_execution_result(result, _command_name(center, command_id)), markup=False, highlight=False)
    if result.terminated or result.exit_code != 0:
        raise typer.Exit(1)


@app.command()
def kill(command_id: str = typer.Argument(..., help="Command id")) -> None:
    """Stop a running command.

    From a separate CLI process only the command's kill script can reach it;
    Ctrl+C in the terminal running it signals the process directly.
    """
    settings = get_settings()
    _setup_logging(settings)
    center = CommandCenter(settings)
    try:
        outcome = asyncio.run(center.kill_command(command_id))
    except ScriptDeckError as e:
        raise _fail(e)
    console.print(f"[green]Termination sent[/green] ({outcome.method})")


@app.command()
def trigger(shortcut: str = typer.Argument(..., help="Shortcut as stored on the command")) -> None:
    """Run whatever command is bound to a shortcut."""
    settings = get_settings()
    _setup_logging(settings)
    center = CommandCenter(settings)
    try:
        center.shortcuts.refresh()
    except ScriptDeckError as e:
        raise _fail(e)

    result = asyncio.run(_with_history(center, center.shortcuts.dispatch(shortcut)))
    if result is None:
        console.print(f"[yellow]Nothing ran for '{shortcut}'.[/yellow]")
        raise typer.Exit(1)
    console.print(format_execution_result(result, _command_name(center, result.command_id)), markup=False, highlight=False)


@app.command("safe-mode")
def safe_mode(state: str = typer.Argument(None, help="on or off")) -> None:
    """Show or toggle safe mode."""
    center = _center()
    try:
        cfg = center.get_config()
        if state is not None:
            if state.lower() not in ("on", "off"):
                console.print("[red]Usage: scriptdeck safe-mode [on|off][/red]")
                raise typer.Exit(1)
            cfg.safe_mode = state.lower() == "on"
            center.update_config(cfg)
    except ScriptDeckError as e:
        raise _fail(e)

    if cfg.safe_mode:
        console.print("Safe mode: [yellow]ON[/yellow] (commands will not run)")
    else:
        console.print("Safe mode: [green]OFF[/green]")


@app.command()
def config(
    key: str = typer.Argument(None, help="Config key (e.g., safe_mode)"),
    value: str = typer.Argument(None, help="New value"),
) -> None:
    """View or modify configuration."""
    center = _center()
    try:
        cfg = center.get_config()
    except ScriptDeckError as e:
        raise _fail(e)

    if key is None:
        table = Table(title="Configuration")
        table.add_column("Key", style="cyan")
        table.add_column("Value", style="green")
        table.add_row("safe_mode", str(cfg.safe_mode))
        table.add_row("commands_path", cfg.commands_path or f"(default) {center.command_store.default_path}")
        table.add_row("accessibility_notice_dismissed", str(cfg.accessibility_notice_dismissed))
        console.print(table)
        return

    if key not in CONFIG_KEYS:
        console.print(f"[red]Unknown key: {key}[/red]")
        raise typer.Exit(1)
    if value is None:
        console.print("[red]Usage: scriptdeck config <key> <value>[/red]")
        raise typer.Exit(1)

    typed_value: bool | str | None
    if isinstance(getattr(cfg, key), bool):
        typed_value = value.lower() in ("true", "1", "yes", "on")
    else:
        typed_value = _blank_to_none(value)

    setattr(cfg, key, typed_value)
    try:
        center.update_config(cfg)
    except ScriptDeckError as e:
        raise _fail(e)
    console.print(f"[green]{key} = {typed_value}[/green]")


@app.command()
def storage(path: str = typer.Argument(None, help="New commands.json location")) -> None:
    """Show or change where commands are stored."""
    center = _center()
    try:
        if path is not None:
            cfg = center.get_config()
            cfg.commands_path = _blank_to_none(path)
            center.update_config(cfg)
        resolved = center.ensure_storage_directory()
    except ScriptDeckError as e:
        raise _fail(e)
    console.print(f"Commands file: {resolved}")


@app.command()
def history(limit: int = typer.Option(10, "--limit", "-n", help="Number of entries")) -> None:
    """Show recent executions."""
    settings = get_settings()
    if not settings.history.enabled:
        console.print("[dim]History is disabled.[/dim]")
        return

    records = asyncio.run(_with_history(CommandCenter(settings), get_recent_executions(limit)))
    if not records:
        console.print("[dim]No executions recorded.[/dim]")
        return

    table = Table(title="History")
    for column in ("When", "Command", "Status", "Duration", "Source"):
        table.add_column(column)
    for record in records:
        table.add_row(*format_history_row(record))
    console.print(table)


@app.command()
def logs(lines: int = typer.Option(50, "--lines", "-n", help="Number of lines")) -> None:
    """View the log file."""
    log_path = Path(get_settings().logging.file).expanduser().resolve()
    if not log_path.exists():
        console.print("[dim]No log file found.[/dim]")
        return

    content = log_path.read_text()
    log_lines = content.strip().split("\n")
    for line in log_lines[-lines:]:
        console.print(line, markup=False, highlight=False)


@app.command()
def version() -> None:
    """Show version information."""
    settings = get_settings()
    console.print(f"scriptdeck v{__version__}")

    found, shell_info = check_shell(settings.execution.shell)
    if found:
        console.print(f"Shell: {shell_info}")
    else:
        console.print(f"Shell: [yellow]{shell_info}[/yellow]")

    console.print(f"Python: {sys.version.split()[0]}")
    console.print(f"Data: {settings.data_dir}")


if __name__ == "__main__":
    app()
