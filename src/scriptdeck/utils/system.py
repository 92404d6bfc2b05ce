"""Shell resolution and process signalling."""

from __future__ import annotations

import os
import shlex
import shutil
import signal


def shell_argv(shell: str = "") -> list[str]:
    """Argument prefix that runs a script string through a shell.

    ``shell`` may name a custom interpreter command line (e.g. ``"bash -c"``);
    empty means the platform default.
    """
    if shell:
        return shlex.split(shell)
    if os.name == "nt":
        return [os.environ.get("COMSPEC", "cmd.exe"), "/C"]
    return [shutil.which("sh") or "/bin/sh", "-c"]


def check_shell(shell: str = "") -> tuple[bool, str]:
    """Check that the configured shell interpreter can be found."""
    argv = shell_argv(shell)
    found = shutil.which(argv[0])
    if not found:
        return False, f"Shell not found: {argv[0]}"
    return True, " ".join([found, *argv[1:]])


def spawn_options() -> dict:
    """Extra subprocess options so a script and its children share one killable group."""
    if os.name == "nt":
        return {}
    return {"start_new_session": True}


def kill_process(pid: int) -> None:
    """Forcefully kill the process (and its process group on POSIX).

    Raises ProcessLookupError if the process no longer exists.
    """
    if os.name == "nt" or not hasattr(os, "killpg"):
        os.kill(pid, signal.SIGTERM)
        return
    try:
        os.killpg(pid, signal.SIGKILL)
    except ProcessLookupError:
        # Not a group leader; signal the process itself.
        os.kill(pid, signal.SIGKILL)
