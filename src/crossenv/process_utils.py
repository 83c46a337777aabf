"""Process spawning for crossenv.

Wraps ``subprocess.Popen`` in a small handle that offers exit notification
and signal delivery by signal name. The bridge layer only talks to the child
through this handle, which keeps it trivially mockable in tests.
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
from collections.abc import Callable, Mapping, Sequence
from typing import Any, Literal, Optional, Union

from .platform import is_windows

logger = logging.getLogger(__name__)

Stdio = Literal["inherit", "pipe", "ignore"]
ShellOption = Union[bool, str, None]
ExitListener = Callable[[Optional[int], Optional[str]], Any]

_STDIO_STREAMS: dict[str, Any] = {
    "inherit": None,
    "pipe": subprocess.PIPE,
    "ignore": subprocess.DEVNULL,
}


def _validate_command(command: Any, args: Sequence[Any]) -> list[str]:
    """Validate spawn arguments and return the full argv."""
    if not isinstance(command, str):
        msg = "Command must be a string"
        raise TypeError(msg)
    if not command.strip():
        msg = "Command cannot be empty or whitespace"
        raise ValueError(msg)

    argv = [command]
    for arg in args:
        if isinstance(arg, os.PathLike):
            arg = os.fspath(arg)
        if not isinstance(arg, str):
            msg = "Command arguments must be strings or os.PathLike"
            raise TypeError(msg)
        # Empty arguments are legitimate (e.g. ``printf ''``)
        argv.append(arg)

    return argv


def _split_returncode(returncode: int) -> tuple[Optional[int], Optional[str]]:
    """Turn a Popen return code into an ``(exit code, signal name)`` pair."""
    if returncode >= 0:
        return returncode, None
    try:
        return None, signal.Signals(-returncode).name
    except ValueError:
        return None, None


class SpawnedProcess:
    """Handle to a running child process.

    Listeners registered with ``on("exit", ...)`` are called exactly once,
    with ``(code, signal_name)``, when ``wait`` observes the child's exit.
    ``code`` is None when the child was killed by a signal.
    """

    def __init__(self, popen: subprocess.Popen[Any]):
        self._popen = popen
        self._exit_listeners: list[ExitListener] = []
        self._exit_status: Optional[tuple[Optional[int], Optional[str]]] = None

    @property
    def pid(self) -> int:
        return self._popen.pid

    @property
    def popen(self) -> subprocess.Popen[Any]:
        return self._popen

    @property
    def exited(self) -> bool:
        return self._exit_status is not None

    def on(self, event: str, listener: ExitListener) -> "SpawnedProcess":
        """Register a listener. Only the ``exit`` event exists."""
        if event != "exit":
            raise ValueError(f"Unsupported event: {event}")
        self._exit_listeners.append(listener)
        return self

    def kill(self, signal_name: str = "SIGTERM") -> bool:
        """Deliver ``signal_name`` to the child.

        Windows has no POSIX signals, so there the child is terminated
        whatever the name. Returns False if the child already exited.
        """
        if self._popen.poll() is not None:
            return False

        if is_windows():
            logger.debug("Terminating pid %d (%s)", self._popen.pid, signal_name)
            self._popen.terminate()
            return True

        signum = getattr(signal, signal_name, None)
        if not isinstance(signum, signal.Signals):
            raise ValueError(f"Unknown signal: {signal_name}")
        logger.debug("Sending %s to pid %d", signal_name, self._popen.pid)
        self._popen.send_signal(signum)
        return True

    def wait(self) -> tuple[Optional[int], Optional[str]]:
        """Block until the child exits and notify the exit listeners."""
        returncode = self._popen.wait()
        if self._exit_status is None:
            self._exit_status = _split_returncode(returncode)
            code, signal_name = self._exit_status
            logger.debug(
                "pid %d exited (code=%s, signal=%s)",
                self._popen.pid,
                code,
                signal_name,
            )
            for listener in list(self._exit_listeners):
                listener(code, signal_name)
        return self._exit_status


def _resolve_executable(command: str, env: Optional[Mapping[str, str]]) -> str:
    """Locate ``command`` on PATH the way cmd.exe would (PATHEXT aware)."""
    path = None if env is None else env.get("PATH", env.get("Path"))
    return shutil.which(command, path=path) or command


def spawn(
    command: str,
    args: Sequence[str] = (),
    *,
    stdio: Stdio = "inherit",
    shell: ShellOption = None,
    env: Optional[Mapping[str, str]] = None,
) -> SpawnedProcess:
    """Start ``command`` with ``args`` and return a handle to it.

    Args:
        command: Executable, or the script to run when ``shell`` is set
        args: Arguments for the command
        stdio: "inherit" shares the parent's streams, "pipe" captures them,
            "ignore" connects them to the null device
        shell: True to run through the system shell, a string to name the
            shell executable, None/False to execute directly
        env: Complete environment for the child (None inherits the parent's)

    Raises:
        OSError: The command could not be started (not found, not executable)
    """
    argv = _validate_command(command, args)
    stream = _STDIO_STREAMS[stdio]
    kwargs: dict[str, Any] = {
        "stdin": stream,
        "stdout": stream,
        "stderr": stream,
        "env": None if env is None else dict(env),
    }

    if shell:
        kwargs["shell"] = True
        if isinstance(shell, str):
            kwargs["executable"] = shell
        cmd: Union[str, list[str]] = " ".join(argv)
    else:
        if is_windows():
            argv[0] = _resolve_executable(argv[0], env)
        cmd = argv

    logger.debug("Spawning %r (shell=%r)", cmd, shell)
    popen = subprocess.Popen(cmd, **kwargs)  # noqa: S603
    return SpawnedProcess(popen)


__all__ = ["SpawnedProcess", "spawn"]
