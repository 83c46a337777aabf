"""Process bridge: run the parsed command and mirror its fate in the parent.

The parent never decides to exit on its own. Termination requests it
receives are forwarded to the child, and the child's exit notification is
the only thing that makes the parent exit.
"""

from __future__ import annotations

import logging
import os
import signal
import sys
from collections.abc import Mapping, Sequence
from typing import Any, Optional

from .parser import parse_command
from .process_utils import ShellOption, SpawnedProcess, spawn

logger = logging.getLogger(__name__)

FORWARDED_SIGNALS = ("SIGTERM", "SIGINT", "SIGHUP", "SIGBREAK")


def translate_exit(code: Optional[int], signal_name: Optional[str] = None) -> int:
    """Map a child's ``(code, signal)`` to the parent's exit code.

    A child interrupted with SIGINT counts as a clean exit. Any other
    signal death becomes 1. A numeric exit code is passed through.
    """
    if code is None:
        return 0 if signal_name == "SIGINT" else 1
    return code


class SignalForwarder:
    """Relay termination signals received by the parent to a child handle.

    Handlers are installed with ``install`` and the previous ones are put
    back by ``uninstall``, so nothing leaks past the child's lifetime.
    """

    def __init__(self, child: SpawnedProcess):
        self.child = child
        self._previous: dict[signal.Signals, Any] = {}

    def _forward(self, signum: int, frame: Any) -> None:
        name = signal.Signals(signum).name
        logger.debug("Forwarding %s to child", name)
        self.child.kill(name)

    def install(self) -> None:
        for name in FORWARDED_SIGNALS:
            signum = getattr(signal, name, None)
            if signum is None:
                continue
            try:
                self._previous[signum] = signal.signal(signum, self._forward)
            except ValueError:
                # signal.signal only works on the main thread
                logger.warning("Cannot forward %s outside the main thread", name)
                break

    def uninstall(self) -> None:
        for signum, previous in self._previous.items():
            signal.signal(signum, signal.SIG_DFL if previous is None else previous)
        self._previous.clear()


def run(
    command: Optional[str],
    args: Sequence[str],
    env_overrides: Mapping[str, str],
    *,
    shell: ShellOption = None,
) -> Optional[SpawnedProcess]:
    """Spawn ``command`` and wire its exit into the parent process.

    Args:
        command: Executable to run; None means there is nothing to do
        args: Arguments for the command
        env_overrides: Variables layered over the inherited environment
        shell: Passed through to the spawn call unchanged

    Returns:
        The spawned handle, or None when ``command`` is None

    Raises:
        OSError: Propagated unchanged when the command cannot be started
    """
    if command is None:
        return None

    env = {**os.environ, **env_overrides}
    proc = spawn(command, list(args), stdio="inherit", shell=shell, env=env)

    forwarder = SignalForwarder(proc)
    forwarder.install()

    def _on_exit(code: Optional[int], signal_name: Optional[str] = None) -> None:
        forwarder.uninstall()
        sys.exit(translate_exit(code, signal_name))

    proc.on("exit", _on_exit)
    return proc


def cross_env(
    argv: Sequence[str], *, shell: ShellOption = None
) -> Optional[SpawnedProcess]:
    """Parse ``argv`` and run the resulting command.

    Examples:
        cross_env(["NODE_ENV=production", "node", "build.js"])
        cross_env(["GREETING=Hi", "echo $GREETING"], shell=True)
    """
    parsed = parse_command(argv)
    return run(parsed.command, parsed.args, parsed.env, shell=shell)


__all__ = ["FORWARDED_SIGNALS", "SignalForwarder", "cross_env", "run", "translate_exit"]
