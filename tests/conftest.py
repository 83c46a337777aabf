"""Pytest configuration and shared fixtures."""

import signal
from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner

from crossenv.bridge import FORWARDED_SIGNALS
from crossenv.cli import cross_env_command, cross_env_shell_command
from crossenv.process_utils import SpawnedProcess


@pytest.fixture(autouse=True)
def restore_signal_handlers():
    """Put back the forwarded signal handlers after each test.

    The bridge installs process-wide handlers while a child is alive. Tests
    that never deliver the exit notification would otherwise leave them
    pointing at a mock.
    """
    saved = {}
    for name in FORWARDED_SIGNALS:
        signum = getattr(signal, name, None)
        if signum is not None:
            saved[signum] = signal.getsignal(signum)
    yield
    for signum, handler in saved.items():
        signal.signal(signum, signal.SIG_DFL if handler is None else handler)


@pytest.fixture
def posix(monkeypatch):
    """Parse as if running on a POSIX host."""
    monkeypatch.setattr("crossenv.parser.is_windows", lambda: False)


@pytest.fixture
def windows(monkeypatch):
    """Parse as if running on a Windows host."""
    monkeypatch.setattr("crossenv.parser.is_windows", lambda: True)


@pytest.fixture
def spawn_mock():
    """Replace the spawn primitive used by the bridge with a mock handle."""
    with patch("crossenv.bridge.spawn") as mock_spawn:
        mock_spawn.return_value = Mock(spec=SpawnedProcess)
        yield mock_spawn


@pytest.fixture
def exit_mock():
    """Stop the bridge's exit listener from ending the test run."""
    with patch("crossenv.bridge.sys.exit") as mock_exit:
        yield mock_exit


@pytest.fixture
def cli_runner():
    """Provide Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(cli_runner):
    """Helper to invoke ``cross-env`` (or ``cross-env-shell``) with args.

    Usage:
        result = invoke(["FOO=1", sys.executable, "-c", "..."])
        result = invoke(["FOO=1", "exit 3"], shell=True)
    """

    def _invoke(args, shell=False, env=None):
        command = cross_env_shell_command if shell else cross_env_command
        return cli_runner.invoke(command, args, env=env)

    return _invoke
