"""Console entry points: ``cross-env`` and ``cross-env-shell``."""

import sys

import click
from pydantic import ValidationError

from .bridge import run
from .parser import parse_command
from .settings import LOG_LEVEL_VAR, Settings

CONTEXT_SETTINGS = dict(
    ignore_unknown_options=True,
    allow_interspersed_args=False,
)


def _execute(args, shell):
    """Run ``args`` and exit with the child's translated status."""
    try:
        settings = Settings.from_env()
    except ValidationError as e:
        message = e.errors()[0]["msg"]
        click.echo(f"Error: invalid {LOG_LEVEL_VAR}: {message}", err=True)
        sys.exit(2)
    settings.configure_logging()

    parsed = parse_command(list(args))
    try:
        proc = run(parsed.command, parsed.args, parsed.env, shell=shell)
    except (OSError, ValueError) as e:
        reason = getattr(e, "strerror", None) or e
        click.echo(f"Error: failed to run '{parsed.command}': {reason}", err=True)
        sys.exit(1)

    if proc is None:
        # Nothing to run
        return

    # The exit listener installed by the bridge ends the process
    proc.wait()


@click.command(
    context_settings=CONTEXT_SETTINGS,
    add_help_option=False,
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cross_env_command(args):
    """Set environment variables and run a command.

    Usage: cross-env [NAME=value]... COMMAND [ARG]...

    Examples:
        cross-env NODE_ENV=production node build.js
        cross-env GREETING="hello world" ./greet.sh
    """
    _execute(args, shell=None)


@click.command(
    context_settings=CONTEXT_SETTINGS,
    add_help_option=False,
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cross_env_shell_command(args):
    """Set environment variables and run a script through the system shell.

    Usage: cross-env-shell [NAME=value]... "SCRIPT"

    Examples:
        cross-env-shell GREETING=Hi NAME=Joe "echo $GREETING && echo $NAME"
    """
    _execute(args, shell=True)


def main():
    """Entry point for ``cross-env``."""
    cross_env_command(prog_name="cross-env")


def main_shell():
    """Entry point for ``cross-env-shell``."""
    cross_env_shell_command(prog_name="cross-env-shell")


if __name__ == "__main__":
    main()
