"""Argument parsing for ``NAME=value`` command prefixes.

This module splits a raw argument list into:
    [NAME=value]... command [arg]...

Where:
    - NAME=value: Environment assignment; value may be 'single' or "double" quoted
    - command: First token that is not an assignment
    - arg: Remaining tokens, passed through without quote removal
"""

import logging
import ntpath
import os
import re
from collections.abc import Mapping, Sequence
from typing import Optional

from .models import ParsedCommand
from .platform import is_windows

logger = logging.getLogger(__name__)

ASSIGNMENT_RE = re.compile(r"(\w+)=(.*)", re.ASCII | re.DOTALL)
ESCAPE_RE = re.compile(r"\\([\\'\"$])")
VARIABLE_RE = re.compile(r"\$(?:\{(\w+)\}|(\w+))", re.ASCII)

QUOTES = ("'", '"')


def is_assignment(token: str) -> bool:
    """Check whether ``token`` has the ``NAME=value`` form."""
    return ASSIGNMENT_RE.fullmatch(token) is not None


def collapse_escapes(text: str) -> str:
    """Collapse ``\\\\``, ``\\'``, ``\\"`` and ``\\$`` to the escaped character.

    Any other backslash sequence is left alone.
    """
    return ESCAPE_RE.sub(r"\1", text)


def decode_value(raw: str) -> str:
    """Decode an assignment value.

    Examples:
        >>> decode_value("production")
        'production'

        >>> decode_value("'bar env'")
        'bar env'

        >>> decode_value('"foo=bar"')
        'foo=bar'

        >>> decode_value("''")
        ''

        >>> decode_value("'unterminated")
        "'unterminated"
    """
    if len(raw) >= 2 and raw[0] in QUOTES and raw[0] == raw[-1]:
        return collapse_escapes(raw[1:-1])
    # Unquoted and malformed values are taken literally
    return raw


def _convert_variables(command: str, env: Mapping[str, str]) -> str:
    """Rewrite ``$NAME``/``${NAME}`` to ``%NAME%`` for cmd.exe."""

    def _replace(match: "re.Match[str]") -> str:
        name = match.group(1) or match.group(2)
        return f"%{name}%" if name in env else ""

    return VARIABLE_RE.sub(_replace, command)


def normalize_command(
    command: str,
    env: Optional[Mapping[str, str]] = None,
    *,
    windows: Optional[bool] = None,
) -> str:
    """Apply platform-specific fixes to the executable name.

    On Windows the executable is path-normalized and shell variable
    references are converted to cmd.exe syntax using ``env`` (defaults to
    the inherited environment). Elsewhere only a leading ``./`` is removed.
    """
    if windows is None:
        windows = is_windows()

    if not windows:
        if command.startswith("./"):
            return command[2:]
        return command

    if env is None:
        env = os.environ
    return ntpath.normpath(_convert_variables(command, env))


def parse_command(argv: Sequence[str]) -> ParsedCommand:
    """Split ``argv`` into environment assignments and the command to run.

    Assignments are only recognized as an unbroken prefix: the first token
    that is not ``NAME=value`` becomes the command and everything after it
    its arguments.

    Args:
        argv: Raw argument list, usually ``sys.argv[1:]``

    Returns:
        ParsedCommand; ``command`` is None when there is nothing to run

    Examples:
        >>> parse_command(["FOO_ENV=production", "echo", "hello world"])
        ParsedCommand(env={'FOO_ENV': 'production'}, command='echo', args=['hello world'])

        >>> parse_command([])
        ParsedCommand(env={}, command=None, args=[])
    """
    env: dict[str, str] = {}
    index = 0

    for index, token in enumerate(argv):
        match = ASSIGNMENT_RE.fullmatch(token)
        if match is None:
            break
        name, raw = match.groups()
        env[name] = decode_value(raw)
    else:
        # Every token was an assignment (or argv is empty)
        logger.debug("No command given; assignments: %s", sorted(env))
        return ParsedCommand(env=env)

    tokens = [collapse_escapes(token) for token in argv[index:]]
    windows = is_windows()
    merged = {**os.environ, **env} if windows else None
    command = normalize_command(tokens[0], merged, windows=windows)

    logger.debug(
        "Parsed %d assignment(s) %s, command %r", len(env), sorted(env), command
    )
    return ParsedCommand(env=env, command=command, args=tokens[1:])


__all__ = [
    "collapse_escapes",
    "decode_value",
    "is_assignment",
    "normalize_command",
    "parse_command",
]
