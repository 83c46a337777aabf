"""crossenv: run commands with POSIX-style ``NAME=value`` prefixes on any platform."""

from .bridge import cross_env, run, translate_exit
from .models import ParsedCommand
from .parser import decode_value, is_assignment, parse_command
from .process_utils import SpawnedProcess, spawn

__all__ = [
    "__version__",
    "ParsedCommand",
    "SpawnedProcess",
    "cross_env",
    "decode_value",
    "is_assignment",
    "parse_command",
    "run",
    "spawn",
    "translate_exit",
]

__version__ = "0.1.0"
