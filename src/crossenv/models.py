"""Result models shared by the parser and the process bridge."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class ParsedCommand(BaseModel):
    """Argument list split into environment assignments and a command.

    Examples:
        ["FOO=1", "echo", "hi"] → ParsedCommand(env={"FOO": "1"}, command="echo", args=["hi"])
        [] → ParsedCommand(env={}, command=None, args=[])
    """

    env: dict[str, str] = Field(default_factory=dict)
    """Decoded assignments, in scan order. Later names overwrite earlier ones."""

    command: Optional[str] = None
    """Executable (or shell script) to run. None means there is nothing to run."""

    args: list[str] = Field(default_factory=list)
    """Arguments passed to the command."""

    @property
    def has_command(self) -> bool:
        """True when there is a command to spawn."""
        return self.command is not None


__all__ = ["ParsedCommand"]
