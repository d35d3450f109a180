"""Go source formatting through goimports."""

from __future__ import annotations

import subprocess
from typing import Callable, Sequence

from ..errors import FormatFailure

DEFAULT_COMMAND = ("goimports",)

Runner = Callable[..., str]


class GoImportsFormatter:
    """Pipes generated source through an external formatter command.

    The command reads the source on stdin and writes the formatted file to
    stdout, as ``goimports`` and ``gofmt`` do when given no file arguments.
    """

    def __init__(self, command: Sequence[str] = DEFAULT_COMMAND, runner: Runner | None = None) -> None:
        if not command:
            raise ValueError("formatter command must not be empty")
        self.command = tuple(command)
        self._runner = runner or self._default_runner

    def format(self, source: str) -> str:
        try:
            return self._runner(self.command, source=source)
        except FileNotFoundError as exc:
            raise FormatFailure(f"formatter {self.command[0]!r} not found on PATH", source=source) from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
            raise FormatFailure(f"{self.command[0]} rejected the generated source: {detail}", source=source) from exc

    @staticmethod
    def _default_runner(args: Sequence[str], *, source: str) -> str:
        completed = subprocess.run(
            list(args),
            input=source,
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


__all__ = ["DEFAULT_COMMAND", "GoImportsFormatter"]
