"""Destinations for the generated mock document."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Protocol, TextIO

from .errors import SinkFailure


class Sink(Protocol):
    def write(self, document: str) -> None:  # pragma: no cover - protocol
        ...


class FileSink:
    """Writes the document to a file, creating parent directories first."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def write(self, document: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(document, encoding="utf-8")
        except OSError as exc:
            raise SinkFailure(f"unable to write {self.path}: {exc}") from exc

    def __repr__(self) -> str:
        return f"FileSink({str(self.path)!r})"


class StdoutSink:
    """Writes the document to a text stream, standard output by default."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def write(self, document: str) -> None:
        stream = self._stream or sys.stdout
        try:
            stream.write(document)
            stream.flush()
        except OSError as exc:
            raise SinkFailure(f"unable to write to standard output: {exc}") from exc


def sink_for(output_dir: Path | str | None, package_name: str) -> FileSink | StdoutSink:
    """File sink for ``<output_dir>/<package_name>.go``, or stdout when no directory is set."""
    if not output_dir:
        return StdoutSink()
    return FileSink(Path(output_dir) / f"{package_name}.go")


__all__ = ["FileSink", "Sink", "StdoutSink", "sink_for"]
