"""Tests for awsmocker.sink."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from awsmocker.errors import SinkFailure
from awsmocker.sink import FileSink, StdoutSink, sink_for


def test_file_sink_creates_missing_directories(tmp_path: Path) -> None:
    target = tmp_path / "internal" / "mocks" / "awsmocked.go"

    FileSink(target).write("package awsmocked\n")

    assert target.read_text(encoding="utf-8") == "package awsmocked\n"


def test_file_sink_overwrites_existing_file(tmp_path: Path) -> None:
    target = tmp_path / "awsmocked.go"
    target.write_text("stale", encoding="utf-8")

    FileSink(target).write("fresh")

    assert target.read_text(encoding="utf-8") == "fresh"


def test_file_sink_wraps_os_errors(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(SinkFailure):
        FileSink(blocker / "awsmocked.go").write("package awsmocked\n")


def test_stdout_sink_writes_to_stream() -> None:
    stream = io.StringIO()

    StdoutSink(stream).write("package awsmocked\n")

    assert stream.getvalue() == "package awsmocked\n"


def test_stdout_sink_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    StdoutSink().write("package awsmocked\n")

    assert capsys.readouterr().out == "package awsmocked\n"


def test_sink_for_selects_destination(tmp_path: Path) -> None:
    file_sink = sink_for(tmp_path / "out", "mocks")

    assert isinstance(file_sink, FileSink)
    assert file_sink.path == tmp_path / "out" / "mocks.go"
    assert isinstance(sink_for(None, "mocks"), StdoutSink)
    assert isinstance(sink_for("", "mocks"), StdoutSink)
