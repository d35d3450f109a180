"""Tests for the aws-mocker command line."""

from __future__ import annotations

from pathlib import Path

import pytest

from awsmocker.cli import _build_parser, main
from tests._fixtures.module_builder import EXAMPLE_APP, ModuleBuilder


def _module(module_builder: ModuleBuilder, extra_config: str = "") -> Path:
    module_builder.with_aws_sdk()
    module_builder.write(
        {
            "example/example.go": EXAMPLE_APP,
            # cat echoes stdin, standing in for goimports.
            ".awsmocker.yml": f"formatter: cat\nmodule_cache: {module_builder.cache}\n{extra_config}",
        }
    )
    module_builder.go_mod()
    return module_builder.path()


def test_parser_accepts_single_and_double_dash_flags() -> None:
    parser = _build_parser()

    single = parser.parse_args(["-dir", "src", "-packages", "./...", "-package-name", "mocks", "-default-panic"])
    double = parser.parse_args(["--dir", "src", "--packages", "./...", "--output-dir", "out", "--default-panic=false"])

    assert (single.dir, single.packages, single.package_name, single.default_panic) == ("src", "./...", "mocks", True)
    assert (double.dir, double.output_dir, double.default_panic) == ("src", "out", False)


def test_main_writes_mock_file(module_builder: ModuleBuilder, tmp_path: Path) -> None:
    root = _module(module_builder)
    out_dir = tmp_path / "generated" / "mocks"

    main(["-dir", str(root), "-packages", "./...", "-output-dir", str(out_dir), "-package-name", "mocks"])

    content = (out_dir / "mocks.go").read_text(encoding="utf-8")
    assert "package mocks" in content
    assert "type DynamoDBMock struct" in content
    assert "default:" not in content


def test_main_writes_to_stdout_without_output_dir(
    module_builder: ModuleBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _module(module_builder)

    main(["--dir", str(root), "--packages", "./example", "--default-panic"])

    out = capsys.readouterr().out
    assert "package awsmocked" in out
    assert "default:" in out


def test_config_file_supplies_defaults(
    module_builder: ModuleBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _module(
        module_builder,
        "packages:\n  - ./example\npackage_name: fromconfig\nservice_names:\n  sts: SecurityToken\n",
    )

    main(["-dir", str(root)])

    out = capsys.readouterr().out
    assert "package fromconfig" in out
    assert "type SecurityTokenMock struct" in out


def test_flags_override_config(module_builder: ModuleBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    root = _module(module_builder, "package_name: fromconfig\ndefault_panic: true\n")

    main(["-dir", str(root), "-packages", "./...", "-package-name", "fromflag", "-default-panic=false"])

    out = capsys.readouterr().out
    assert "package fromflag" in out
    assert "default:" not in out


def test_filter_flag_limits_packages(module_builder: ModuleBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    root = _module(module_builder)

    main(["-dir", str(root), "-packages", "./...", "--filter", "service/dynamodb"])

    out = capsys.readouterr().out
    assert "DynamoDBMock" in out
    assert "STSMock" not in out


def test_missing_required_flags_exit_with_usage(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["-packages", "./..."])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "'packages' and 'dir' are required flags" in err
    assert "usage: aws-mocker" in err


def test_load_failure_exits_non_zero(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["-dir", str(tmp_path / "absent"), "-packages", "./..."])

    assert excinfo.value.code == 1
    assert "directory not found" in capsys.readouterr().err


def test_source_errors_exit_non_zero(module_builder: ModuleBuilder, tmp_path: Path) -> None:
    root = _module(module_builder)
    module_builder.write({"example/broken.go": "package example\n\nfunc oops( {\n"})
    out_dir = tmp_path / "out"

    with pytest.raises(SystemExit) as excinfo:
        main(["-dir", str(root), "-packages", "./...", "-output-dir", str(out_dir)])

    assert excinfo.value.code == 1
    assert not out_dir.exists()


def test_invalid_config_exits_non_zero(module_builder: ModuleBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    module_builder.write({".awsmocker.yml": "- not\n- a mapping\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["-dir", str(module_builder.path()), "-packages", "./..."])

    assert excinfo.value.code == 1
    assert "mapping" in capsys.readouterr().err


def test_unknown_log_level_warns_and_continues(
    module_builder: ModuleBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _module(module_builder)

    main(["-dir", str(root), "-packages", "./example", "-log-level", "chatty"])

    captured = capsys.readouterr()
    assert "Unable to parse log level 'chatty'" in captured.err
    assert "package awsmocked" in captured.out


def test_log_file_from_config_receives_records(
    module_builder: ModuleBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _module(module_builder, "log_file: logs/awsmocker.log\n")

    main(["-dir", str(root), "-packages", "./example"])

    assert "package awsmocked" in capsys.readouterr().out
    assert "Found 4 operations across 2 client packages" in (root / "logs" / "awsmocker.log").read_text(
        encoding="utf-8"
    )


def test_log_file_flag_overrides_config(module_builder: ModuleBuilder, tmp_path: Path) -> None:
    root = _module(module_builder, "log_file: logs/awsmocker.log\n")
    log_file = tmp_path / "flag.log"

    main(
        [
            "-dir", str(root),
            "-packages", "./example",
            "-output-dir", str(tmp_path / "out"),
            "--log-file", str(log_file),
        ]
    )

    assert "Mocks written to" in log_file.read_text(encoding="utf-8")
    assert not (root / "logs").exists()


def test_missing_client_source_exits_non_zero(
    module_builder: ModuleBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _module(module_builder)
    module_builder.write(
        {
            "streams/streams.go": """
                package streams

                import "github.com/aws/aws-sdk-go-v2/service/kinesis"

                func use(c *kinesis.Client) {
                	c.PutRecord(nil, nil)
                }
                """,
        }
    )
    out_dir = tmp_path / "out"

    with pytest.raises(SystemExit) as excinfo:
        main(["-dir", str(root), "-packages", "./...", "-output-dir", str(out_dir)])

    assert excinfo.value.code == 1
    assert "could not import github.com/aws/aws-sdk-go-v2/service/kinesis" in capsys.readouterr().err
    assert not out_dir.exists()
