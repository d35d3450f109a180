"""Tests for awsmocker.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from awsmocker.config import ConfigError, MockerConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, MockerConfig)
    assert config.root == tmp_path.resolve()
    assert config.packages == []
    assert config.package_name is None
    assert config.output_dir is None
    assert config.default_panic is None
    assert config.service_names == {}
    assert config.formatter == []
    assert config.templates_dir is None
    assert config.log_file is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".awsmocker.yml").write_text(
        """
packages:
  - ./internal/...
  - ./cmd/api
package_name: mocks
output_dir: internal/mocks
default_panic: true
log_level: debug
log_file: logs/awsmocker.log
filter: "example\\\\.com/clients/"
service_names:
  billing: BillingAPI
formatter: gofmt -s
templates_dir: templates
module_cache: /opt/gomod
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    root = tmp_path.resolve()
    assert config.packages == ["./internal/...", "./cmd/api"]
    assert config.package_name == "mocks"
    assert config.output_dir == root / "internal/mocks"
    assert config.default_panic is True
    assert config.log_level == "debug"
    assert config.log_file == root / "logs/awsmocker.log"
    assert config.filter == "example\\.com/clients/"
    assert config.service_names == {"billing": "BillingAPI"}
    assert config.formatter == ["gofmt", "-s"]
    assert config.templates_dir == root / "templates"
    assert config.module_cache == Path("/opt/gomod")


def test_packages_may_be_a_comma_separated_string(tmp_path: Path) -> None:
    (tmp_path / ".awsmocker.yml").write_text("packages: ./a, ./b/...\n", encoding="utf-8")

    assert load_config(tmp_path).packages == ["./a", "./b/..."]


def test_wrongly_typed_values_are_ignored(tmp_path: Path) -> None:
    (tmp_path / ".awsmocker.yml").write_text(
        "package_name: [a, b]\ndefault_panic: maybe\nservice_names: [sts]\n",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.package_name is None
    assert config.default_panic is None
    assert config.service_names == {}


def test_explicit_config_file_with_any_name(tmp_path: Path) -> None:
    config_file = tmp_path / "mocker.yaml"
    config_file.write_text("package_name: custom\n", encoding="utf-8")

    assert load_config(config_file, required=True).package_name == "custom"


def test_required_config_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yml", required=True)


def test_non_mapping_root_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".awsmocker.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_yaml_is_rejected(tmp_path: Path) -> None:
    (tmp_path / ".awsmocker.yml").write_text("packages: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    (tmp_path / ".awsmocker.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).packages == []
