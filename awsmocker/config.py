"""Configuration loading for awsmocker (.awsmocker.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".awsmocker.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class MockerConfig:
    """Settings read from .awsmocker.yml. ``None`` means "not configured"."""

    root: Path
    packages: List[str] = field(default_factory=list)
    package_name: Optional[str] = None
    output_dir: Optional[Path] = None
    default_panic: Optional[bool] = None
    log_level: Optional[str] = None
    log_file: Optional[Path] = None
    filter: Optional[str] = None
    service_names: Dict[str, str] = field(default_factory=dict)
    formatter: List[str] = field(default_factory=list)
    templates_dir: Optional[Path] = None
    module_cache: Optional[Path] = None


def load_config(config_path: Path, *, required: bool = False) -> MockerConfig:
    """Load configuration from a file or from ``.awsmocker.yml`` inside a directory.

    A missing file yields an empty configuration unless ``required`` is set.
    """
    config_file = _resolve_config_path(config_path)
    root = config_file.parent

    if not config_file.is_file():
        if required:
            raise ConfigError(f"Config file not found: {config_file}")
        return MockerConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    output_dir = _as_str(data.get("output_dir"))
    templates_dir = _as_str(data.get("templates_dir"))
    module_cache = _as_str(data.get("module_cache"))
    log_file = _as_str(data.get("log_file"))

    return MockerConfig(
        root=root,
        packages=_as_str_list(data.get("packages")),
        package_name=_as_str(data.get("package_name")),
        output_dir=root / Path(output_dir).expanduser() if output_dir else None,
        default_panic=_as_bool(data.get("default_panic")),
        log_level=_as_str(data.get("log_level")),
        log_file=root / Path(log_file).expanduser() if log_file else None,
        filter=_as_str(data.get("filter")),
        service_names=_as_str_dict(data.get("service_names")),
        formatter=_as_command(data.get("formatter")),
        templates_dir=root / Path(templates_dir).expanduser() if templates_dir else None,
        module_cache=Path(module_cache).expanduser() if module_cache else None,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, str) and item.strip()]
    return []


def _as_command(value: Any) -> List[str]:
    if isinstance(value, str):
        return value.split()
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, str)]
    return []


def _as_str_dict(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(key): str(item) for key, item in value.items() if isinstance(item, str)}


__all__ = ["CONFIG_FILENAME", "ConfigError", "MockerConfig", "load_config"]
