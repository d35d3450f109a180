"""Go module metadata and import path resolution."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..logging import get_logger

_MODULE_LINE = re.compile(r"^module\s+(\S+)")
_REQUIRE_ENTRY = re.compile(r"^(\S+)\s+(v\S+)")
_REPLACE_ENTRY = re.compile(r"^(\S+)(?:\s+v\S+)?\s+=>\s+(\S+)(?:\s+(v\S+))?")
_MAJOR_SUFFIX = re.compile(r"^v\d+$")
_DOT_MAJOR_SUFFIX = re.compile(r"\.v\d+$")
_VERSION_NUMBERS = re.compile(r"\d+")

logger = get_logger("program.modules")


@dataclass(frozen=True)
class Replacement:
    """A ``replace`` directive from go.mod."""

    old: str
    new: str
    version: Optional[str] = None

    @property
    def is_local(self) -> bool:
        return self.new.startswith(("./", "../", "/"))


@dataclass
class GoModule:
    """The parts of go.mod needed to locate dependency sources."""

    path: str
    root: Path
    requires: Dict[str, str] = field(default_factory=dict)
    replaces: List[Replacement] = field(default_factory=list)


def find_go_mod(start: Path) -> Optional[Path]:
    """Walk up from ``start`` to the nearest go.mod."""
    current = start.resolve()
    for candidate in (current, *current.parents):
        go_mod = candidate / "go.mod"
        if go_mod.is_file():
            return go_mod
    return None


def parse_go_mod(path: Path) -> GoModule:
    """Parse module, require, and replace directives from a go.mod file."""
    module_path = ""
    requires: Dict[str, str] = {}
    replaces: List[Replacement] = []
    block: Optional[str] = None

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.split("//", 1)[0].strip()
        if not line:
            continue
        if block is not None:
            if line == ")":
                block = None
                continue
            _parse_directive(block, line, requires, replaces)
            continue

        match = _MODULE_LINE.match(line)
        if match:
            module_path = match.group(1).strip('"')
            continue
        keyword, _, rest = line.partition(" ")
        rest = rest.strip()
        if keyword in {"require", "replace"}:
            if rest == "(":
                block = keyword
            else:
                _parse_directive(keyword, rest, requires, replaces)

    return GoModule(path=module_path, root=path.parent.resolve(), requires=requires, replaces=replaces)


def _parse_directive(
    keyword: str, line: str, requires: Dict[str, str], replaces: List[Replacement]
) -> None:
    if keyword == "require":
        match = _REQUIRE_ENTRY.match(line)
        if match:
            requires[match.group(1)] = match.group(2)
    elif keyword == "replace":
        match = _REPLACE_ENTRY.match(line)
        if match:
            replaces.append(Replacement(old=match.group(1), new=match.group(2), version=match.group(3)))


def escape_module_path(path: str) -> str:
    """Escape upper-case letters the way the module cache stores them."""
    return "".join(f"!{char.lower()}" if char.isupper() else char for char in path)


def default_package_name(import_path: str) -> str:
    """Best guess at a package's declared name from its import path."""
    parts = [part for part in import_path.split("/") if part]
    if not parts:
        return import_path
    last = parts[-1]
    if _MAJOR_SUFFIX.match(last) and len(parts) > 1:
        last = parts[-2]
    last = _DOT_MAJOR_SUFFIX.sub("", last)
    return last.replace("-", "_").replace(".", "_")


def default_module_cache() -> Path:
    """Locate GOMODCACHE the way the go command does, without invoking it."""
    configured = os.environ.get("GOMODCACHE")
    if configured:
        return Path(configured)
    gopath = os.environ.get("GOPATH")
    if gopath:
        first = gopath.split(os.pathsep)[0]
        if first:
            return Path(first) / "pkg" / "mod"
    return Path.home() / "go" / "pkg" / "mod"


def _version_key(version: str) -> tuple[int, ...]:
    return tuple(int(number) for number in _VERSION_NUMBERS.findall(version))


class ImportResolver:
    """Maps import paths to source directories.

    Resolution order: the main module, local replace directives, vendor/,
    the module cache at the required version, the module cache at any
    cached version, and finally GOROOT/src.
    """

    def __init__(
        self,
        module: Optional[GoModule],
        *,
        module_cache: Path | None = None,
        goroot: Path | None = None,
    ) -> None:
        self.module = module
        self.module_cache = module_cache if module_cache is not None else default_module_cache()
        goroot_env = os.environ.get("GOROOT")
        self.goroot = goroot if goroot is not None else (Path(goroot_env) if goroot_env else None)
        self._cache: Dict[str, Optional[Path]] = {}
        self._versions: Dict[str, tuple[Path, ...]] = {}

    def import_path_for(self, directory: Path) -> Optional[str]:
        """Import path of a directory inside the main module."""
        if self.module is None or not self.module.path:
            return None
        try:
            relative = directory.resolve().relative_to(self.module.root)
        except ValueError:
            return None
        rel = relative.as_posix()
        if rel in {"", "."}:
            return self.module.path
        return f"{self.module.path}/{rel}"

    def resolve(self, import_path: str) -> Optional[Path]:
        if import_path in self._cache:
            return self._cache[import_path]
        directory = self._resolve(import_path)
        if directory is None:
            logger.debug("Unable to locate source for import %s", import_path)
        self._cache[import_path] = directory
        return directory

    def _resolve(self, import_path: str) -> Optional[Path]:
        module = self.module
        if module is not None and module.path:
            if import_path == module.path or import_path.startswith(module.path + "/"):
                rest = import_path[len(module.path) :].lstrip("/")
                return _existing_dir(module.root / rest)

            for replacement in module.replaces:
                if not replacement.is_local or not _has_prefix(import_path, replacement.old):
                    continue
                rest = import_path[len(replacement.old) :].lstrip("/")
                return _existing_dir((module.root / replacement.new / rest).resolve())

            vendored = _existing_dir(module.root / "vendor" / import_path)
            if vendored is not None:
                return vendored

            required = _longest_prefix(import_path, module.requires)
            if required is not None:
                version = module.requires[required]
                rest = import_path[len(required) :].lstrip("/")
                cached = _existing_dir(
                    self.module_cache / f"{escape_module_path(required)}@{version}" / rest
                )
                if cached is not None:
                    return cached

        cached = self._resolve_any_cached(import_path)
        if cached is not None:
            return cached

        if self.goroot is not None and "." not in import_path.split("/", 1)[0]:
            return _existing_dir(self.goroot / "src" / import_path)
        return None

    def _resolve_any_cached(self, import_path: str) -> Optional[Path]:
        parts = import_path.split("/")
        for end in range(len(parts), 0, -1):
            module_path = "/".join(parts[:end])
            versions = self._cached_versions(module_path)
            if not versions:
                continue
            rest = "/".join(parts[end:])
            for version_dir in versions:
                candidate = _existing_dir(version_dir / rest)
                if candidate is not None:
                    return candidate
        return None

    def _cached_versions(self, module_path: str) -> tuple[Path, ...]:
        """Cached copies of ``module_path``, newest version first."""
        if module_path in self._versions:
            return self._versions[module_path]
        escaped = escape_module_path(module_path)
        parent = self.module_cache / Path(escaped).parent
        prefix = Path(escaped).name + "@"
        matches: List[Path] = []
        if parent.is_dir():
            matches = [
                entry for entry in parent.iterdir() if entry.name.startswith(prefix) and entry.is_dir()
            ]
            matches.sort(key=lambda entry: _version_key(entry.name[len(prefix) :]), reverse=True)
        self._versions[module_path] = tuple(matches)
        return self._versions[module_path]


def _has_prefix(import_path: str, prefix: str) -> bool:
    return import_path == prefix or import_path.startswith(prefix + "/")


def _longest_prefix(import_path: str, candidates: Dict[str, str]) -> Optional[str]:
    best: Optional[str] = None
    for candidate in candidates:
        if _has_prefix(import_path, candidate) and (best is None or len(candidate) > len(best)):
            best = candidate
    return best


def _existing_dir(path: Path) -> Optional[Path]:
    return path if path.is_dir() else None


__all__ = [
    "GoModule",
    "ImportResolver",
    "Replacement",
    "default_module_cache",
    "default_package_name",
    "escape_module_path",
    "find_go_mod",
    "parse_go_mod",
]
