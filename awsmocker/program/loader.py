"""Loads Go packages matching command-line patterns into a resolved program."""

from __future__ import annotations

import os
from collections import Counter
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..errors import LoadFailure
from ..logging import get_logger
from .modules import GoModule, ImportResolver, default_package_name, find_go_mod, parse_go_mod
from .parser import GoParser, PackageDecls, SourceFile, UsageCollector
from .symbols import Diagnostic, LoadedPackage, Program

_EXCLUDED_DIRS = {"vendor", "testdata", "node_modules"}
_UNSUPPORTED_PATTERNS = {"all", "std", "cmd"}

logger = get_logger("program.loader")

PackageDir = Tuple[Path, str]


def split_patterns(patterns: str | Sequence[str]) -> List[str]:
    """Split a comma separated pattern list, dropping empty entries."""
    if isinstance(patterns, str):
        patterns = [patterns]
    result: List[str] = []
    for pattern in patterns:
        result.extend(part.strip() for part in pattern.split(",") if part.strip())
    return result


def _is_go_source(name: str) -> bool:
    return name.endswith(".go") and not name.endswith("_test.go") and not name.startswith(("_", "."))


def _go_files(directory: Path) -> List[Path]:
    try:
        entries = sorted(directory.iterdir())
    except OSError:
        return []
    return [entry for entry in entries if entry.is_file() and _is_go_source(entry.name)]


def _iter_package_dirs(base: Path) -> Iterator[Path]:
    """Yield ``base`` and its subdirectories that hold Go sources, in path order."""
    for dirpath, dirnames, filenames in os.walk(base):
        current = Path(dirpath)
        dirnames[:] = sorted(
            name
            for name in dirnames
            if name not in _EXCLUDED_DIRS
            and not name.startswith((".", "_"))
            # Nested modules are separate units.
            and not (current / name / "go.mod").is_file()
        )
        if any(_is_go_source(name) for name in filenames):
            yield current


class _LoadSession:
    """State shared while loading one set of patterns."""

    def __init__(self, root: Path, resolver: ImportResolver, parser: GoParser) -> None:
        self.root = root
        self.resolver = resolver
        self.parser = parser
        self.decls: Dict[str, Optional[PackageDecls]] = {}
        self.unresolved: set[str] = set()

    def import_path_for(self, directory: Path) -> str:
        import_path = self.resolver.import_path_for(directory)
        if import_path is not None:
            return import_path
        try:
            relative = directory.relative_to(self.root).as_posix()
        except ValueError:
            return directory.as_posix()
        return self.root.name if relative in {"", "."} else f"{self.root.name}/{relative}"

    def lookup(self, import_path: str) -> Optional[PackageDecls]:
        """Declarations of an imported package, parsed on first use."""
        if import_path in self.decls:
            return self.decls[import_path]
        self.decls[import_path] = None
        directory = self.resolver.resolve(import_path)
        if directory is None:
            self.unresolved.add(import_path)
            return None

        files: List[SourceFile] = []
        for path in _go_files(directory):
            try:
                source_file = self.parser.parse_file(path)
            except OSError as exc:
                logger.debug("Skipping unreadable file %s: %s", path, exc)
                continue
            if not self.parser.is_ignored(source_file):
                files.append(source_file)
        if not files:
            self.unresolved.add(import_path)
            return None

        name = _majority_name(files) or default_package_name(import_path)
        members = [source_file for source_file in files if source_file.package_name == name]
        decls = self.parser.collect_declarations(members, import_path, name)
        self.decls[import_path] = decls
        logger.debug("Indexed %s (%d files) from %s", import_path, len(members), directory)
        return decls

    def load_package(self, directory: Path, import_path: str) -> LoadedPackage:
        package = LoadedPackage(path=import_path, name=default_package_name(import_path), directory=directory)
        files: List[SourceFile] = []
        for path in _go_files(directory):
            try:
                source_file = self.parser.parse_file(path)
            except OSError as exc:
                package.errors.append(Diagnostic(message=f"unable to read {path}: {exc}"))
                continue
            if self.parser.is_ignored(source_file):
                continue
            package.files.append(path)
            package.errors.extend(self.parser.syntax_errors(source_file))
            files.append(source_file)

        if not files:
            package.errors.append(Diagnostic(message=f"no Go files in {directory}"))
            return package

        names = sorted({source_file.package_name or "" for source_file in files})
        if len(names) > 1:
            detail = ", ".join(
                f"{source_file.package_name} ({source_file.path.name})" for source_file in files
            )
            package.errors.append(Diagnostic(message=f"found packages {detail} in {directory}"))
        package.name = _majority_name(files) or package.name

        decls = self.parser.collect_declarations(files, import_path, package.name)
        self.decls[import_path] = decls
        collectors = [UsageCollector(source_file, decls, self.lookup) for source_file in files]
        for collector in collectors:
            collector.bind_package_vars()
        for collector in collectors:
            package.uses.update(collector.collect())
            package.errors.extend(collector.errors)
        logger.debug("Loaded %s: %d files, %d resolved uses", import_path, len(files), len(package.uses))
        return package


def _majority_name(files: Sequence[SourceFile]) -> Optional[str]:
    counts = Counter(source_file.package_name for source_file in files if source_file.package_name)
    if not counts:
        return None
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))[0][0]


class PackageLoader:
    """Parses the packages named by patterns and resolves the identifiers they use.

    Patterns follow the go command: ``.``, ``./dir``, ``./dir/...`` and
    ``./...`` are taken relative to the base directory; anything else is an
    import path located through go.mod, vendor/ or the module cache.
    """

    def __init__(
        self,
        *,
        module_cache: Path | None = None,
        goroot: Path | None = None,
        parser: GoParser | None = None,
    ) -> None:
        self.module_cache = module_cache
        self.goroot = goroot
        self.parser = parser or GoParser()

    def load(self, base_dir: str | Path, patterns: str | Sequence[str]) -> Program:
        root = Path(base_dir).expanduser()
        if not root.is_dir():
            raise LoadFailure(f"directory not found: {base_dir}")
        root = root.resolve()

        entries = split_patterns(patterns)
        if not entries:
            raise LoadFailure("no package patterns given")

        module = self._load_module(root)
        resolver = ImportResolver(module, module_cache=self.module_cache, goroot=self.goroot)
        session = _LoadSession(root, resolver, self.parser)

        directories: Dict[Path, str] = {}
        for pattern in entries:
            matched = self._expand(pattern, root, module, session)
            if not matched:
                logger.warning("Pattern %s matched no packages", pattern)
            for directory, import_path in matched:
                directories.setdefault(directory, import_path)

        program = Program(root=root, module_path=module.path if module else None)
        for directory, import_path in directories.items():
            program.packages.append(session.load_package(directory, import_path))
        program.unresolved_imports = set(session.unresolved)
        return program

    @staticmethod
    def _load_module(root: Path) -> Optional[GoModule]:
        go_mod = find_go_mod(root)
        if go_mod is None:
            logger.warning("No go.mod found at or above %s; only standard library imports resolve", root)
            return None
        try:
            return parse_go_mod(go_mod)
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadFailure(f"unable to read {go_mod}: {exc}") from exc

    def _expand(
        self, pattern: str, root: Path, module: Optional[GoModule], session: _LoadSession
    ) -> List[PackageDir]:
        if pattern in _UNSUPPORTED_PATTERNS:
            raise LoadFailure(f"unsupported package pattern: {pattern}")

        recursive = pattern == "..." or pattern.endswith("/...")
        base = pattern[: -len("...")].rstrip("/") if recursive else pattern
        if "..." in base:
            raise LoadFailure(f"unsupported package pattern: {pattern}")

        if _is_filesystem_pattern(pattern):
            directory = (root / (base or ".")).resolve()
            if not directory.is_dir():
                raise LoadFailure(f"directory not found for pattern {pattern}: {directory}")
            if recursive:
                return [(found, session.import_path_for(found)) for found in _iter_package_dirs(directory)]
            return [(directory, session.import_path_for(directory))]

        directory = session.resolver.resolve(base)
        if directory is None:
            raise LoadFailure(f"cannot find package {base}")
        if not recursive:
            return [(directory, base)]
        matched: List[PackageDir] = []
        for found in _iter_package_dirs(directory):
            relative = found.relative_to(directory).as_posix()
            matched.append((found, base if relative == "." else f"{base}/{relative}"))
        return matched


def _is_filesystem_pattern(pattern: str) -> bool:
    return (
        pattern in {".", "..", "..."}
        or pattern.startswith(("./", "../", "/"))
    )


__all__ = ["PackageLoader", "split_patterns"]
