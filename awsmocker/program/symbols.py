"""Resolved symbol model produced by the Go program loader."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple


class SymbolKind(str, Enum):
    """What a resolved identifier refers to."""

    FUNCTION = "function"
    VARIABLE = "variable"
    TYPE = "type"
    CONSTANT = "constant"
    OTHER = "other"


@dataclass(frozen=True)
class PackageRef:
    """Identity of a Go package: its import path and declared name."""

    path: str
    name: str


@dataclass(frozen=True)
class TypeRef:
    """A Go type as written in a declaration.

    Named types carry the import path of their package (``None`` for
    predeclared types). Unnamed types such as slices or maps keep their
    source text in ``name``.
    """

    name: str
    package_path: Optional[str] = None
    pointer: bool = False
    named: bool = True

    def __str__(self) -> str:
        star = "*" if self.pointer else ""
        if self.named and self.package_path:
            return f"{star}{self.package_path}.{self.name}"
        return f"{star}{self.name}"

    def pointer_to(self) -> "TypeRef":
        if self.pointer:
            return TypeRef(name=f"*{self}", named=False, pointer=True)
        return replace(self, pointer=True)

    def dereference(self) -> "TypeRef":
        return replace(self, pointer=False)


@dataclass(frozen=True)
class Signature:
    """Parameter and result types of a function or method."""

    params: Tuple[TypeRef, ...] = ()
    results: Tuple[TypeRef, ...] = ()
    variadic: bool = False


@dataclass(frozen=True)
class ResolvedSymbol:
    """The declaration an identifier resolves to.

    ``parent`` names the enclosing scope of the declaration. It is ``None``
    for methods, which belong to a type rather than a scope, and for members
    of the universe scope.
    """

    kind: SymbolKind
    name: str
    package: Optional[PackageRef] = None
    parent: Optional[str] = None
    signature: Optional[Signature] = None
    type: Optional[TypeRef] = None


@dataclass(frozen=True)
class Position:
    """A 1-based source location."""

    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Diagnostic:
    """An error found while loading a package."""

    message: str
    position: Optional[Position] = None

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.position}: {self.message}"


@dataclass
class LoadedPackage:
    """A requested package together with its symbol-usage table."""

    path: str
    name: str
    directory: Path
    files: List[Path] = field(default_factory=list)
    errors: List[Diagnostic] = field(default_factory=list)
    uses: Dict[Position, ResolvedSymbol] = field(default_factory=dict)


@dataclass
class Program:
    """Every package matched by the requested patterns."""

    root: Path
    module_path: Optional[str]
    packages: List[LoadedPackage] = field(default_factory=list)
    unresolved_imports: Set[str] = field(default_factory=set)


__all__ = [
    "Diagnostic",
    "LoadedPackage",
    "PackageRef",
    "Position",
    "Program",
    "ResolvedSymbol",
    "Signature",
    "SymbolKind",
    "TypeRef",
]
