"""Go program model: package loading, import resolution, and symbol usage."""

from __future__ import annotations

from .loader import PackageLoader, split_patterns
from .symbols import (
    Diagnostic,
    LoadedPackage,
    PackageRef,
    Position,
    Program,
    ResolvedSymbol,
    Signature,
    SymbolKind,
    TypeRef,
)

__all__ = [
    "Diagnostic",
    "LoadedPackage",
    "PackageLoader",
    "PackageRef",
    "Position",
    "Program",
    "ResolvedSymbol",
    "Signature",
    "SymbolKind",
    "TypeRef",
    "split_patterns",
]
