"""Finds calls to client methods of filtered packages in a resolved program."""

from __future__ import annotations

import re
from typing import Iterator, List, Mapping, Pattern

from .errors import SourceDiagnostic, StructuralMismatch
from .logging import get_logger
from .models import SymbolObservation
from .program.symbols import Position, Program, ResolvedSymbol, SymbolKind

# Service clients of the AWS SDK for Go v2. Matched anywhere in the package path.
DEFAULT_FILTER = "github.com/aws/aws-sdk-go-v2/service/*"

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def return_type_name(type_string: str) -> str:
    """Return the type name from a package-qualified result type string.

    Result types of client methods are pointers to a type declared in the
    service package, e.g. ``*github.com/aws/aws-sdk-go-v2/service/sts.AssumeRoleOutput``.
    Splitting on ``.`` must give exactly three parts (the host, the rest of the
    path, and the type name); any other shape raises ``StructuralMismatch``
    instead of returning the wrong component.
    """
    parts = type_string.split(".")
    if len(parts) != 3:
        raise StructuralMismatch(
            f"unexpected result type {type_string!r}: expected <host>.<path>.<Type>"
        )
    name = parts[2]
    if not _IDENTIFIER.match(name):
        raise StructuralMismatch(f"unexpected result type {type_string!r}: {name!r} is not a type name")
    return name


class CallSiteExtractor:
    """Turns a symbol-usage table into observations for filtered packages."""

    def __init__(self, pattern: str | Pattern[str] = DEFAULT_FILTER) -> None:
        self._filter = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.logger = get_logger("extractor")

    @property
    def pattern(self) -> str:
        return self._filter.pattern

    def matches(self, package_path: str) -> bool:
        return self._filter.search(package_path) is not None

    def extract(self, uses: Mapping[Position, ResolvedSymbol]) -> Iterator[SymbolObservation]:
        """Yield one observation per qualifying use, in table order."""
        for position, symbol in uses.items():
            observation = self._observe(symbol)
            if observation is None:
                continue
            self.logger.debug(
                "func %s %s %s %s",
                observation.function_name,
                observation.package_short_name,
                observation.package_path,
                position,
            )
            yield observation

    def extract_program(self, program: Program) -> List[SymbolObservation]:
        """Extract from every package, refusing packages that failed to load."""
        check_diagnostics(program)
        observations: List[SymbolObservation] = []
        for package in program.packages:
            observations.extend(self.extract(package.uses))
        return observations

    def _observe(self, symbol: ResolvedSymbol) -> SymbolObservation | None:
        if symbol.kind is not SymbolKind.FUNCTION:
            return None
        # error.Error and other universe members have no package.
        if symbol.package is None:
            return None
        if not self.matches(symbol.package.path):
            return None
        # Package-level functions such as NewFromConfig have a scope; methods do not.
        if symbol.parent is not None:
            return None

        signature = symbol.signature
        if signature is None:
            raise StructuralMismatch(
                f"{symbol.package.path}.{symbol.name} matched the package filter but has no signature"
            )
        if not signature.results:
            raise StructuralMismatch(
                f"{symbol.package.path}.{symbol.name} matched the package filter but returns no values"
            )
        return SymbolObservation(
            package_path=symbol.package.path,
            package_short_name=symbol.package.name,
            function_name=symbol.name,
            return_type_name=return_type_name(str(signature.results[0])),
        )


def check_diagnostics(program: Program) -> None:
    """Raise ``SourceDiagnostic`` when any loaded package carries errors."""
    failing = [package for package in program.packages if package.errors]
    if not failing:
        return
    diagnostics = [error for package in failing for error in package.errors]
    summary = "; ".join(str(diagnostic) for diagnostic in diagnostics)
    names = ", ".join(package.path for package in failing)
    raise SourceDiagnostic(f"packages contain errors ({names}): {summary}", diagnostics)


__all__ = [
    "CallSiteExtractor",
    "DEFAULT_FILTER",
    "check_diagnostics",
    "return_type_name",
]
