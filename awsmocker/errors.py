"""Error taxonomy for the mock generation pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .program.symbols import Diagnostic


class MockerError(RuntimeError):
    """Base class for failures that terminate a generation run."""


class LoadFailure(MockerError):
    """Raised when the requested packages cannot be located or loaded."""


class SourceDiagnostic(MockerError):
    """Raised when a loaded package carries its own source errors."""

    def __init__(self, message: str, diagnostics: Sequence["Diagnostic"]) -> None:
        super().__init__(message)
        self.diagnostics = list(diagnostics)


class StructuralMismatch(MockerError):
    """Raised when a matching symbol does not have the expected signature shape."""


class RenderFailure(MockerError):
    """Raised when the template cannot be loaded, parsed, or executed."""


class FormatFailure(MockerError):
    """Raised when the formatter rejects the rendered source."""

    def __init__(self, message: str, source: str = "") -> None:
        super().__init__(message)
        self.source = source


class SinkFailure(MockerError):
    """Raised when the generated document cannot be written."""


__all__ = [
    "FormatFailure",
    "LoadFailure",
    "MockerError",
    "RenderFailure",
    "SinkFailure",
    "SourceDiagnostic",
    "StructuralMismatch",
]
