"""Core data models shared across the extraction and rendering stages."""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class SymbolObservation:
    """A single qualifying call site discovered by the extractor."""

    package_path: str
    package_short_name: str
    function_name: str
    return_type_name: str


@dataclass(frozen=True)
class FunctionSignature:
    """Name and return type of one client operation."""

    name: str
    return_type_name: str


@dataclass
class PackageBucket:
    """Deduplicated operations observed for a single package."""

    path: str
    short_name: str
    signatures: List[FunctionSignature] = field(default_factory=list)

    def has_function(self, name: str) -> bool:
        return any(signature.name == name for signature in self.signatures)


AggregateResult = List[PackageBucket]


@dataclass
class TemplateData:
    """Values handed to the mock template."""

    client_default: bool
    package_name: str
    packages: AggregateResult = field(default_factory=list)
