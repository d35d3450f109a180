"""Pipeline orchestration: load, extract, aggregate, render, format, write."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from .aggregator import Aggregator, format_package_table
from .errors import FormatFailure, SourceDiagnostic
from .extractor import DEFAULT_FILTER, CallSiteExtractor, check_diagnostics
from .logging import get_logger
from .models import TemplateData
from .naming import NamingResolver
from .program import Diagnostic, PackageLoader, Program
from .render import DEFAULT_COMMAND, GoImportsFormatter, TemplateRenderer
from .sink import Sink, sink_for

DEFAULT_PACKAGE_NAME = "awsmocked"

ExtractorFactory = Callable[[str], CallSiteExtractor]
RendererFactory = Callable[[NamingResolver, Optional[Path]], TemplateRenderer]


@dataclass
class GenerateOptions:
    """Everything one generation run needs to know."""

    base_dir: Path
    search_packages: Sequence[str] | str
    package_name: str = DEFAULT_PACKAGE_NAME
    output_dir: Optional[Path] = None
    client_default: bool = False
    filter_pattern: str = DEFAULT_FILTER
    service_names: Dict[str, str] = field(default_factory=dict)
    formatter_command: Sequence[str] = DEFAULT_COMMAND
    templates_dir: Optional[Path] = None
    module_cache: Optional[Path] = None


def _default_renderer(naming: NamingResolver, templates_dir: Optional[Path]) -> TemplateRenderer:
    return TemplateRenderer(naming, templates_dir=templates_dir)


class MockGenerator:
    """Coordinates one mock generation run with injectable stages."""

    def __init__(
        self,
        loader: PackageLoader | None = None,
        extractor_factory: ExtractorFactory | None = None,
        aggregator: Aggregator | None = None,
        renderer_factory: RendererFactory | None = None,
        formatter: GoImportsFormatter | None = None,
    ) -> None:
        self._loader = loader
        self._extractor_factory = extractor_factory or CallSiteExtractor
        self.aggregator = aggregator or Aggregator()
        self._renderer_factory = renderer_factory or _default_renderer
        self._formatter = formatter
        self.logger = get_logger("generator")

    def generate(self, options: GenerateOptions) -> str:
        """Return the formatted mock source for the packages in ``options``."""
        loader = self._loader or PackageLoader(module_cache=options.module_cache)
        self.logger.debug("Loading %s from %s", options.search_packages, options.base_dir)
        program = loader.load(options.base_dir, options.search_packages)
        check_diagnostics(program)

        extractor = self._extractor_factory(options.filter_pattern)
        self._check_unresolved(program, extractor)
        observations = extractor.extract_program(program)
        packages = self.aggregator.aggregate(observations)
        self.logger.info(
            "Found %d operations across %d client packages",
            sum(len(bucket.signatures) for bucket in packages),
            len(packages),
        )
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug("Packages found:\n%s", format_package_table(packages))

        renderer = self._renderer_factory(NamingResolver(options.service_names), options.templates_dir)
        rendered = renderer.render(
            TemplateData(
                client_default=options.client_default,
                package_name=options.package_name,
                packages=packages,
            )
        )

        formatter = self._formatter or GoImportsFormatter(options.formatter_command)
        try:
            return formatter.format(rendered)
        except FormatFailure as exc:
            self.logger.debug("Unformatted output:\n%s", exc.source or rendered)
            raise

    def run(self, options: GenerateOptions, sink: Sink | None = None) -> str:
        """Generate the document and hand it to ``sink`` (default from the options)."""
        document = self.generate(options)
        target = sink or sink_for(options.output_dir, options.package_name)
        target.write(document)
        return document

    def _check_unresolved(self, program: Program, extractor: CallSiteExtractor) -> None:
        """Fail on client packages whose source is missing; other imports are only logged."""
        missing: List[str] = []
        for import_path in sorted(program.unresolved_imports):
            if extractor.matches(import_path):
                missing.append(import_path)
            else:
                self.logger.debug("No source for %s; its symbols stay unresolved", import_path)
        if missing:
            raise SourceDiagnostic(
                f"could not import {', '.join(missing)}; run 'go mod download' in {program.root}",
                [Diagnostic(message=f"could not import {import_path}") for import_path in missing],
            )


__all__ = ["DEFAULT_PACKAGE_NAME", "GenerateOptions", "MockGenerator"]
