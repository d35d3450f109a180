"""CLI entrypoint for aws-mocker."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, MockerConfig, load_config
from .errors import MockerError
from .generator import DEFAULT_PACKAGE_NAME, GenerateOptions, MockGenerator
from .logging import configure_logging, get_logger
from .render import DEFAULT_COMMAND

_TRUE = {"1", "t", "true", "yes"}
_FALSE = {"0", "f", "false", "no"}


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aws-mocker",
        description="Generate AWS SDK for Go v2 client mocks for the operations a module calls.",
        allow_abbrev=False,
    )
    parser.add_argument("-dir", "--dir", dest="dir", help="Base directory for the module (required).")
    parser.add_argument(
        "-packages",
        "--packages",
        dest="packages",
        help="Comma separated list of packages to search (required), e.g. ./... or ./internal/aws.",
    )
    parser.add_argument(
        "-package-name",
        "--package-name",
        dest="package_name",
        help=f"Name of the generated package (default: {DEFAULT_PACKAGE_NAME}).",
    )
    parser.add_argument(
        "-output-dir",
        "--output-dir",
        dest="output_dir",
        help="Output directory for the generated file; writes to stdout when omitted.",
    )
    parser.add_argument(
        "-default-panic",
        "--default-panic",
        dest="default_panic",
        nargs="?",
        const=True,
        default=None,
        type=_parse_bool,
        metavar="BOOL",
        help="Panic for operations that are not mocked.",
    )
    parser.add_argument(
        "-log-level",
        "--log-level",
        dest="log_level",
        help="Set the log level [debug, info, warn, error] (default: info).",
    )
    parser.add_argument(
        "--log-file",
        dest="log_file",
        type=Path,
        help="Also write log records to this file.",
    )
    parser.add_argument(
        "--filter",
        dest="filter",
        help="Regular expression selecting the client packages to mock.",
    )
    parser.add_argument(
        "--config",
        dest="config",
        type=Path,
        help="Path to a config file (defaults to .awsmocker.yml in -dir).",
    )
    return parser


def _build_options(args: argparse.Namespace, config: MockerConfig, packages: str) -> GenerateOptions:
    output_dir = Path(args.output_dir) if args.output_dir else config.output_dir
    client_default = args.default_panic if args.default_panic is not None else config.default_panic
    options = GenerateOptions(
        base_dir=Path(args.dir),
        search_packages=packages,
        package_name=args.package_name or config.package_name or DEFAULT_PACKAGE_NAME,
        output_dir=output_dir,
        client_default=bool(client_default),
        service_names=dict(config.service_names),
        formatter_command=tuple(config.formatter) or DEFAULT_COMMAND,
        templates_dir=config.templates_dir,
        module_cache=config.module_cache,
    )
    pattern = args.filter or config.filter
    if pattern:
        options.filter_pattern = pattern
    return options


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for aws-mocker."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level or "info", log_file=args.log_file)
    logger = get_logger("cli")

    config = MockerConfig(root=Path.cwd())
    if args.config is not None or args.dir:
        try:
            config = load_config(args.config or Path(args.dir), required=args.config is not None)
        except ConfigError as exc:
            logger.error("%s", exc)
            parser.exit(1)
    configured_file = args.log_file is None and config.log_file is not None
    if configured_file or (args.log_level is None and config.log_level):
        configure_logging(
            level=args.log_level or config.log_level or "info",
            log_file=args.log_file or config.log_file,
        )

    packages = args.packages or ",".join(config.packages)
    if not packages or not args.dir:
        print("'packages' and 'dir' are required flags", file=sys.stderr)
        parser.print_usage(sys.stderr)
        parser.exit(1)

    options = _build_options(args, config, packages)
    try:
        MockGenerator().run(options)
    except MockerError as exc:
        logger.error("%s", exc)
        parser.exit(1)

    if options.output_dir:
        logger.info("Mocks written to %s", Path(options.output_dir) / f"{options.package_name}.go")


if __name__ == "__main__":  # pragma: no cover - manual invocation
    main()
