"""Entry point for the ``flutter-codegen`` command."""

from __future__ import annotations

import argparse
import sys

from . import __version__
from .cli import CLIHandler
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _add_backend_args(parser: argparse.ArgumentParser) -> None:
    backend = parser.add_argument_group("backend")
    backend.add_argument(
        "--manifest",
        metavar="FILE|URL",
        help="Backend manifest (tables, models and routes) as a JSON file or URL",
    )
    backend.add_argument(
        "--database-url",
        metavar="URL",
        help="SQLAlchemy database URL to reflect table schemas from",
    )
    backend.add_argument(
        "--models-module",
        metavar="MODULE:BASE",
        help="Declarative base holding the SQLAlchemy models, e.g. app.models:Base",
    )

    output = parser.add_argument_group("output")
    output.add_argument("--config", metavar="FILE", help="JSON configuration file")
    output.add_argument("--output", "-o", metavar="DIR", help="Base output directory")
    output.add_argument(
        "--force", "-f", action="store_true", help="Overwrite existing files without asking"
    )


def _add_skip_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--skip-model", action="store_true", help="Skip model generation")
    parser.add_argument("--skip-service", action="store_true", help="Skip service generation")
    parser.add_argument("--skip-widgets", action="store_true", help="Skip widget generation")
    parser.add_argument("--skip-screens", action="store_true", help="Skip screen generation")


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per operation."""
    parser = argparse.ArgumentParser(
        prog="flutter-codegen",
        description="Generate Flutter models, services, widgets and screens from backend models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  flutter-codegen generate-model User --manifest app.json
  flutter-codegen generate-service User --with-routes --manifest app.json
  flutter-codegen generate-feature Post --skip-screens --manifest app.json
  flutter-codegen generate-all --yes --database-url sqlite:///app.db --models-module app.models:Base
  flutter-codegen list-models --manifest https://api.example.com/manifest.json
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        type=str.upper,
        help="Logging verbosity (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    model = subparsers.add_parser("generate-model", help="Generate a Dart data class")
    model.add_argument("name", help="Model name")
    _add_backend_args(model)

    service = subparsers.add_parser("generate-service", help="Generate an API service class")
    service.add_argument("name", help="Model name")
    service.add_argument(
        "--with-routes",
        action="store_true",
        help="Include route analysis for custom methods",
    )
    _add_backend_args(service)

    feature = subparsers.add_parser(
        "generate-feature", help="Generate model, service, widgets and screens for one model"
    )
    feature.add_argument("name", help="Model name")
    _add_skip_args(feature)
    _add_backend_args(feature)

    everything = subparsers.add_parser(
        "generate-all", help="Generate every artifact for every discovered model"
    )
    everything.add_argument(
        "--models", metavar="A,B", help="Comma-separated models to generate (default: all)"
    )
    everything.add_argument(
        "--yes", "-y", action="store_true", help="Do not ask before generating"
    )
    _add_skip_args(everything)
    _add_backend_args(everything)

    listing = subparsers.add_parser("list-models", help="List the models of the backend")
    _add_backend_args(listing)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if not args.command:
        parser.print_help()
        return 1

    logger.debug(f"Running {args.command}")
    return CLIHandler().run(args)


if __name__ == "__main__":
    sys.exit(main())
