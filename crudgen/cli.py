# File: crudgen/cli.py
"""
CrudGen - Command-Line Interface
=================================

Built with the standard-library ``argparse`` module.

Usage examples::

    # Scaffold CRUD for the blog_posts table of a live database
    python -m crudgen blog_posts --database-url sqlite:///database/database.sqlite

    # Offline, from a schema file, with a custom route slug
    python -m crudgen blog_posts --schema-file schema.yaml --route posts

    # Tailwind views, no layout check, overwrite without asking
    python -m crudgen invoices -c crud.yaml --stack tailwind --no-layout --force

    # Show version
    python -m crudgen --version

Exit codes:
    0 - success
    1 - validation / precondition error (nothing written)
    2 - generation error
    4 - input/argument error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("crudgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the root crudgen logger based on verbosity level.

    Args:
        verbosity: -1 = ERROR, 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    elif verbosity == 0:
        level = logging.WARNING
    else:
        level = logging.ERROR

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("crudgen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from crudgen import __version__
    from crudgen.templates import available_stacks

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="crudgen",
        description=(
            "CrudGen - CRUD scaffolding for Laravel applications.\n\n"
            "Reads a table's columns and generates its controller, model, "
            "form request and Blade views."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s blog_posts --database-url sqlite:///database/database.sqlite\n"
            "  %(prog)s blog_posts --schema-file schema.yaml --route posts\n"
            "  %(prog)s invoices -c crud.yaml --stack tailwind --force\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"CrudGen v{__version__}",
    )

    # --- Positional ---
    parser.add_argument(
        "table",
        metavar="TABLE",
        help="Table name to scaffold (e.g. 'blog_posts').",
    )
    parser.add_argument(
        "--route",
        type=str,
        default=None,
        metavar="SLUG",
        help="Custom route slug (default: kebab-case plural of the model name).",
    )

    # --- Schema source ---
    source_group = parser.add_argument_group("schema source")
    source = source_group.add_mutually_exclusive_group()
    source.add_argument(
        "--database-url",
        type=str,
        default=None,
        metavar="URL",
        help="SQLAlchemy URL of the application database.",
    )
    source.add_argument(
        "--schema-file",
        type=str,
        default=None,
        metavar="PATH",
        help="YAML/JSON file describing table columns (offline mode).",
    )

    # --- Configuration ---
    config_group = parser.add_argument_group("configuration")
    config_group.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="YAML/JSON config file (namespaces, layout, unwanted columns, ...).",
    )
    config_group.add_argument(
        "--base-path",
        type=str,
        default=None,
        metavar="DIR",
        help="Root of the Laravel application (default: current directory).",
    )
    config_group.add_argument(
        "--stub-path",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory holding custom stub templates.",
    )
    config_group.add_argument(
        "--stack",
        type=str,
        default=None,
        choices=available_stacks(),
        help="Markup flavour of the generated views (default: bootstrap).",
    )

    # --- Behaviour flags ---
    behaviour_group = parser.add_argument_group("behaviour flags")
    behaviour_group.add_argument(
        "--no-layout",
        action="store_true",
        default=False,
        help="Do not check for (or install) the shared layout view.",
    )
    behaviour_group.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Overwrite existing files without asking (also the default when stdin is closed).",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress the summary report and all logging except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Config override builder
# ---------------------------------------------------------------------------


def _build_config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Build a config override dictionary from CLI arguments."""
    overrides: Dict[str, Any] = {}

    if args.base_path is not None:
        overrides["base_path"] = args.base_path

    if args.stub_path is not None:
        overrides["stub_path"] = args.stub_path

    if args.stack is not None:
        overrides["stack"] = args.stack

    if args.database_url is not None:
        overrides["database_url"] = args.database_url

    if args.schema_file is not None:
        overrides["schema_file"] = args.schema_file

    if args.force:
        overrides["force"] = True

    return overrides


# ---------------------------------------------------------------------------
# Overwrite prompt
# ---------------------------------------------------------------------------


def ask_overwrite(question: str) -> bool:
    """
    Ask on the terminal; an empty answer means yes.

    Without an interactive stdin the default answer applies, so existing
    files are overwritten as with ``--force``.
    """
    try:
        answer: str = input(f"{question} (yes/no) [yes]: ")
    except EOFError:
        logger.info("No answer on stdin; using the default (yes).")
        return True
    return answer.strip().lower() in ("", "y", "yes")


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def _run_generation(args: argparse.Namespace) -> int:
    """
    Load the config, build the pipeline and generate.

    Returns the appropriate exit code.
    """
    from crudgen.exceptions import ConfigError, SchemaReadError
    from crudgen.generator import CrudGenerator, GenerationReport, load_config_file
    from crudgen.models import GenerationConfig
    from crudgen.schema import SchemaReader, make_schema_reader

    config_path: Optional[Path] = Path(args.config) if args.config else None

    try:
        config: GenerationConfig = load_config_file(
            config_path, _build_config_overrides(args)
        )
        if args.no_layout:
            config.layout = None
        if args.database_url is not None:
            config.schema_file = None
        reader: SchemaReader = make_schema_reader(config.database_url, config.schema_file)
    except (ConfigError, SchemaReadError) as exc:
        logger.error("%s", exc)
        return EXIT_INPUT_ERROR

    logger.info("Project: %s", Path(config.base_path).resolve())
    logger.info("Stack:   %s", config.stack)
    logger.info("Layout:  %s", config.layout or "(disabled)")

    generator: CrudGenerator = CrudGenerator(
        config,
        reader=reader,
        confirm=ask_overwrite,
    )
    report: GenerationReport = generator.generate(args.table, route=args.route)

    if not args.quiet:
        print(report.summary(), file=sys.stderr)

    if not report.success:
        if report.validation_errors:
            return EXIT_VALIDATION_ERROR
        return EXIT_GENERATION_ERROR

    return EXIT_SUCCESS


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    verbosity: int = -1 if args.quiet else args.verbose
    _setup_logging(verbosity)

    logger.info("Table:   %s", args.table)
    exit_code: int = _run_generation(args)

    if exit_code == EXIT_SUCCESS:
        logger.info("Generation completed successfully.")
    else:
        logger.error("Generation failed with exit code %d.", exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "ask_overwrite",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("crudgen.cli loaded.")
