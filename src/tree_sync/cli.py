"""Command-line entry point: ``tree-sync ROOT_A ROOT_B``."""

import argparse
import logging
import sys

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from . import __version__
from .config import Config, load_config
from .config_loader import load_hierarchical_config
from .config_schema import build_config
from .interfaces import Reporter, RootSelector, StaticRootSelector
from .logger import setup_logging
from .sync.engine import SyncEngine
from .sync.reporter import ConsoleReporter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tree-sync",
        description="Copy whatever exists in one directory tree but not the "
        "other, in both directions, until both hold the union.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Reconcile two local trees
  tree-sync /srv/data /mnt/backup/data

  # Reconcile with a network share and preview first
  tree-sync --dry-run /srv/data //fileserver/share/data

  # Machine-readable report
  tree-sync --json /srv/data /mnt/backup/data > report.json

Nothing is ever deleted or overwritten: files present on both sides are
left alone even if their contents differ.
        """,
    )
    parser.add_argument(
        "root_a",
        nargs="?",
        help="First root (default: TREE_SYNC_ROOT_A or roots.a in config)",
    )
    parser.add_argument(
        "root_b",
        nargs="?",
        help="Second root (default: TREE_SYNC_ROOT_B or roots.b in config)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Show what would be copied without changing either tree",
    )
    parser.add_argument(
        "--no-preserve-metadata",
        dest="preserve_metadata",
        action="store_false",
        default=None,
        help="Copy file contents only, not timestamps or permission bits",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the report as JSON",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-file",
        help="Also append log records to this file",
    )
    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        help="Log record format on stderr (default: text)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"tree-sync version {__version__}",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> Config:
    """Merge CLI args, environment, .env and config files into a Config.

    Raises:
        ValueError: If the config files or the resulting values are invalid.
    """
    load_dotenv()
    try:
        unified = build_config(load_hierarchical_config())
    except (yaml.YAMLError, ValidationError, OSError) as exc:
        raise ValueError(f"Invalid configuration file: {exc}") from exc

    return load_config(
        root_a=args.root_a,
        root_b=args.root_b,
        dry_run=args.dry_run,
        preserve_metadata=args.preserve_metadata,
        debug=args.debug,
        log_file=args.log_file,
        log_format=args.log_format,
        unified=unified,
    )


def execute(
    selector: RootSelector,
    reporter: Reporter,
    dry_run: bool = False,
    preserve_metadata: bool = True,
) -> int:
    """Run one bidirectional sync and hand the report to *reporter*.

    Returns:
        Process exit status: 1 if any error was recorded, else 0.
    """
    root_a, root_b = selector.select_roots()
    engine = SyncEngine(root_a, root_b, preserve_metadata=preserve_metadata)
    report = engine.run(dry_run=dry_run)
    reporter.report(report)
    return 1 if report.has_errors else 0


def run(argv: list[str] | None = None) -> int:
    """Entry point that handles errors gracefully and parses CLI arguments."""
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    setup_logging(
        debug=config.debug,
        log_file=config.log_file,
        log_format=config.log_format,
        level=config.log_level,
    )
    logger.debug("Resolved config: %s", config)

    selector = StaticRootSelector(str(config.root_a), str(config.root_b))
    reporter = ConsoleReporter(as_json=args.json)

    try:
        return execute(
            selector,
            reporter,
            dry_run=config.dry_run,
            preserve_metadata=config.preserve_metadata,
        )
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
