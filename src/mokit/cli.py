"""Command-line interface for mokit."""

import argparse
import sys
from pathlib import Path

from mokit import __version__
from mokit.logging_config import get_logger

logger = get_logger(__name__)


def cmd_info(path: Path) -> int:
    """Show entry count, header fields and plural rule of a catalog."""
    from mokit.catalog import CatalogDecoder
    from mokit.reader import Endianness
    from mokit.translation import HEADER_KEY, Translation

    decoder = CatalogDecoder(path)
    entries = decoder.decode()
    if decoder.error:
        logger.error("%s", decoder.error)
        return 1

    translation = Translation(entries)
    logger.info("File: %s", path)
    logger.info("  Byte order: %s", "little-endian" if decoder.endianness == Endianness.LITTLE else "big-endian")
    logger.info("  Entries: %d", len(entries) - (1 if HEADER_KEY in entries else 0))
    logger.info("  Charset: %s", translation.charset)
    logger.info("  Plural forms: %d (%s)", translation.count_plural_forms(), translation.plural_rule.expression.expr)
    if translation.headers:
        logger.info("  Header:")
        for name, value in translation.headers.items():
            logger.info("    %s: %s", name, value)
    return 0


def cmd_lookup(
    path: Path,
    key: str,
    context: str | None = None,
    plural: str | None = None,
    count: int | None = None,
) -> int:
    """Print the translation selected for a key."""
    from mokit.translation import Translation

    translation = Translation.from_file(path)
    if translation.error:
        logger.warning("%s", translation.error)

    if plural is not None:
        n = 1 if count is None else count
        if context is not None:
            result = translation.npgettext(context, key, plural, n)
        else:
            result = translation.ngettext(key, plural, n)
    elif context is not None:
        result = translation.pgettext(context, key)
    else:
        result = translation.gettext(key)

    logger.info("%s", result)
    return 0


def cmd_plural(forms: str, counts: list[int]) -> int:
    """Print the slot a Plural-Forms value selects for each count."""
    from mokit.exceptions import PluralExpressionError
    from mokit.plurals import PluralRule

    rule = PluralRule.from_plural_forms(forms)
    try:
        rule.expression.tokens
    except PluralExpressionError as e:
        logger.error("Invalid plural expression '%s': %s", rule.expression.expr, e)
        return 1

    logger.info("nplurals=%d; plural=%s", rule.nplurals, rule.expression.expr)
    for n in counts:
        logger.info("  %d -> %d", n, rule.resolve(n))
    return 0


def cmd_check(path: Path | None = None, config_path: Path | None = None) -> int:
    """Validate one catalog, or every catalog in a manifest."""
    from mokit.validation import validate_catalog

    if config_path is not None:
        from mokit.config import ConfigError, load_config

        try:
            config = load_config(config_path)
        except ConfigError as e:
            logger.error("Configuration error: %s", e)
            return 1
        except FileNotFoundError:
            logger.error("Configuration file not found: %s", config_path)
            return 1
        paths = [entry.path for entry in config.catalogs]
        logger.info("Configuration is valid: %s", config_path)
    elif path is not None:
        paths = [path]
    else:
        logger.error("Either a catalog file or --config is required")
        return 1

    failed = False
    for catalog_path in paths:
        result = validate_catalog(catalog_path)
        for error in result.errors:
            logger.error("%s: %s", catalog_path, error)
        for warning in result.warnings:
            logger.warning("%s: %s", catalog_path, warning)
        if result.valid:
            logger.info("%s: OK", catalog_path)
        else:
            failed = True

    return 1 if failed else 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mokit",
        description="Inspect compiled gettext catalogs and try out lookups.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mokit info de.mo                               Show header and plural rule
  mokit lookup de.mo "Save"                      Translate a message
  mokit lookup de.mo "Table" --context "Format"  Translate within a context
  mokit lookup de.mo "%d file" --plural "%d files" -n 3
  mokit plural "nplurals=2; plural=n != 1;" 0 1 2
  mokit check de.mo                              Validate a catalog
  mokit check -c catalogs.yaml                   Validate every catalog in a manifest
""",
    )

    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Show version information and exit",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v shows catalog loading, -vv all debug output)",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress all output except errors",
    )

    parser.add_argument(
        "--log-file",
        type=Path,
        help="Write logs to file (includes all levels)",
    )

    subparsers = parser.add_subparsers(dest="command")

    info = subparsers.add_parser("info", help="Show catalog header and plural rule")
    info.add_argument("file", type=Path, help="Compiled catalog (.mo)")

    lookup = subparsers.add_parser("lookup", help="Translate a message")
    lookup.add_argument("file", type=Path, help="Compiled catalog (.mo)")
    lookup.add_argument("key", help="Original message (singular form for plural lookups)")
    lookup.add_argument("--context", help="Message context")
    lookup.add_argument("--plural", help="Plural form of the original message")
    lookup.add_argument("-n", "--count", type=int, help="Count for plural lookups (default: 1)")

    plural = subparsers.add_parser("plural", help="Evaluate a Plural-Forms value")
    plural.add_argument("forms", help="e.g. 'nplurals=2; plural=n != 1;'")
    plural.add_argument("counts", type=int, nargs="+", help="Counts to evaluate")

    check = subparsers.add_parser("check", help="Validate catalogs")
    check.add_argument("file", type=Path, nargs="?", help="Compiled catalog (.mo)")
    check.add_argument("-c", "--config", type=Path, help="Catalog manifest (YAML)")

    return parser


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    from mokit.logging_config import setup_logging

    setup_logging(
        verbosity=parsed.verbose,
        quiet=parsed.quiet,
        log_file=parsed.log_file,
    )

    if parsed.version:
        logger.info("mokit %s", __version__)
        return 0

    if parsed.command == "info":
        return cmd_info(parsed.file)
    elif parsed.command == "lookup":
        return cmd_lookup(
            parsed.file,
            parsed.key,
            context=parsed.context,
            plural=parsed.plural,
            count=parsed.count,
        )
    elif parsed.command == "plural":
        return cmd_plural(parsed.forms, parsed.counts)
    elif parsed.command == "check":
        return cmd_check(path=parsed.file, config_path=parsed.config)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
