"""
Command-line interface for i18n-sync.

Provides the `i18n-sync` command with the following subcommands:
- test: Self-check the setup without calling the translation service
- translate: Translate missing keys and write them back to the source file
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import Config, ConfigError, load_config, load_credentials
from .differ import find_missing_keys
from .doctor import run_checks
from .errors import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_SUCCESS,
    I18nSyncError,
)
from .io import create_backup, load_language_set, save_language_set
from .logging_config import setup_logging
from .report import SyncReport, collect_base_values, write_sync_report
from .sync_engine import SyncEngine, select_languages
from .translator import GoogleTranslateService, TranslationClient

# Set up module logger
logger = logging.getLogger(__name__)

COMMANDS = ("test", "translate")

# Global options that consume the following argument
_OPTIONS_WITH_VALUE = ("-c", "--config", "--log-file")


def _resolve_source(args: argparse.Namespace, config: Config) -> Path:
    return Path(args.file) if args.file else Path(config.paths.source)


def _resolve_identifier(args: argparse.Namespace, config: Config) -> str:
    return args.identifier or config.paths.identifier


def _resolve_base(args: argparse.Namespace, config: Config) -> str:
    return args.base or config.translate.base_language


def check_command(args: argparse.Namespace) -> int:
    """
    Execute the test command (setup self-check).

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code.
    """
    config = getattr(args, "_config", None) or Config()
    if args.base:
        config.translate.base_language = args.base

    print("🧪 Running translation setup checks...")
    report = run_checks(
        source_path=_resolve_source(args, config),
        identifier=_resolve_identifier(args, config),
        config=config.translate,
    )

    if args.format == "json":
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(report.format_text(verbose=args.verbose))
        if report.is_healthy:
            print("✅ All checks passed! Run 'i18n-sync translate' to fill missing keys.")

    return EXIT_SUCCESS if report.is_healthy else EXIT_ERROR


def translate_command(args: argparse.Namespace) -> int:
    """
    Execute the translate command.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Exit code.
    """
    config = getattr(args, "_config", None) or Config()
    translate_config = config.translate

    source_path = _resolve_source(args, config)
    identifier = _resolve_identifier(args, config)
    base_language = _resolve_base(args, config)
    # No filter means every non-base language in the file
    languages = args.languages or translate_config.target_languages

    try:
        # Credentials are checked before anything else is touched
        credentials = None if args.dry_run else load_credentials(translate_config)

        print(f"🔍 Analyzing {source_path} for missing translations...")
        language_set = load_language_set(source_path, identifier, base_language)
    except I18nSyncError as e:
        logger.error(f"❌ {e.message}")
        return e.exit_code

    report = SyncReport(
        source_path=str(source_path),
        base_language=base_language,
        dry_run=args.dry_run,
    )
    report.start()

    targets = select_languages(language_set, base_language, languages)
    all_missing = find_missing_keys(language_set, base_language)
    report.missing_keys = {lang: all_missing[lang] for lang in targets if lang in all_missing}
    report.base_values = collect_base_values(language_set, report.missing_keys, base_language)

    print(report.format_missing())

    if not report.missing_keys:
        report.finish()
        _maybe_write_report(args, report)
        return EXIT_SUCCESS

    if args.dry_run:
        report.finish()
        print(report.format_summary())
        _maybe_write_report(args, report)
        return EXIT_SUCCESS

    print("\n🤖 Ready to translate missing keys using Google Translate API...")
    print("⚠️  This will make API calls to Google Translate and may incur costs.")

    report.backup_path = str(create_backup(source_path))

    client = TranslationClient(
        service=GoogleTranslateService(credentials),
        language_codes=translate_config.language_codes,
        source_language=base_language,
        max_retries=translate_config.max_retries,
        api_delay=translate_config.api_delay_seconds,
        verbose=translate_config.verbose,
    )
    engine = SyncEngine(
        client=client,
        base_language=base_language,
        api_delay=translate_config.api_delay_seconds,
        languages=targets,
    )

    print("\n🌐 Translating missing keys...")
    result = engine.sync(language_set, report.missing_keys)

    if result.changed:
        save_language_set(source_path, result.language_set, identifier)
    else:
        logger.info("No base texts to translate; source file left unchanged")

    report.finish(result)
    print(report.format_summary())
    _maybe_write_report(args, report)
    return EXIT_SUCCESS


def _maybe_write_report(args: argparse.Namespace, report: SyncReport) -> None:
    if args.report:
        path = write_sync_report(report, Path(args.report))
        logger.info(f"Report written to: {path}")


def _add_source_arguments(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--file", "-f",
        type=str,
        help="Localization file to process (default: i18n.ts)"
    )
    subparser.add_argument(
        "--identifier",
        type=str,
        help="Name of the declared translations object (default: translations)"
    )
    subparser.add_argument(
        "--base",
        type=str,
        help="Base language code (default: en)"
    )


def create_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for the CLI.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="i18n-sync",
        description="Fill missing localization keys using Google Translate.",
        epilog="Example: i18n-sync translate --file src/i18n.ts"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"i18n-sync {__version__}"
    )

    # Global options
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output (INFO level logging)"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output (DEBUG level logging)"
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress output except errors"
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        dest="config_file",
        help="Path to config file (default: i18n_sync.toml)"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write logs to this file"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands"
    )

    # Test command
    test_parser = subparsers.add_parser(
        "test",
        help="Run setup checks without calling the translation service",
        description="Parse the localization file, list missing keys and check configuration."
    )
    _add_source_arguments(test_parser)
    test_parser.add_argument(
        "--format",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )
    test_parser.set_defaults(func=check_command)

    # Translate command
    translate_parser = subparsers.add_parser(
        "translate",
        help="Translate missing keys",
        description="Translate keys missing from each language and write them back."
    )
    _add_source_arguments(translate_parser)
    translate_parser.add_argument(
        "--lang", "-l",
        action="append",
        dest="languages",
        metavar="LANG",
        help="Only process this language (repeatable; default: configured target languages)"
    )
    translate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List missing keys without translating or modifying files"
    )
    translate_parser.add_argument(
        "--report",
        type=str,
        help="Write a JSON report of the run to this path"
    )
    translate_parser.set_defaults(func=translate_command)

    return parser


def _find_command(argv: List[str]) -> Optional[str]:
    """Return the first positional argument, skipping global option values."""
    skip_next = False
    for arg in argv:
        if skip_next:
            skip_next = False
            continue
        if arg in _OPTIONS_WITH_VALUE:
            skip_next = True
            continue
        if arg.startswith("-"):
            continue
        return arg
    return None


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv).

    Returns:
        Exit code.
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()

    # Missing or unknown commands print usage instead of failing
    if _find_command(argv) not in COMMANDS and not any(
        arg in ("-h", "--help", "--version") for arg in argv
    ):
        parser.print_help()
        return EXIT_SUCCESS

    args = parser.parse_args(argv)
    log_file = Path(args.log_file) if args.log_file else None
    setup_logging(quiet=args.quiet, verbose=args.verbose, debug=args.debug, log_file=log_file)

    config_path = Path(args.config_file) if args.config_file else None
    try:
        config = load_config(config_path)
    except ConfigError as e:
        logger.error(f"❌ Config error: {e}")
        return EXIT_CONFIG_ERROR

    setup_logging(
        quiet=args.quiet,
        verbose=args.verbose,
        debug=args.debug,
        log_file=log_file,
        config=config,
    )
    args._config = config

    try:
        return args.func(args)
    except I18nSyncError as e:
        logger.error(f"❌ {e.message}")
        return e.exit_code
    except Exception as e:
        logger.exception(f"❌ Unexpected error: {e}")
        return EXIT_ERROR


def main_cli() -> None:
    """
    CLI entry point for console_scripts.

    Calls main() and exits with the returned code.
    """
    sys.exit(main())


if __name__ == "__main__":
    main_cli()
