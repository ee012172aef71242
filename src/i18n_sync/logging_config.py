"""
Logging setup for i18n-sync.

Console output is the tool's interface: per-key progress ("✅ nav.home: ...")
is logged at INFO and shown as the bare message, warnings and errors too.
A log file, when requested, gets timestamped records.

The level comes from the command-line flags when any is given, otherwise
from ``i18n_sync.toml``:

1. ``--debug``: DEBUG
2. ``--quiet``: ERROR
3. ``--verbose``: INFO
4. ``[translate] verbose = true`` (the default): INFO
5. ``[logging] level``
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .config import Config

PACKAGE_LOGGER = "i18n_sync"

CONSOLE_FORMAT = "%(message)s"
DETAILED_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_log_level_from_flags(
    quiet: bool = False,
    verbose: bool = False,
    debug: bool = False,
) -> Optional[int]:
    """Return the level the flags ask for, or None when no flag is set."""
    if debug:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.INFO
    return None


def resolve_log_level(
    quiet: bool = False,
    verbose: bool = False,
    debug: bool = False,
    config: Optional[Config] = None,
) -> int:
    """Combine flags and configuration into one level."""
    level = get_log_level_from_flags(quiet=quiet, verbose=verbose, debug=debug)
    if level is not None:
        return level
    if config is None:
        return logging.WARNING
    if config.translate.verbose:
        return logging.INFO
    return getattr(logging, config.logging.level.upper())


def configure_logging(level: int = logging.WARNING, log_file: Optional[Path] = None) -> None:
    """
    Attach fresh handlers to the ``i18n_sync`` logger.

    Handlers from an earlier call are replaced, so the CLI can configure
    once from the flags and again after the config file is read.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(level)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(
        logging.Formatter(DETAILED_FORMAT if level <= logging.DEBUG else CONSOLE_FORMAT)
    )
    package_logger.addHandler(console)

    if log_file is not None:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        except OSError as e:
            package_logger.warning(f"⚠️  Cannot write log file {log_file}: {e}")
        else:
            file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
            package_logger.addHandler(file_handler)


def setup_logging(
    quiet: bool = False,
    verbose: bool = False,
    debug: bool = False,
    log_file: Optional[Path] = None,
    config: Optional[Config] = None,
) -> int:
    """
    Configure logging for a CLI run.

    ``log_file`` falls back to ``[logging] log_file`` from the config.

    Returns:
        The level that was applied.
    """
    level = resolve_log_level(quiet=quiet, verbose=verbose, debug=debug, config=config)
    if log_file is None and config is not None and config.logging.log_file:
        log_file = Path(config.logging.log_file)
    configure_logging(level=level, log_file=log_file)
    return level
