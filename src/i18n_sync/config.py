"""
Configuration file support for i18n-sync.

Provides:
- Config dataclass for holding configuration values
- TOML config file loading (i18n_sync.toml)
- Precedence: CLI > config file > defaults
- Translation service credentials from the environment (.env aware)
"""

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

# Python 3.11+ has tomllib in stdlib, earlier versions need tomli
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from dotenv import find_dotenv, load_dotenv

from .errors import CredentialsError
from .languages_config import DEFAULT_BASE_LANGUAGE, DEFAULT_LANGUAGE_CODES

logger = logging.getLogger(__name__)

# Default config file name
DEFAULT_CONFIG_NAME = "i18n_sync.toml"

# Environment variables holding the translation service credentials
PROJECT_ID_ENV = "GOOGLE_TRANSLATE_PROJECT_ID"
API_KEY_ENV = "GOOGLE_TRANSLATE_KEY"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class TranslateConfig:
    """Translation run configuration."""

    api_delay: int = 100  # milliseconds between API calls
    max_retries: int = 3
    verbose: bool = True
    # None processes every non-base language found in the file
    target_languages: Optional[List[str]] = None
    project_id: Optional[str] = None
    base_language: str = DEFAULT_BASE_LANGUAGE
    language_codes: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_LANGUAGE_CODES)
    )

    @property
    def api_delay_seconds(self) -> float:
        """The pacing delay in seconds."""
        return self.api_delay / 1000.0


@dataclass
class PathsConfig:
    """Path configuration."""

    source: str = "i18n.ts"
    identifier: str = "translations"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"
    log_file: Optional[str] = None


@dataclass
class Config:
    """Complete configuration for i18n-sync."""

    translate: TranslateConfig = field(default_factory=TranslateConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    config_path: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], config_path: Optional[Path] = None) -> "Config":
        """
        Create Config from a dictionary (parsed TOML).

        Raises:
            ConfigError: If a section is not a table or a value has the
                wrong type.
        """
        translate_data = _section(data, "translate")
        paths_data = _section(data, "paths")
        logging_data = _section(data, "logging")

        # Configured codes extend the defaults rather than replacing them
        configured_codes = translate_data.get("language_codes", {})
        if not isinstance(configured_codes, dict) or not all(
            isinstance(code, str) and isinstance(service_code, str)
            for code, service_code in configured_codes.items()
        ):
            raise ConfigError("translate.language_codes must be a table of language codes")
        language_codes = dict(DEFAULT_LANGUAGE_CODES)
        language_codes.update(configured_codes)

        target_languages = translate_data.get("target_languages")
        if target_languages is not None:
            if not isinstance(target_languages, list) or not all(
                isinstance(code, str) for code in target_languages
            ):
                raise ConfigError("translate.target_languages must be a list of language codes")
            target_languages = list(target_languages)

        translate = TranslateConfig(
            api_delay=translate_data.get("api_delay", 100),
            max_retries=translate_data.get("max_retries", 3),
            verbose=translate_data.get("verbose", True),
            target_languages=target_languages,
            project_id=translate_data.get("project_id"),
            base_language=translate_data.get("base_language", DEFAULT_BASE_LANGUAGE),
            language_codes=language_codes,
        )
        _validate_translate_config(translate)

        paths = PathsConfig(
            source=paths_data.get("source", "i18n.ts"),
            identifier=paths_data.get("identifier", "translations"),
        )
        logging_config = LoggingConfig(
            level=logging_data.get("level", "WARNING"),
            log_file=logging_data.get("log_file"),
        )
        for name, value in (
            ("paths.source", paths.source),
            ("paths.identifier", paths.identifier),
            ("logging.level", logging_config.level),
        ):
            if not isinstance(value, str):
                raise ConfigError(f"{name} must be a string, got {value!r}")
        if logging_config.level.upper() not in LOG_LEVELS:
            raise ConfigError(
                f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {logging_config.level!r}"
            )
        if logging_config.log_file is not None and not isinstance(logging_config.log_file, str):
            raise ConfigError(f"logging.log_file must be a string, got {logging_config.log_file!r}")

        return cls(
            translate=translate,
            paths=paths,
            logging=logging_config,
            config_path=config_path,
        )


class ConfigError(Exception):
    """Error loading or parsing configuration."""

    pass


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table, got {section!r}")
    return section


def _is_count(value: Any) -> bool:
    # bool is an int subclass; reject it
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _validate_translate_config(translate: TranslateConfig) -> None:
    if not _is_count(translate.api_delay):
        raise ConfigError(f"api_delay must be a non-negative integer, got {translate.api_delay!r}")
    if not _is_count(translate.max_retries):
        raise ConfigError(f"max_retries must be a non-negative integer, got {translate.max_retries!r}")
    if not isinstance(translate.verbose, bool):
        raise ConfigError(f"verbose must be true or false, got {translate.verbose!r}")
    if not isinstance(translate.base_language, str):
        raise ConfigError(f"base_language must be a string, got {translate.base_language!r}")
    if translate.project_id is not None and not isinstance(translate.project_id, str):
        raise ConfigError(f"project_id must be a string, got {translate.project_id!r}")


def find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find the configuration file.

    Search order:
    1. Explicit path if provided
    2. i18n_sync.toml in current directory

    Returns:
        Path to config file, or None if not found.
    """
    if config_path is not None:
        if config_path.exists():
            return config_path
        raise ConfigError(f"Config file not found: {config_path}")

    cwd_config = Path.cwd() / DEFAULT_CONFIG_NAME
    if cwd_config.exists():
        return cwd_config

    return None


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from a TOML file.

    If no config file is found, returns default configuration.

    Raises:
        ConfigError: If config file exists but cannot be parsed.
    """
    config_file = find_config_file(config_path)

    if config_file is None:
        logger.debug("No config file found, using defaults")
        return Config()

    logger.debug(f"Loading config from: {config_file}")

    try:
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_file}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_file}: {e}")

    config = Config.from_dict(data, config_path=config_file)
    logger.info(f"Loaded config from: {config_file}")
    return config


# ============================================================================
# Credentials
# ============================================================================


@dataclass(frozen=True)
class Credentials:
    """Project credentials for the translation service."""

    project_id: str
    api_key: str


def load_credentials(config: Optional[TranslateConfig] = None) -> Credentials:
    """
    Resolve translation service credentials from the environment.

    A ``.env`` file in the working directory is loaded first; variables
    already set in the process environment win. The configured
    ``project_id`` is used when the environment does not provide one.

    Raises:
        CredentialsError: If the project id or the API key is missing.
    """
    load_dotenv(find_dotenv(usecwd=True))

    project_id = os.environ.get(PROJECT_ID_ENV) or (config.project_id if config else None)
    api_key = os.environ.get(API_KEY_ENV)

    if not project_id:
        raise CredentialsError(f"{PROJECT_ID_ENV} is not set")
    if not api_key:
        raise CredentialsError(f"{API_KEY_ENV} is not set")

    return Credentials(project_id=project_id, api_key=api_key)
