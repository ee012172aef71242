"""
Custom error types and exit codes for i18n-sync.
"""

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_PARSE_ERROR = 3
EXIT_CREDENTIALS_ERROR = 4


class I18nSyncError(Exception):
    """Base exception for i18n-sync errors."""

    exit_code = EXIT_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(I18nSyncError):
    """Configuration or path-related errors."""

    exit_code = EXIT_CONFIG_ERROR


class ParseError(I18nSyncError):
    """The translations declaration could not be located or parsed."""

    exit_code = EXIT_PARSE_ERROR


class CredentialsError(I18nSyncError):
    """Translation service credentials are missing."""

    exit_code = EXIT_CREDENTIALS_ERROR


class TranslationServiceError(I18nSyncError):
    """A single call to the translation service failed."""
