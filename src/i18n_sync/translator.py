"""
Translation client for i18n-sync.

``TranslationClient`` wraps a single external call
``translate(text, target_language) -> translated text`` with bounded retry.
It never raises for a failed translation: when no service code is configured
for a language, or every attempt raises (whatever the exception type), it
returns a visibly marked placeholder (``"[ES] original text"``) so a sync run
always completes.

The external call itself is made by a ``TranslationService``.
``GoogleTranslateService`` talks to the Google Cloud Translation v2 REST API.
"""

import logging
import time
from typing import Any, Callable, Dict, Mapping, Optional

import requests

from .config import Credentials
from .errors import TranslationServiceError
from .languages_config import DEFAULT_BASE_LANGUAGE, get_language_name

logger = logging.getLogger(__name__)

GOOGLE_TRANSLATE_URL = "https://translation.googleapis.com/language/translate/v2"

# Seconds before a single HTTP request is abandoned
REQUEST_TIMEOUT = 30


def fallback_text(text: str, target_language: str) -> str:
    """Return the placeholder used when a translation cannot be obtained."""
    return f"[{target_language.upper()}] {text}"


def is_fallback(value: Any, text: str, target_language: str) -> bool:
    """True if ``value`` is the placeholder for ``text`` in ``target_language``."""
    return value == fallback_text(text, target_language)


class TranslationService:
    """Interface for the external translation call."""

    def translate(self, text: str, source_language: str, target_code: str) -> str:
        """
        Translate ``text`` and return the translated string.

        Raises:
            TranslationServiceError: If the call fails for any reason.
        """
        raise NotImplementedError


class GoogleTranslateService(TranslationService):
    """Google Cloud Translation (v2, API key) backed service."""

    def __init__(
        self,
        credentials: Credentials,
        session: Optional[requests.Session] = None,
        url: str = GOOGLE_TRANSLATE_URL,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.credentials = credentials
        self.session = session or requests.Session()
        self.url = url
        self.timeout = timeout

    def translate(self, text: str, source_language: str, target_code: str) -> str:
        payload = {
            "q": text,
            "source": source_language,
            "target": target_code,
            "format": "text",
        }
        try:
            response = self.session.post(
                self.url,
                params={"key": self.credentials.api_key},
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise TranslationServiceError(f"Translation request failed: {e}")
        except ValueError as e:
            raise TranslationServiceError(f"Invalid response from translation service: {e}")

        try:
            return data["data"]["translations"][0]["translatedText"]
        except (KeyError, IndexError, TypeError):
            raise TranslationServiceError(f"Unexpected response shape: {data!r}")


class TranslationClient:
    """
    Translate single strings with retry and a marked fallback.

    Args:
        service: The external translation service.
        language_codes: Maps localization-file language codes to service codes.
        source_language: Language the texts are written in.
        max_retries: Retries after the first failed attempt.
        api_delay: Base delay in seconds; every retry waits twice this.
        verbose: Log each attempt at INFO instead of DEBUG.
        sleep: Blocking wait function, replaceable in tests.
    """

    def __init__(
        self,
        service: TranslationService,
        language_codes: Mapping[str, str],
        source_language: str = DEFAULT_BASE_LANGUAGE,
        max_retries: int = 3,
        api_delay: float = 0.1,
        verbose: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.service = service
        self.language_codes: Dict[str, str] = dict(language_codes)
        self.source_language = source_language
        self.max_retries = max_retries
        self.api_delay = api_delay
        self.verbose = verbose
        self._sleep = sleep

    def _log_attempt(self, message: str) -> None:
        logger.log(logging.INFO if self.verbose else logging.DEBUG, message)

    def translate(self, text: str, target_language: str) -> str:
        """Translate ``text`` into ``target_language``; never raises."""
        service_code = self.language_codes.get(target_language)
        if not service_code:
            logger.warning(f"No translation service code found for language: {target_language}")
            return fallback_text(text, target_language)

        retry_delay = self.api_delay * 2
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries + 1):
            if attempt > 0:
                logger.warning(
                    f"   Translation failed, retrying ({attempt}/{self.max_retries})..."
                )
                self._sleep(retry_delay)

            self._log_attempt(
                f'   Translating "{text}" to {get_language_name(target_language)}...'
            )
            try:
                translation = self.service.translate(text, self.source_language, service_code)
            except Exception as e:
                # Any service failure degrades to the placeholder below
                last_error = e
                continue

            self._log_attempt(f'   Translation: "{translation}"')
            return translation

        logger.error(
            f'   Translation failed for "{text}" to {target_language} '
            f"after {self.max_retries} retries: {last_error}"
        )
        return fallback_text(text, target_language)
