"""
Language metadata for i18n-sync.

Holds the display names used in console output and the default mapping from
localization-file language codes to the codes the translation service
expects. Both can be extended from the ``[translate]`` section of
``i18n_sync.toml``.
"""

from typing import Dict, List

DEFAULT_BASE_LANGUAGE = "en"

# Languages the translation service knows out of the box
DEFAULT_TARGET_LANGUAGES: List[str] = ["es", "fr", "de", "it", "pt", "ja"]

LANGUAGE_NAMES: Dict[str, str] = {
    "en": "English",
    "es": "Spanish (Español)",
    "fr": "French (Français)",
    "de": "German (Deutsch)",
    "it": "Italian (Italiano)",
    "pt": "Portuguese (Português)",
    "ja": "Japanese (日本語)",
}

# Localization-file code -> translation service code
DEFAULT_LANGUAGE_CODES: Dict[str, str] = {code: code for code in DEFAULT_TARGET_LANGUAGES}


def get_language_name(code: str) -> str:
    """Return the display name for a language code, or the code itself."""
    return LANGUAGE_NAMES.get(code, code)
