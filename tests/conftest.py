"""Test configuration and fixtures for i18n-sync tests."""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pytest

# Add src to path for development testing
_src_dir = Path(__file__).parent.parent / "src"
if _src_dir.exists():
    sys.path.insert(0, str(_src_dir))

from i18n_sync.errors import TranslationServiceError  # noqa: E402
from i18n_sync.translator import TranslationService  # noqa: E402


# ==============================================================================
# Source file fixtures
# ==============================================================================

SAMPLE_SOURCE = """\
import { createI18n } from "vue-i18n";

// Keep keys sorted by screen
const translations = {
    en: {
        nav: {
            home: "Home",
            settings: "Settings",
        },
        greeting: 'Hello, {name}!',
        farewell: "Goodbye",
    },
    es: {
        nav: {
            home: "Inicio",
        },
        greeting: "¡Hola, {name}!",
    },
    fr: {
        nav: { home: "Accueil", settings: "Paramètres" },
        greeting: "Bonjour, {name} !",
        farewell: "Au revoir",
    },
};

export default createI18n({ locale: "en", messages: translations });
"""


@pytest.fixture
def sample_source(tmp_path: Path) -> Path:
    """Write a small TypeScript translations file and return its path."""
    path = tmp_path / "i18n.ts"
    path.write_text(SAMPLE_SOURCE, encoding="utf-8")
    return path


# ==============================================================================
# Fake collaborators
# ==============================================================================


class FakeTranslationService(TranslationService):
    """
    Translation service double.

    Translates to ``"<target>:<text>"``. ``failures`` maps
    ``(text, target_code)`` to the number of calls that should fail before
    one succeeds; use a large number to fail forever.
    """

    def __init__(self, failures: Optional[Dict[Tuple[str, str], int]] = None):
        self.failures = dict(failures or {})
        self.calls: List[Tuple[str, str, str]] = []

    def translate(self, text: str, source_language: str, target_code: str) -> str:
        self.calls.append((text, source_language, target_code))
        remaining = self.failures.get((text, target_code), 0)
        if remaining > 0:
            self.failures[(text, target_code)] = remaining - 1
            raise TranslationServiceError(f"service unavailable for {target_code}")
        return f"{target_code}:{text}"


class SleepRecorder:
    """Stands in for time.sleep and records every requested delay."""

    def __init__(self):
        self.delays: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_service() -> FakeTranslationService:
    """Return a translation service that always succeeds."""
    return FakeTranslationService()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    """Return a sleep replacement that records delays."""
    return SleepRecorder()


@pytest.fixture
def clean_credentials_env(monkeypatch, tmp_path) -> Path:
    """Remove credential variables and run from a directory without .env."""
    # setenv first so teardown also undoes values a .env file loads later
    for name in ("GOOGLE_TRANSLATE_PROJECT_ID", "GOOGLE_TRANSLATE_KEY"):
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_service():
    """Return the fake service class for tests that configure failures."""
    return FakeTranslationService


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handler and level changes made by configure_logging."""
    package_logger = logging.getLogger("i18n_sync")
    yield
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
