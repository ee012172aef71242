"""
Self-check diagnostics for i18n-sync.

Provides the ``i18n-sync test`` command, which verifies everything a
``translate`` run needs without calling the translation service.

Checks include:
- Python version compatibility
- Dependencies importable (json5, jinja2, requests, python-dotenv)
- Source file parse (languages found)
- Missing key detection
- Translation service codes configured for each language
- Credentials present in the environment
"""

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .config import TranslateConfig, load_credentials
from .differ import find_missing_keys
from .errors import ConfigurationError, CredentialsError, ParseError
from .io import DEFAULT_IDENTIFIER, load_language_set
from .jinja_env import render
from .tree import LanguageSet

logger = logging.getLogger(__name__)

REQUIRED_PYTHON = (3, 9)

# Missing keys listed per language before "... and N more"
PREVIEW_LIMIT = 5


class CheckStatus(Enum):
    """Status of a check."""

    OK = "ok"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class CheckResult:
    """
    Result of a single check.

    Attributes:
        name: Name of the check (e.g., "Source File").
        status: Status of the check (ok, warning, error).
        detail: Detailed description of the check result.
        fix_hint: Suggested fix for failing checks.
        lines: Extra detail lines shown under the check.
    """

    name: str
    status: CheckStatus
    detail: str
    fix_hint: Optional[str] = None
    lines: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: Dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "detail": self.detail,
        }
        if self.fix_hint:
            result["fix_hint"] = self.fix_hint
        if self.lines:
            result["lines"] = list(self.lines)
        return result

    @property
    def icon(self) -> str:
        """Get status icon for display."""
        if self.status == CheckStatus.OK:
            return "✅"
        elif self.status == CheckStatus.WARNING:
            return "⚠️"
        else:
            return "❌"


@dataclass
class DiagnosticsReport:
    """Complete self-check report."""

    checks: List[CheckResult] = field(default_factory=list)

    @property
    def ok_count(self) -> int:
        return sum(1 for c in self.checks if c.status == CheckStatus.OK)

    @property
    def warning_count(self) -> int:
        return sum(1 for c in self.checks if c.status == CheckStatus.WARNING)

    @property
    def error_count(self) -> int:
        return sum(1 for c in self.checks if c.status == CheckStatus.ERROR)

    @property
    def is_healthy(self) -> bool:
        """True if no errors."""
        return self.error_count == 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "healthy": self.is_healthy,
            "summary": {
                "ok": self.ok_count,
                "warnings": self.warning_count,
                "errors": self.error_count,
            },
            "checks": [c.to_dict() for c in self.checks],
        }

    def format_text(self, verbose: bool = False) -> str:
        """Format as human-readable text."""
        return render("diagnostics.txt.j2", report=self, verbose=verbose)


def check_python_version() -> CheckResult:
    """Check if the running Python meets the minimum version."""
    current = sys.version_info[:2]
    required = ".".join(map(str, REQUIRED_PYTHON))
    current_str = ".".join(map(str, current))

    if current >= REQUIRED_PYTHON:
        return CheckResult(
            name="Python Version",
            status=CheckStatus.OK,
            detail=f"Python {current_str} (requires >={required})",
        )
    return CheckResult(
        name="Python Version",
        status=CheckStatus.ERROR,
        detail=f"Python {current_str} is below required {required}",
        fix_hint=f"Upgrade to Python {required} or later",
    )


def check_dependencies() -> List[CheckResult]:
    """
    Check if required dependencies are importable.

    Returns:
        List of CheckResults for each dependency.
    """
    from importlib import import_module
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as get_version

    results = []

    # (import name, distribution name, description)
    dependencies = [
        ("json5", "json5", "JSON5 object literal parser"),
        ("jinja2", "Jinja2", "Jinja2 templating engine"),
        ("requests", "requests", "HTTP client"),
        ("dotenv", "python-dotenv", ".env file loader"),
    ]

    for module_name, dist_name, description in dependencies:
        try:
            import_module(module_name)
        except ImportError:
            results.append(
                CheckResult(
                    name=f"Dependency: {dist_name}",
                    status=CheckStatus.ERROR,
                    detail=f"{description} is not installed",
                    fix_hint=f"pip install {dist_name}",
                )
            )
            continue

        try:
            version = get_version(dist_name)
        except PackageNotFoundError:
            version = "unknown"
        results.append(
            CheckResult(
                name=f"Dependency: {dist_name}",
                status=CheckStatus.OK,
                detail=f"{description} v{version}",
            )
        )

    return results


def check_source_file(
    source_path: Path,
    identifier: str = DEFAULT_IDENTIFIER,
    base_language: str = "en",
) -> Tuple[CheckResult, Optional[LanguageSet]]:
    """
    Check that the source file holds a parseable translations object.

    Returns:
        The CheckResult and the parsed LanguageSet (None on failure).
    """
    try:
        language_set = load_language_set(source_path, identifier, base_language)
    except ConfigurationError as e:
        return (
            CheckResult(
                name="Source File",
                status=CheckStatus.ERROR,
                detail=e.message,
                fix_hint="Pass the localization file with --file or set [paths] source",
            ),
            None,
        )
    except ParseError as e:
        return (
            CheckResult(
                name="Source File",
                status=CheckStatus.ERROR,
                detail=f"{source_path}: {e.message}",
                fix_hint=f"The file must declare exactly one 'const {identifier} = {{ ... }}' object",
            ),
            None,
        )

    return (
        CheckResult(
            name="Source File",
            status=CheckStatus.OK,
            detail=f"Successfully parsed {len(language_set)} languages",
            lines=[f"Languages found: {', '.join(language_set)}"],
        ),
        language_set,
    )


def check_missing_keys(language_set: LanguageSet, base_language: str = "en") -> CheckResult:
    """Report which languages are missing keys, previewing the first few."""
    missing_keys = find_missing_keys(language_set, base_language)

    if not missing_keys:
        return CheckResult(
            name="Missing Keys",
            status=CheckStatus.OK,
            detail="No missing keys found - all languages are up to date!",
        )

    lines = []
    for lang, keys in missing_keys.items():
        lines.append(f"- {lang}: {len(keys)} missing keys")
        lines.extend(f"  * {key}" for key in keys[:PREVIEW_LIMIT])
        if len(keys) > PREVIEW_LIMIT:
            lines.append(f"  * ... and {len(keys) - PREVIEW_LIMIT} more")

    return CheckResult(
        name="Missing Keys",
        status=CheckStatus.OK,
        detail=f"Found missing keys in {len(missing_keys)} languages",
        fix_hint="Run 'i18n-sync translate' to fill them",
        lines=lines,
    )


def check_language_codes(
    language_set: LanguageSet,
    base_language: str,
    language_codes: Dict[str, str],
) -> CheckResult:
    """Warn about languages the translation service has no code for."""
    unmapped = [
        lang for lang in language_set
        if lang != base_language and not language_codes.get(lang)
    ]

    if unmapped:
        return CheckResult(
            name="Language Codes",
            status=CheckStatus.WARNING,
            detail=f"No translation service code for: {', '.join(unmapped)}",
            fix_hint="Add them under [translate.language_codes]; until then they get [XX] placeholders",
        )
    return CheckResult(
        name="Language Codes",
        status=CheckStatus.OK,
        detail="Every language has a translation service code",
    )


def check_credentials(config: Optional[TranslateConfig] = None) -> CheckResult:
    """Check that credentials are available, without using them."""
    try:
        credentials = load_credentials(config)
    except CredentialsError as e:
        return CheckResult(
            name="Credentials",
            status=CheckStatus.WARNING,
            detail=e.message,
            fix_hint="Set GOOGLE_TRANSLATE_PROJECT_ID and GOOGLE_TRANSLATE_KEY (or add them to .env)",
        )
    return CheckResult(
        name="Credentials",
        status=CheckStatus.OK,
        detail=f"Project {credentials.project_id}; API key set",
        fix_hint="Actual translation service access is only verified by 'translate'",
    )


def run_checks(
    source_path: Path,
    identifier: str = DEFAULT_IDENTIFIER,
    config: Optional[TranslateConfig] = None,
) -> DiagnosticsReport:
    """
    Run all self-checks.

    Args:
        source_path: The localization file to inspect.
        identifier: Name of the declared translations object.
        config: Translation settings (base language, service codes).

    Returns:
        DiagnosticsReport with all check results.
    """
    if config is None:
        config = TranslateConfig()

    report = DiagnosticsReport()
    report.checks.append(check_python_version())
    report.checks.extend(check_dependencies())

    source_check, language_set = check_source_file(
        source_path, identifier, config.base_language
    )
    report.checks.append(source_check)

    if language_set is not None:
        report.checks.append(check_missing_keys(language_set, config.base_language))
        report.checks.append(
            check_language_codes(language_set, config.base_language, config.language_codes)
        )

    report.checks.append(check_credentials(config))
    return report
