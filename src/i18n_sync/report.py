"""
Sync report generation for i18n-sync.

Captures what a ``translate`` run found and changed:
- Missing keys per language, with the base text of each
- Keys added per language and how many fell back to a placeholder
- Backup path, timings and environment summary

Reports render to console text through Jinja2 templates and serialize to
JSON for ``--report``.
"""

import json
import platform
import sys
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .differ import MissingKeySet
from .jinja_env import render
from .key_path import get_by_path
from .sync_engine import LanguageSyncResult, SyncResult
from .tree import LanguageSet


def collect_base_values(
    language_set: LanguageSet,
    missing_keys: MissingKeySet,
    base_language: str,
) -> Dict[str, Any]:
    """Map every missing path to its value in the base language."""
    base_tree = language_set[base_language]
    values: Dict[str, Any] = {}
    for keys in missing_keys.values():
        for key in keys:
            if key not in values:
                values[key] = get_by_path(base_tree, key)
    return values


@dataclass
class SyncReport:
    """
    Report of a single sync run.

    Attributes:
        source_path: The localization file that was processed.
        base_language: Code of the authoritative language.
        missing_keys: Paths missing per language before the run.
        base_values: Base text for each missing path.
        languages: Per-language results (empty until the run finishes).
        backup_path: Backup written before the file was modified, if any.
        dry_run: True if no translation was requested.
    """

    source_path: str
    base_language: str
    missing_keys: MissingKeySet = field(default_factory=dict)
    base_values: Dict[str, Any] = field(default_factory=dict)
    languages: List[LanguageSyncResult] = field(default_factory=list)
    backup_path: Optional[str] = None
    dry_run: bool = False
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    tool_version: str = __version__
    datetime_started: Optional[str] = None
    datetime_finished: Optional[str] = None
    duration_seconds: Optional[float] = None
    platform_info: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.platform_info:
            self.platform_info = {
                "system": platform.system(),
                "python_version": sys.version.split()[0],
            }

    @property
    def missing_count(self) -> int:
        return sum(len(keys) for keys in self.missing_keys.values())

    @property
    def added_count(self) -> int:
        return sum(result.added_count for result in self.languages)

    @property
    def fallback_count(self) -> int:
        return sum(result.fallback_count for result in self.languages)

    def start(self) -> None:
        """Mark the run start time."""
        self.datetime_started = datetime.now().isoformat()

    def finish(self, result: Optional[SyncResult] = None) -> None:
        """Record the sync result and the end time."""
        if result is not None:
            self.languages = list(result.languages)
        self.datetime_finished = datetime.now().isoformat()
        if self.datetime_started:
            started = datetime.fromisoformat(self.datetime_started)
            finished = datetime.fromisoformat(self.datetime_finished)
            self.duration_seconds = (finished - started).total_seconds()

    def format_missing(self) -> str:
        """Console overview of the missing keys."""
        return render(
            "missing_keys.txt.j2",
            missing_keys=self.missing_keys,
            base_values=self.base_values,
        )

    def format_summary(self) -> str:
        """Console summary of what the run changed."""
        return render(
            "summary.txt.j2",
            dry_run=self.dry_run,
            source_path=self.source_path,
            backup_path=self.backup_path,
            languages=self.languages,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary representation."""
        return {
            "run_id": self.run_id,
            "tool_version": self.tool_version,
            "datetime_started": self.datetime_started,
            "datetime_finished": self.datetime_finished,
            "duration_seconds": self.duration_seconds,
            "platform": self.platform_info,
            "source_path": self.source_path,
            "base_language": self.base_language,
            "backup_path": self.backup_path,
            "dry_run": self.dry_run,
            "summary": {
                "missing": self.missing_count,
                "added": self.added_count,
                "fallbacks": self.fallback_count,
            },
            "missing_keys": {lang: list(keys) for lang, keys in self.missing_keys.items()},
            "languages": [result.to_dict() for result in self.languages],
        }

    def to_json(self, pretty: bool = True) -> str:
        """Convert report to JSON string."""
        indent = 2 if pretty else None
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def write_sync_report(report: SyncReport, report_path: Path) -> Path:
    """
    Write a sync report as JSON.

    Returns:
        The path written.
    """
    report_path.parent.mkdir(parents=True, exist_ok=True)
    with open(report_path, "w", encoding="utf-8") as f:
        f.write(report.to_json())
        f.write("\n")
    return report_path
