"""
Sync engine for i18n-sync.

Fills the keys each language is missing relative to the base language:

1. Diff the language against the base language
2. Skip the language if nothing is missing
3. For each missing path, in base order: read the base text, translate it,
   write the result into the language's tree, then pause for ``api_delay``

Base values that are not non-empty strings are skipped. A failed translation
arrives here as a marked placeholder from the client, so one bad key never
stops the run. Languages are processed one after another, keys one after
another; nothing runs concurrently.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from .differ import MissingKeySet, diff_missing
from .key_path import get_by_path, set_by_path
from .languages_config import DEFAULT_BASE_LANGUAGE, get_language_name
from .translator import TranslationClient, is_fallback
from .tree import LanguageSet

logger = logging.getLogger(__name__)


@dataclass
class KeyUpdate:
    """A single translated key written into a language tree."""

    path: str
    source: str
    value: str
    fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "source": self.source,
            "value": self.value,
            "fallback": self.fallback,
        }


@dataclass
class LanguageSyncResult:
    """Outcome of syncing one language."""

    lang: str
    missing: List[str] = field(default_factory=list)
    added: List[KeyUpdate] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def added_count(self) -> int:
        return len(self.added)

    @property
    def fallback_count(self) -> int:
        return sum(1 for update in self.added if update.fallback)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lang": self.lang,
            "missing": list(self.missing),
            "added": [update.to_dict() for update in self.added],
            "skipped": list(self.skipped),
            "added_count": self.added_count,
            "fallback_count": self.fallback_count,
        }


@dataclass
class SyncResult:
    """Outcome of a sync run over all languages."""

    language_set: LanguageSet
    languages: List[LanguageSyncResult] = field(default_factory=list)

    @property
    def total_added(self) -> int:
        return sum(result.added_count for result in self.languages)

    @property
    def total_fallbacks(self) -> int:
        return sum(result.fallback_count for result in self.languages)

    @property
    def changed(self) -> bool:
        return self.total_added > 0


def select_languages(
    language_set: LanguageSet,
    base_language: str = DEFAULT_BASE_LANGUAGE,
    languages: Optional[Sequence[str]] = None,
) -> List[str]:
    """
    Return the languages to sync, in processing order.

    Without a ``languages`` filter this is every non-base language of the
    set. With one, its order is kept; the base language and languages the
    set does not contain are skipped.
    """
    if languages is None:
        return [lang for lang in language_set if lang != base_language]

    targets = []
    for lang in languages:
        if lang == base_language or lang in targets:
            continue
        if lang not in language_set:
            logger.debug(f"Skipping {lang}: not present in translations")
            continue
        targets.append(lang)
    return targets


class SyncEngine:
    """
    Translate missing keys into each target language tree.

    Args:
        client: Translation client used for every missing key.
        base_language: Code of the authoritative language.
        api_delay: Seconds to pause after each translation.
        languages: Optional ordered subset of languages to process. When
            None, every non-base language of the LanguageSet is processed.
        sleep: Blocking wait function, replaceable in tests.
    """

    def __init__(
        self,
        client: TranslationClient,
        base_language: str = DEFAULT_BASE_LANGUAGE,
        api_delay: float = 0.1,
        languages: Optional[Sequence[str]] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.base_language = base_language
        self.api_delay = api_delay
        self.languages = list(languages) if languages is not None else None
        self._sleep = sleep

    def target_languages(self, language_set: LanguageSet) -> List[str]:
        """Return the languages this engine will process, in order."""
        return select_languages(language_set, self.base_language, self.languages)

    def sync_language(
        self,
        language_set: LanguageSet,
        lang: str,
        missing: Optional[List[str]] = None,
    ) -> LanguageSyncResult:
        """Fill the missing keys of a single language in place."""
        base_tree = language_set[self.base_language]
        tree = language_set[lang]
        if missing is None:
            missing = diff_missing(base_tree, tree)

        result = LanguageSyncResult(lang=lang, missing=list(missing))
        if not missing:
            return result

        logger.info(
            f"\n🔄 Adding {len(missing)} missing keys for {get_language_name(lang)}:"
        )

        for key_path in missing:
            source = get_by_path(base_tree, key_path)
            if not isinstance(source, str) or not source:
                result.skipped.append(key_path)
                continue

            value = self.client.translate(source, lang)
            set_by_path(tree, key_path, value)
            result.added.append(
                KeyUpdate(
                    path=key_path,
                    source=source,
                    value=value,
                    fallback=is_fallback(value, source, lang),
                )
            )
            logger.info(f'  ✅ {key_path}: "{source}" -> "{value}"')

            self._sleep(self.api_delay)

        return result

    def sync(
        self,
        language_set: LanguageSet,
        missing_keys: Optional[MissingKeySet] = None,
    ) -> SyncResult:
        """
        Fill missing keys in every target language.

        Args:
            language_set: Trees to update; mutated in place.
            missing_keys: Precomputed missing paths per language. Languages
                not listed are treated as complete. When None, each language
                is diffed here.

        Returns:
            SyncResult wrapping the same (now updated) LanguageSet.
        """
        sync_result = SyncResult(language_set=language_set)

        for lang in self.target_languages(language_set):
            missing = None if missing_keys is None else missing_keys.get(lang, [])
            lang_result = self.sync_language(language_set, lang, missing)
            if lang_result.missing:
                sync_result.languages.append(lang_result)

        return sync_result
