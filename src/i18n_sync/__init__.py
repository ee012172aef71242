"""
i18n-sync - Fill missing localization keys with machine translation.

This package provides:
- Key-tree diffing between a base language and every other language
- Dotted-path access into nested translation trees
- A retrying translation client with visibly marked fallbacks
- Safe loading, backup and in-place rewriting of the translations file
"""

__version__ = "1.0.0"
__author__ = "i18n-sync Contributors"

# Tree diffing and path access
from .differ import diff_missing, find_missing_keys, flatten_keys

# Persistence
from .io import create_backup, load_language_set, save_language_set
from .key_path import get_by_path, set_by_path

# Sync
from .sync_engine import SyncEngine, SyncResult
from .translator import TranslationClient, TranslationService, fallback_text

__all__ = [
    # Tree diffing and path access
    "flatten_keys",
    "diff_missing",
    "find_missing_keys",
    "get_by_path",
    "set_by_path",
    # Persistence
    "load_language_set",
    "save_language_set",
    "create_backup",
    # Sync
    "SyncEngine",
    "SyncResult",
    "TranslationClient",
    "TranslationService",
    "fallback_text",
    # Version
    "__version__",
]
