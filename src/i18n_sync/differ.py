"""
Key-tree diffing.

Computes flattened dotted key paths of localization trees and the paths a
language is missing relative to the base language.
"""

import logging
from typing import Dict, List

from .languages_config import DEFAULT_BASE_LANGUAGE
from .tree import LanguageSet, LocalizationTree, iter_leaves

logger = logging.getLogger(__name__)

MissingKeySet = Dict[str, List[str]]


def flatten_keys(tree: LocalizationTree) -> List[str]:
    """
    Return every leaf path of ``tree`` as a dotted string.

    Order follows the tree's own key order, depth-first; it is not sorted.

    Example:
        >>> flatten_keys({"a": {"b": "Hello", "c": "World"}, "d": ["x"]})
        ['a.b', 'a.c', 'd']
    """
    return [path for path, _ in iter_leaves(tree)]


def diff_missing(base_tree: LocalizationTree, other_tree: LocalizationTree) -> List[str]:
    """
    Return the leaf paths of ``base_tree`` that ``other_tree`` lacks.

    A path counts as present only if it is a leaf path in ``other_tree`` too,
    so a leaf in one tree and a subtree in the other at the same path is
    reported as missing. Result order follows ``flatten_keys(base_tree)``.
    """
    present = set(flatten_keys(other_tree))
    return [path for path in flatten_keys(base_tree) if path not in present]


def find_missing_keys(
    language_set: LanguageSet,
    base_language: str = DEFAULT_BASE_LANGUAGE,
) -> MissingKeySet:
    """
    Diff every non-base language against the base language.

    Languages with nothing missing are left out of the result.

    Raises:
        KeyError: If ``base_language`` is not in ``language_set``.
    """
    base_tree = language_set[base_language]
    missing_keys: MissingKeySet = {}

    for lang, tree in language_set.items():
        if lang == base_language:
            continue
        missing = diff_missing(base_tree, tree)
        if missing:
            missing_keys[lang] = missing
            logger.debug(f"{lang}: {len(missing)} missing key(s)")

    return missing_keys
