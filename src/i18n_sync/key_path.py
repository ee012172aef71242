"""
Dotted-path access into localization trees.

Path format: keys from root to leaf joined by ``.``, e.g. ``"nav.home.title"``.
"""

from typing import Any, List, Optional

from .tree import LocalizationTree

PATH_SEPARATOR = "."


def split_path(dotted_path: str) -> List[str]:
    """Split a dotted path into its keys."""
    return dotted_path.split(PATH_SEPARATOR)


def get_by_path(tree: LocalizationTree, dotted_path: str) -> Optional[Any]:
    """
    Return the value stored at ``dotted_path``, or None.

    Never raises: a missing key or a non-mapping value along the way
    yields None.
    """
    current: Any = tree
    for key in split_path(dotted_path):
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def set_by_path(tree: LocalizationTree, dotted_path: str, value: Any) -> None:
    """
    Store ``value`` at ``dotted_path``, creating intermediate mappings.

    Missing intermediate keys get empty mappings; an intermediate that holds
    a non-mapping value is replaced by one. The final key is overwritten
    whatever it held.
    """
    *parents, last = split_path(dotted_path)
    current = tree
    for key in parents:
        child = current.get(key)
        if not isinstance(child, dict):
            child = {}
            current[key] = child
        current = child
    current[last] = value
