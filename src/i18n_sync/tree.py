"""
Tree model for localization data.

A localization tree is stored as a plain insertion-ordered ``dict``. When a
value is visited it is classified into one of two variants:

- ``Node``: a nested mapping whose children are visited in turn
- ``Leaf``: anything else (strings, but also lists, numbers and ``None``,
  which are opaque and never recursed into)
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterator, Tuple, Union

LocalizationTree = Dict[str, Any]
LanguageSet = Dict[str, LocalizationTree]


@dataclass(frozen=True)
class Leaf:
    """A terminal value in a localization tree."""

    value: Any

    @property
    def is_text(self) -> bool:
        return isinstance(self.value, str)


@dataclass(frozen=True)
class Node:
    """A nested mapping in a localization tree."""

    children: LocalizationTree

    def items(self) -> Iterator[Tuple[str, "Entry"]]:
        for key, value in self.children.items():
            yield key, classify(value)


Entry = Union[Leaf, Node]


def classify(value: Any) -> Entry:
    """Wrap a raw tree value in its variant."""
    if isinstance(value, dict):
        return Node(value)
    return Leaf(value)


def join_path(prefix: str, key: str) -> str:
    """Extend a dotted path by one key."""
    return f"{prefix}.{key}" if prefix else key


def iter_leaves(tree: LocalizationTree, prefix: str = "") -> Iterator[Tuple[str, Leaf]]:
    """
    Yield ``(dotted_path, leaf)`` pairs depth-first in insertion order.

    An empty nested mapping yields nothing.
    """
    for key, entry in Node(tree).items():
        path = join_path(prefix, key)
        if isinstance(entry, Node):
            yield from iter_leaves(entry.children, path)
        elif isinstance(entry, Leaf):
            yield path, entry
        else:  # pragma: no cover
            raise TypeError(f"Unknown tree entry at {path}: {entry!r}")
