"""
I/O utilities for i18n-sync.

Provides functions for:
- Locating the translations object literal inside a source file
- Parsing it into a LanguageSet without executing any code
- Backing up the source file before it is modified
- Writing an updated LanguageSet back in place

The source file is expected to contain exactly one declaration such as::

    export const translations: Translations = {
        en: { nav: { home: "Home" } },
        es: { nav: { home: "Inicio" } },
    };

Only the ``{ ... }`` literal is ever rewritten; every other byte of the file
is preserved.
"""

import json
import logging
import re
import shutil
from pathlib import Path
from typing import Tuple, Union

import json5

from .errors import ConfigurationError, ParseError
from .languages_config import DEFAULT_BASE_LANGUAGE
from .tree import LanguageSet

logger = logging.getLogger(__name__)

DEFAULT_IDENTIFIER = "translations"
BACKUP_SUFFIX = ".backup"
JSON_INDENT = 4

PathLike = Union[str, Path]


def _declaration_pattern(identifier: str) -> "re.Pattern[str]":
    # const|let|var <identifier> [: Type] =
    return re.compile(
        r"\b(?:const|let|var)\s+" + re.escape(identifier) + r"\b\s*(?::[^=;]*)?=\s*"
    )


def _skip_string(content: str, pos: int) -> int:
    """Return the index just past the string literal starting at ``pos``."""
    quote = content[pos]
    pos += 1
    while pos < len(content):
        char = content[pos]
        if char == "\\":
            pos += 2
            continue
        if char == quote:
            return pos + 1
        if char == "\n" and quote != "`":
            break
        pos += 1
    raise ParseError(f"Unterminated string literal starting at offset {pos}")


def find_literal_end(content: str, start: int) -> int:
    """
    Return the index just past the ``}`` matching the ``{`` at ``start``.

    Braces inside string literals and comments are ignored.

    Raises:
        ParseError: If the literal is not terminated.
    """
    depth = 0
    pos = start
    length = len(content)

    while pos < length:
        char = content[pos]
        if char in "\"'`":
            pos = _skip_string(content, pos)
            continue
        if content.startswith("//", pos):
            newline = content.find("\n", pos)
            pos = length if newline == -1 else newline + 1
            continue
        if content.startswith("/*", pos):
            close = content.find("*/", pos + 2)
            if close == -1:
                raise ParseError("Unterminated block comment in translations object")
            pos = close + 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return pos + 1
        pos += 1

    raise ParseError("Could not find the end of the translations object")


def _blank_comments_and_strings(content: str) -> str:
    """
    Return ``content`` with comments and string literals replaced by spaces.

    Offsets are unchanged, so matches found in the result index the original.
    A quote that never closes on its line (a regex literal such as ``/'/``)
    blanks only the rest of that line.
    """
    chars = list(content)
    pos = 0
    length = len(content)

    while pos < length:
        if content[pos] in "\"'`":
            try:
                end = _skip_string(content, pos)
            except ParseError:
                end = content.find("\n", pos)
        elif content.startswith("//", pos):
            end = content.find("\n", pos)
        elif content.startswith("/*", pos):
            end = content.find("*/", pos + 2)
            end = end + 2 if end != -1 else -1
        else:
            pos += 1
            continue

        if end == -1:
            end = length
        chars[pos:end] = " " * (end - pos)
        pos = end

    return "".join(chars)


def locate_declaration(content: str, identifier: str = DEFAULT_IDENTIFIER) -> Tuple[int, int]:
    """
    Find the object literal assigned to ``identifier``.

    Declarations inside comments and string literals are ignored. A type
    annotation may be any type without ``=`` or ``;`` in it, so arrow
    function types such as ``Record<string, () => string>`` are not
    recognised.

    Returns:
        ``(start, end)`` offsets of the literal, braces included.

    Raises:
        ParseError: If there is no such declaration, more than one, or the
            assigned value is not an object literal.
    """
    code = _blank_comments_and_strings(content)
    matches = list(_declaration_pattern(identifier).finditer(code))
    if not matches:
        raise ParseError(f"Could not find {identifier} object in file")
    if len(matches) > 1:
        raise ParseError(
            f"Found {len(matches)} declarations of {identifier}; expected exactly one"
        )

    start = matches[0].end()
    if start >= len(content) or content[start] != "{":
        raise ParseError(f"{identifier} is not assigned an object literal")

    return start, find_literal_end(content, start)


def parse_language_set(
    literal: str,
    base_language: str = DEFAULT_BASE_LANGUAGE,
) -> LanguageSet:
    """
    Parse an object literal into a LanguageSet.

    The literal is read with json5, which accepts JavaScript object syntax
    (unquoted keys, single quotes, trailing commas, comments) and nothing
    executable.

    Raises:
        ParseError: On syntax errors, a non-mapping language entry, or a
            missing base language.
    """
    try:
        data = json5.loads(literal)
    except ValueError as e:
        raise ParseError(f"Could not parse translations object: {e}")

    if not isinstance(data, dict):
        raise ParseError("Translations object is not a mapping of languages")

    for lang, tree in data.items():
        if not isinstance(tree, dict):
            raise ParseError(f"Translations for '{lang}' are not an object")

    if base_language not in data:
        raise ParseError(f"Base language '{base_language}' not found in translations object")

    return data


def read_source(source_path: PathLike) -> str:
    """Read the source file, keeping its line endings untouched."""
    source_path = Path(source_path)
    if not source_path.is_file():
        raise ConfigurationError(f"Source file not found: {source_path}")
    with open(source_path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def load_language_set(
    source_path: PathLike,
    identifier: str = DEFAULT_IDENTIFIER,
    base_language: str = DEFAULT_BASE_LANGUAGE,
) -> LanguageSet:
    """
    Load the LanguageSet declared in ``source_path``.

    Raises:
        ConfigurationError: If the file does not exist.
        ParseError: If the declaration cannot be located or parsed.
    """
    content = read_source(source_path)
    start, end = locate_declaration(content, identifier)
    language_set = parse_language_set(content[start:end], base_language)
    logger.debug(f"Loaded {len(language_set)} language(s) from {source_path}")
    return language_set


def get_backup_path(source_path: PathLike) -> Path:
    """Return ``<source>.backup`` next to the source file."""
    source_path = Path(source_path)
    return source_path.with_name(source_path.name + BACKUP_SUFFIX)


def create_backup(source_path: PathLike) -> Path:
    """
    Copy the source file byte-for-byte to its backup path.

    Returns:
        The backup path.
    """
    backup_path = get_backup_path(source_path)
    shutil.copyfile(source_path, backup_path)
    logger.info(f"Backup created: {backup_path}")
    return backup_path


def serialize_language_set(language_set: LanguageSet, newline: str = "\n") -> str:
    """Render a LanguageSet as an indented object literal."""
    text = json.dumps(language_set, indent=JSON_INDENT, ensure_ascii=False)
    if newline != "\n":
        text = text.replace("\n", newline)
    return text


def save_language_set(
    source_path: PathLike,
    language_set: LanguageSet,
    identifier: str = DEFAULT_IDENTIFIER,
) -> None:
    """
    Replace the translations literal in ``source_path`` with ``language_set``.

    Everything outside the literal, the declaration itself included, is
    written back unchanged. The literal uses the file's line ending style.

    Raises:
        ParseError: If the declaration can no longer be located.
    """
    content = read_source(source_path)
    start, end = locate_declaration(content, identifier)
    newline = "\r\n" if "\r\n" in content[start:end] else "\n"

    updated = content[:start] + serialize_language_set(language_set, newline) + content[end:]

    with open(source_path, "w", encoding="utf-8", newline="") as f:
        f.write(updated)
    logger.debug(f"Wrote {len(language_set)} language(s) to {source_path}")
