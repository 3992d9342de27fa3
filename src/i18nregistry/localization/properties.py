"""Reader for Java-style .properties bundle sources.

Bundle files follow the java.util.Properties text format:

    # comment            ! also a comment
    key = value          key: value          key value
    long.text = first part \\
                second part
    escaped = tab\\tnewline\\nunicode\\u00e9

Rules implemented:
- Natural lines end in \\n, \\r or \\r\\n. Leading blanks (space, tab,
  form feed) are ignored.
- Lines whose first non-blank character is '#' or '!' are comments.
- A line ending in an odd number of backslashes continues on the next line;
  the continuation's leading blanks are dropped.
- The key ends at the first unescaped '=', ':' or blank. Blanks around the
  separator are skipped; trailing blanks of the value are kept.
- Escapes: \\t \\n \\r \\f \\uXXXX; any other escaped character stands for
  itself. UTF-16 surrogate pairs written as two \\u escapes are combined.
- A repeated key replaces the earlier value.

Sources are decoded as UTF-8, falling back to ISO-8859-1 when the bytes are
not valid UTF-8 (the same rule the JVM applies to resource bundles).

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from i18nregistry.constants import MAX_PROPERTIES_SIZE
from i18nregistry.diagnostics import ErrorTemplate

if TYPE_CHECKING:
    from collections.abc import Iterator

__all__ = [
    "decode_properties",
    "parse_properties",
]

logger = logging.getLogger(__name__)

_NEWLINE = re.compile(r"\r\n|\r|\n")
_BLANKS = " \t\f"
_SIMPLE_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _logical_lines(source: str) -> Iterator[tuple[int, str]]:
    """Yield (first line number, logical line) pairs with continuations joined."""
    pending: list[str] = []
    start = 0

    for number, raw in enumerate(_NEWLINE.split(source), start=1):
        line = raw.lstrip(_BLANKS)
        if not pending:
            if not line or line[0] in "#!":
                continue
            start = number

        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending.append(line[:-1])
            continue

        pending.append(line)
        yield start, "".join(pending)
        pending = []

    if pending:
        yield start, "".join(pending)


def _split_entry(line: str) -> tuple[str, str]:
    """Split a logical line into raw (still escaped) key and value."""
    index = 0
    length = len(line)
    while index < length:
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in "=:" or char in _BLANKS:
            break
        index += 1

    key = line[:index]
    if index < length and line[index] in "=:":
        return key, line[index + 1 :].lstrip(_BLANKS)

    rest = line[index:].lstrip(_BLANKS)
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(_BLANKS)
    return key, rest


def _unescape(text: str, line_number: int) -> str:
    if "\\" not in text:
        return text

    out: list[str] = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char != "\\":
            out.append(char)
            index += 1
            continue

        if index + 1 >= length:
            # Dangling backslash at end of input
            break
        escaped = text[index + 1]
        if escaped == "u":
            digits = text[index + 2 : index + 6]
            if len(digits) != 4 or not set(digits) <= _HEX_DIGITS:
                msg = f"Malformed \\uxxxx encoding on line {line_number}: {text[index:index + 6]!r}"
                raise ValueError(msg)
            out.append(chr(int(digits, 16)))
            index += 6
            continue
        out.append(_SIMPLE_ESCAPES.get(escaped, escaped))
        index += 2

    result = "".join(out)
    # Supplementary characters written as two \u escapes arrive as surrogates
    if any("\ud800" <= c <= "\udfff" for c in result):
        result = result.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")
    return result


def parse_properties(source: str) -> dict[str, str]:
    """Parse .properties text into a key -> value dict.

    Args:
        source: Decoded file content

    Returns:
        Entries in file order; later duplicates replace earlier ones

    Raises:
        ValueError: On a malformed \\uXXXX escape

    Example:
        >>> parse_properties("greeting = Hello %s!!!\\n# note\\nempty=")
        {'greeting': 'Hello %s!!!', 'empty': ''}
    """
    entries: dict[str, str] = {}
    for line_number, line in _logical_lines(source):
        raw_key, raw_value = _split_entry(line)
        key = _unescape(raw_key, line_number)
        entries[key] = _unescape(raw_value, line_number)
    return entries


def decode_properties(data: bytes, *, source_path: str = "<bytes>") -> dict[str, str]:
    """Decode and parse raw .properties bytes.

    Args:
        data: File content
        source_path: Human-readable location for messages and logs

    Returns:
        Parsed entries

    Raises:
        ValueError: If data exceeds MAX_PROPERTIES_SIZE or is malformed
    """
    if len(data) > MAX_PROPERTIES_SIZE:
        diagnostic = ErrorTemplate.source_too_large(source_path, len(data), MAX_PROPERTIES_SIZE)
        raise ValueError(diagnostic.message)

    try:
        text = data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("%s is not valid UTF-8, decoding as ISO-8859-1", source_path)
        text = data.decode("iso-8859-1")

    entries = parse_properties(text)
    logger.debug("Parsed %s: %d entries", source_path, len(entries))
    return entries
