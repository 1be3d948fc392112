# src/regparse_kit/streaming/scanner.py

"""Brace/string-aware scanning over partial JSON text.

Every place that needs to know where a JSON object starts or ends goes
through ``iter_structure``. It skips string literals (honouring backslash
escapes) and reports only the structural characters that matter for
boundary detection.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass

_STRUCTURAL = re.compile(r'[{}\[\]"]')
_STRING_SPECIAL = re.compile(r'["\\]')
_WHITESPACE = " \t\r\n"


@dataclass(frozen=True)
class ObjectSpan:
    """A candidate object in a text buffer.

    ``end`` is exclusive. An open span runs to the end of the buffer.
    """

    start: int
    end: int
    closed: bool

    def slice(self, text: str) -> str:
        return text[self.start : self.end]


def iter_structure(text: str, start: int = 0) -> Iterator[tuple[int, str]]:
    """Yield ``(index, char)`` for braces, brackets and string quotes.

    Characters inside string literals are never yielded; the opening and
    closing quote of each literal are. A backslash inside a string
    suppresses the character right after it. An unterminated string yields
    only its opening quote, so an odd number of yielded quotes means the
    text ends inside a string.
    """
    pos = start
    length = len(text)
    while pos < length:
        match = _STRUCTURAL.search(text, pos)
        if match is None:
            return
        index = match.start()
        char = text[index]
        yield index, char
        pos = index + 1
        if char != '"':
            continue

        while True:
            special = _STRING_SPECIAL.search(text, pos)
            if special is None:
                return
            found = special.start()
            if text[found] == "\\":
                pos = found + 2
                continue
            yield found, '"'
            pos = found + 1
            break


def iter_object_spans(text: str, start: int = 0) -> Iterator[ObjectSpan]:
    """Yield the depth-zero objects found from ``start`` onwards.

    Scanning stops at a ``]`` or ``}`` met at depth zero, i.e. when the
    enclosing array or object closes. If the buffer ends while an object is
    still open, a final span with ``closed=False`` is yielded.
    """
    depth = 0
    object_start = -1
    for index, char in iter_structure(text, start):
        if char == "{":
            if depth == 0:
                object_start = index
            depth += 1
        elif char == "}":
            if depth == 0:
                return
            depth -= 1
            if depth == 0:
                yield ObjectSpan(start=object_start, end=index + 1, closed=True)
                object_start = -1
        elif char == "]" and depth == 0:
            return

    if depth > 0:
        yield ObjectSpan(start=object_start, end=len(text), closed=False)


def first_object_span(text: str, start: int = 0) -> ObjectSpan | None:
    return next(iter_object_spans(text, start), None)


def find_root_key_value(text: str, key: str) -> int | None:
    """Return the index where the value of a root-level ``key`` begins.

    Only keys that sit directly inside the outermost object count; a key of
    the same name nested deeper, or a string value equal to ``key``, is
    ignored. Returns None until the key, its colon and the first character
    of its value have all arrived.
    """
    nesting = 0
    string_start = -1
    for index, char in iter_structure(text):
        if char == '"':
            if string_start < 0:
                string_start = index
                continue
            opened, string_start = string_start, -1
            if nesting != 1 or text[opened + 1 : index] != key:
                continue
            colon = _skip_whitespace(text, index + 1)
            if colon >= len(text) or text[colon] != ":":
                continue
            value = _skip_whitespace(text, colon + 1)
            return value if value < len(text) else None
        elif char in "{[":
            nesting += 1
        else:
            nesting = max(0, nesting - 1)
    return None


def count_quotes(text: str) -> int:
    """Count unescaped double quotes that open or close string literals."""
    return sum(1 for _, char in iter_structure(text) if char == '"')


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _WHITESPACE:
        pos += 1
    return pos
