"""
Structural Scanner — grammar-free recovery of nested structure from text.

Pure, deterministic helpers shared by both IR builders. Nothing here knows
which contract format is being scanned.
"""

from __future__ import annotations

import re
from typing import NamedTuple

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


class Span(NamedTuple):
    """Half-open interior span: text[start:end] excludes both delimiters."""

    start: int
    end: int

    def slice(self, text: str) -> str:
        return text[self.start:self.end]


def extract_balanced(
    text: str, open_char: str, close_char: str, from_index: int = 0
) -> Span | None:
    """Return the span between the first `open_char` at or after `from_index`
    and its matching `close_char`.

    Returns None when there is no opener or the input is unbalanced.
    """
    start = text.find(open_char, from_index)
    if start == -1:
        return None

    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if ch == open_char:
            depth += 1
        elif ch == close_char:
            depth -= 1
            if depth == 0:
                return Span(start + 1, i)
    return None


def split_top_level(text: str, delimiter: str) -> list[str]:
    """Split on `delimiter` only where (), [] and {} are all at depth 0.

    Segments are trimmed and empty segments dropped.
    """
    depth = {opener: 0 for opener in _OPENERS}
    segments: list[str] = []
    current: list[str] = []

    for ch in text:
        if ch in _OPENERS:
            depth[ch] += 1
        elif ch in _CLOSERS:
            depth[_CLOSERS[ch]] -= 1

        if ch == delimiter and not any(depth.values()):
            segments.append("".join(current).strip())
            current = []
        else:
            current.append(ch)

    segments.append("".join(current).strip())
    return [s for s in segments if s]


def match_line_pattern(line: str, pattern: str | re.Pattern[str]) -> re.Match[str] | None:
    """Search `line` for `pattern`; a thin wrapper over `re.search`."""
    if isinstance(pattern, str):
        return re.search(pattern, line)
    return pattern.search(line)


def line_number_at(text: str, index: int) -> int:
    """1-based line number of the character at `index`."""
    return text.count("\n", 0, index) + 1


def column_at(text: str, index: int) -> int:
    """1-based column of the character at `index`."""
    return index - (text.rfind("\n", 0, index) + 1) + 1


def line_offsets(text: str) -> list[int]:
    """Start offset of every line in `text.split("\\n")`."""
    offsets = [0]
    pos = text.find("\n")
    while pos != -1:
        offsets.append(pos + 1)
        pos = text.find("\n", pos + 1)
    return offsets
