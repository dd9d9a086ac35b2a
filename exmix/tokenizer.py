"""
Balanced-Group Tokenizer
========================
Reads one brace-delimited TeX group starting at a cursor.

Option bodies may embed arbitrarily nested groups (``{\\frac{1}{2}}``),
so the scan keeps an explicit depth counter instead of matching patterns.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

OPEN = "{"
CLOSE = "}"
ESCAPE = "\\"


class BraceGroup(NamedTuple):
    """A balanced group and the cursor just past its closing brace."""
    text: str
    start: int
    end: int

    @property
    def inner(self) -> str:
        return self.text[1:-1]


def skip_whitespace(text: str, pos: int) -> int:
    """Advance ``pos`` past any whitespace; returns ``len(text)`` at most."""
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def read_group(text: str, pos: int) -> Optional[BraceGroup]:
    """
    Consume the balanced group opening at ``text[pos]``.

    Returns None when ``pos`` does not point at ``{`` or the group never
    closes. A backslash escapes the next character, so ``\\{`` and ``\\}``
    do not change the depth.
    """
    if pos >= len(text) or text[pos] != OPEN:
        return None

    depth = 0
    i = pos
    while i < len(text):
        ch = text[i]
        if ch == ESCAPE:
            i += 2
            continue
        if ch == OPEN:
            depth += 1
        elif ch == CLOSE:
            depth -= 1
            if depth == 0:
                return BraceGroup(text[pos:i + 1], pos, i + 1)
        i += 1

    return None
