# domain/pattern.py
"""
Regex pattern handling for match values.

Accepts delimited patterns with trailing modifiers (/^hel/i, #a+#, {b}x)
as well as bare patterns (^Hel).
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from domain.exceptions import InvalidPatternError

_BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}", "<": ">"}

_MODIFIER_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
    "u": 0,  # str patterns are unicode already
    "A": 0,  # anchored, handled in CompiledPattern
}


@dataclass(frozen=True)
class CompiledPattern:
    regex: "re.Pattern[str]"
    anchored: bool = False

    def search(self, text: str) -> bool:
        if self.anchored:
            return self.regex.match(text) is not None
        return self.regex.search(text) is not None


def compile_pattern(value: str) -> CompiledPattern:
    if not value:
        raise InvalidPatternError(value, "empty pattern")

    split = split_delimited(value)
    if split is None:
        body, modifiers = value, ""
    else:
        body, modifiers = split

    flags = 0
    for m in modifiers:
        if m not in _MODIFIER_FLAGS:
            raise InvalidPatternError(value, f"unknown modifier '{m}'")
        flags |= _MODIFIER_FLAGS[m]

    try:
        regex = re.compile(body, flags)
    except re.error as e:
        raise InvalidPatternError(value, str(e)) from e

    return CompiledPattern(regex=regex, anchored="A" in modifiers)


def split_delimited(value: str) -> Optional[Tuple[str, str]]:
    """
    Return (body, modifiers) when value is a delimited pattern, else None.
    """
    if len(value) < 2:
        return None

    opening = value[0]
    if opening.isalnum() or opening == "\\" or opening.isspace():
        return None

    closing = _BRACKET_PAIRS.get(opening, opening)
    end = _find_closing(value, opening, closing)
    if end is None:
        return None

    modifiers = value[end + 1 :]
    if modifiers and not modifiers.isalpha():
        return None

    return value[1:end], modifiers


def _find_closing(value: str, opening: str, closing: str) -> Optional[int]:
    depth = 1
    i = 1
    while i < len(value):
        c = value[i]
        if c == "\\":
            i += 2
            continue
        if opening != closing and c == opening:
            depth += 1
        elif c == closing:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None
