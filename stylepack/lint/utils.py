"""Shared helpers for the rule checkers."""
import re
from typing import Iterator, Optional, Tuple

from stylepack.models import Position, Violation


def create_violation(
    rule: str,
    severity: str,
    message: str,
    text: Optional[str] = None,
    start: Optional[int] = None,
    end: Optional[int] = None,
    suggestion: Optional[str] = None,
    fixable: bool = False,
) -> Violation:
    position = Position(start=start, end=end) if start is not None and end is not None else None
    return Violation(
        rule=rule,
        severity=severity,
        message=message,
        text=text,
        position=position,
        suggestion=suggestion,
        fixable=fixable and suggestion is not None,
    )


def slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")


def word_pattern(term: str) -> re.Pattern:
    """Case-insensitive, word-boundary matcher for a literal term."""
    return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)


def match_case(source: str, replacement: str) -> str:
    """Carry the capitalization of the first letter of `source` over."""
    if not source or not replacement:
        return replacement
    if source.isupper() and len(source) > 1:
        return replacement.upper()
    if source[0].isupper():
        return replacement[0].upper() + replacement[1:]
    return replacement


def count_words(text: str) -> int:
    return len(text.split())


def segments(text: str, separator: re.Pattern) -> Iterator[Tuple[int, int, str]]:
    """Yield (start, end, chunk) for each non-blank piece between separators.

    Offsets index into `text` and exclude surrounding whitespace, so
    text[start:end] == chunk.
    """
    pos = 0
    for m in separator.finditer(text):
        yield from _trimmed(text, pos, m.start())
        pos = m.end()
    yield from _trimmed(text, pos, len(text))


def _trimmed(text: str, start: int, end: int) -> Iterator[Tuple[int, int, str]]:
    chunk = text[start:end]
    stripped = chunk.strip()
    if not stripped:
        return
    offset = start + (len(chunk) - len(chunk.lstrip()))
    yield offset, offset + len(stripped), stripped
