"""Text helpers for keyword matching and prompt formatting."""

from __future__ import annotations

import math
import re
from typing import Iterable, Iterator, List

_PUNCTUATION_RE = re.compile(r"[^a-zA-Z0-9_]")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")
_IDENTIFIER_SEPARATORS_RE = re.compile(r"[^A-Za-z0-9]+")
_CAMEL_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")

CHARS_PER_TOKEN = 4


def split_words(text: str) -> List[str]:
    """Split on whitespace and strip punctuation from every token."""
    words = []
    for raw in text.split():
        word = _PUNCTUATION_RE.sub("", raw)
        if word:
            words.append(word)
    return words


def normalize_keyword(word: str) -> str:
    """Lower-case and keep only ASCII letters and digits."""
    return _NON_ALNUM_RE.sub("", word.lower())


def split_identifier(name: str) -> List[str]:
    """Split an identifier or path into its constituent words.

    ``parse_config`` -> ``["parse", "config"]``,
    ``HttpRequestParser`` -> ``["Http", "Request", "Parser"]``,
    ``utils/file_utils.h`` -> ``["utils", "file", "utils", "h"]``.
    """
    parts: List[str] = []
    for chunk in _IDENTIFIER_SEPARATORS_RE.split(name):
        if chunk:
            parts.extend(_CAMEL_RE.findall(chunk))
    return parts


def unique(items: Iterable[str]) -> Iterator[str]:
    """Yield items once each, in first-seen order."""
    seen: set[str] = set()
    for item in items:
        if item not in seen:
            seen.add(item)
            yield item


def estimate_tokens(text: str) -> int:
    """Approximate token count as ``ceil(len / 4)``; not a real tokenizer."""
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def split_lines(text: str) -> List[str]:
    """Split on ``\\n`` (and ``\\r\\n``) only, so numbering matches compiler line numbers.

    Unlike ``str.splitlines`` this keeps form feeds and other Unicode line
    boundaries inside their line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def number_line(number: int, line: str) -> str:
    return f"{number} | {line}\n"


def number_lines(lines: Iterable[str], *, start: int = 1) -> str:
    """Prefix each line with its 1-based line number."""
    return "".join(number_line(index, line) for index, line in enumerate(lines, start=start))


def ensure_trailing_newline(text: str) -> str:
    if text and not text.endswith("\n"):
        return text + "\n"
    return text
