"""Whitespace tokenizer shared by the pairs and settings parsers."""

from __future__ import annotations

import re
from collections.abc import Iterator

_TOKEN_RE = re.compile(r"\S+")


def iter_tokens(text: str) -> Iterator[tuple[str, int]]:
    """Yield each whitespace-separated token with its 1-based line number."""
    line = 1
    position = 0
    for match in _TOKEN_RE.finditer(text):
        line += text.count("\n", position, match.start())
        position = match.start()
        yield match.group(0), line
