"""Text helpers: CSV line parsing, tokenising, normalisation and progress dots."""

from __future__ import annotations

import sys
import time
from collections.abc import MutableMapping
from typing import TextIO

from tiendainv.hashmap import DEFAULT_CAPACITY, HashMap

MAX_FIELDS = 128


def parse_csv_line(line: str, separator: str = ",") -> list[str]:
    """Split one CSV line into fields.

    Quoted fields may contain the separator and doubled quotes. The line is
    cut at the first line break, a trailing empty field is not reported, and
    at most ``MAX_FIELDS - 1`` fields are returned.
    """
    for line_break in ("\r", "\n"):
        cut = line.find(line_break)
        if cut != -1:
            line = line[:cut]
    fields: list[str] = []
    pos = 0
    length = len(line)
    while pos < length and len(fields) < MAX_FIELDS - 1:
        if line[pos] == '"':
            pos += 1
            chars: list[str] = []
            while pos < length:
                char = line[pos]
                if char == '"':
                    if line.startswith('""', pos):
                        chars.append('"')
                        pos += 2
                        continue
                    pos += 1
                    break
                chars.append(char)
                pos += 1
            if pos < length and line[pos] == separator:
                pos += 1
            fields.append("".join(chars))
        else:
            end = line.find(separator, pos)
            if end == -1:
                fields.append(line[pos:])
                pos = length
            else:
                fields.append(line[pos:end])
                pos = end + 1
    return fields


def split_string(text: str, delimiters: str) -> list[str]:
    """Split ``text`` on any of the ``delimiters`` characters.

    Empty tokens are dropped and spaces around each token are removed.
    """
    tokens: list[str] = []
    current: list[str] = []
    for char in text:
        if char in delimiters:
            if current:
                tokens.append("".join(current))
                current = []
        else:
            current.append(char)
    if current:
        tokens.append("".join(current))
    return [token.strip(" ") for token in tokens]


def normalize(text: str) -> str:
    """Trim surrounding whitespace and lower-case ``text``."""
    return text.strip().lower()


def add_co_occurrence(graph: MutableMapping, name_a: str, name_b: str) -> None:
    """Count one more joint purchase of ``name_b`` alongside ``name_a``."""
    if name_a not in graph:
        graph[name_a] = HashMap(DEFAULT_CAPACITY)
    relations = graph[name_a]
    relations[name_b] = relations.get(name_b, 0) + 1


def loading_dots(stream: TextIO | None = None, cycles: int = 3, delay: float = 0.5) -> None:
    """Draw three dots and erase them, ``cycles`` times."""
    out = sys.stdout if stream is None else stream
    for _ in range(cycles):
        for _ in range(3):
            out.write(".")
            out.flush()
            time.sleep(delay)
        for _ in range(3):
            out.write("\b \b")
            time.sleep(delay / 5)
            out.flush()