"""Quote-aware tokenizer for exported club CSV text."""

from __future__ import annotations

import logging
from typing import List, Sequence


logger = logging.getLogger(__name__)

BYTE_ORDER_MARK = "\ufeff"
CANDIDATE_DELIMITERS: Sequence[str] = (",", ";", "\t")


def strip_input(text: str) -> str:
    if text.startswith(BYTE_ORDER_MARK):
        text = text[len(BYTE_ORDER_MARK):]
    return text.strip()


def detect_delimiter(text: str, candidates: Sequence[str] = CANDIDATE_DELIMITERS) -> str:
    """Guess the delimiter from the unquoted characters of the header record."""

    counts = {candidate: 0 for candidate in candidates}
    in_quotes = False
    for char in strip_input(text):
        if char == '"':
            in_quotes = not in_quotes
        elif in_quotes:
            continue
        elif char in ("\r", "\n"):
            break
        elif char in counts:
            counts[char] += 1

    best = max(candidates, key=lambda candidate: counts[candidate])
    if counts[best] == 0 or counts[best] == counts.get(",", 0):
        return ","
    return best


def tokenize(text: str, delimiter: str = ",") -> List[List[str]]:
    """Split CSV text into rows of raw string fields.

    Fields are returned exactly as written apart from quote handling: a
    doubled quote inside a quoted section becomes one literal quote, and line
    breaks inside quotes are kept. ``\\r\\n`` and ``\\n`` both end a row.
    Empty or whitespace-only input yields no rows.
    """

    if len(delimiter) != 1 or delimiter in ('"', "\r", "\n"):
        raise ValueError(f"unsupported delimiter {delimiter!r}")

    text = strip_input(text)
    rows: List[List[str]] = []
    row: List[str] = []
    field: List[str] = []
    in_quotes = False
    row_started = False

    index = 0
    length = len(text)
    while index < length:
        char = text[index]

        if in_quotes:
            if char == '"':
                if index + 1 < length and text[index + 1] == '"':
                    field.append('"')
                    index += 2
                    continue
                in_quotes = False
            else:
                field.append(char)
            index += 1
            continue

        if char == '"':
            in_quotes = True
            row_started = True
        elif char == delimiter:
            row.append("".join(field))
            field = []
            row_started = True
        elif char == "\n" or (char == "\r" and index + 1 < length and text[index + 1] == "\n"):
            row.append("".join(field))
            rows.append(row)
            row, field = [], []
            row_started = False
            if char == "\r":
                index += 1
        else:
            field.append(char)
            row_started = True
        index += 1

    if in_quotes:
        logger.debug("Unterminated quoted field at end of input (row %s)", len(rows) + 1)
    if row_started or field or row:
        row.append("".join(field))
        rows.append(row)
    return rows


__all__ = [
    "BYTE_ORDER_MARK",
    "CANDIDATE_DELIMITERS",
    "detect_delimiter",
    "strip_input",
    "tokenize",
]
