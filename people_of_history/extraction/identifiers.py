"""Identifier validation shared by relation extraction and person search."""

import re
from collections.abc import Iterable
from typing import Any

QID_RE = re.compile(r"Q[0-9]+")


def is_qid(value: Any) -> bool:
    """Check whether ``value`` is a Wikidata item identifier such as ``Q42``."""
    return isinstance(value, str) and QID_RE.fullmatch(value) is not None


def sanitize_ids(values: Iterable[Any]) -> list[str]:
    """Drop malformed identifiers and duplicates, keeping first-seen order.

    >>> sanitize_ids(["Q1", "Q2", "Q1", "bad", "Q2"])
    ['Q1', 'Q2']
    """
    seen: set[str] = set()
    result = []
    for value in values:
        if is_qid(value) and value not in seen:
            seen.add(value)
            result.append(value)
    return result
