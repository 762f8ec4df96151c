"""Helpers for reading Wikidata statement lists.

Claims arrive as ``{property_id: [statement, ...]}`` where each statement keeps
its value under ``mainsnak.datavalue.value``. Statements with "no value" or
"unknown value" snaks have no ``datavalue`` and are skipped.
"""

from collections.abc import Iterator
from typing import Any


def statement_values(claims: dict[str, Any] | None, prop: str) -> Iterator[Any]:
    """Yield the data values of every statement for ``prop``, in order."""
    statements = (claims or {}).get(prop)
    if not isinstance(statements, list):
        return
    for statement in statements:
        if not isinstance(statement, dict):
            continue
        datavalue = (statement.get("mainsnak") or {}).get("datavalue")
        if isinstance(datavalue, dict) and "value" in datavalue:
            yield datavalue["value"]


def entity_ids(claims: dict[str, Any] | None, prop: str) -> list[str]:
    """Return the target ids of item-valued statements for ``prop``.

    Ids are returned as found; callers sanitize them.
    """
    ids = []
    for value in statement_values(claims, prop):
        if isinstance(value, dict) and value.get("id"):
            ids.append(value["id"])
    return ids


def has_target(claims: dict[str, Any] | None, prop: str, target_id: str) -> bool:
    """Check whether any ``prop`` statement points exactly at ``target_id``."""
    return target_id in entity_ids(claims, prop)
