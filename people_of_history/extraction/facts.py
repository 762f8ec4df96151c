"""Biographical fact extraction from raw knowledge-base entities.

Wikidata dates are strings such as ``+1769-08-15T00:00:00Z`` with a separate
precision code (9 = year, 10 = month, 11 = day; 8 and below are decades,
centuries and millennia). Only year-or-finer dates are trusted: a date known
only to the century is skipped rather than approximated.
"""

import re
from collections.abc import Callable
from typing import Any
from urllib.parse import quote

from people_of_history.config import settings
from people_of_history.extraction.claims import statement_values
from people_of_history.schemas import BiographicalFacts

YEAR_PRECISION = 9

TIME_RE = re.compile(r"^([+-])(\d{4,})-")


def year_from_time(time: str | None) -> int | None:
    """Parse the signed year of a Wikidata time string.

    Args:
        time: Time string like ``-0100-07-12T00:00:00Z``

    Returns:
        Signed year (negative is BCE), or None if the string does not parse
    """
    if not isinstance(time, str):
        return None
    match = TIME_RE.match(time)
    if not match:
        return None
    sign = -1 if match.group(1) == "-" else 1
    return sign * int(match.group(2))


def year_from_claims(claims: dict[str, Any] | None, prop: str) -> int | None:
    """Return the year of the first ``prop`` statement with year-or-finer precision."""
    for value in statement_values(claims, prop):
        if not isinstance(value, dict):
            continue
        precision = value.get("precision")
        # bool is an int subclass and never a real precision code
        if isinstance(precision, bool) or not isinstance(precision, int):
            continue
        if precision < YEAR_PRECISION:
            continue
        year = year_from_time(value.get("time"))
        if year is not None:
            return year
    return None


def first_string(claims: dict[str, Any] | None, prop: str) -> str | None:
    """Return the first string statement value that is not blank, trimmed."""
    for value in statement_values(claims, prop):
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def age_at_death(birth_year: int | None, death_year: int | None) -> int | None:
    """Compute the age at death, only when both years are known and ordered."""
    if birth_year is None or death_year is None:
        return None
    age = death_year - birth_year
    if age < 0:
        return None
    return age


def pick_language(values: dict[str, Any] | None, language: str) -> str | None:
    """Pick a label or description value, preferring ``language``.

    Falls back to the first language present in the mapping.
    """
    values = values or {}
    preferred = values.get(language)
    if isinstance(preferred, dict) and preferred.get("value"):
        return preferred["value"]
    for entry in values.values():
        if isinstance(entry, dict) and entry.get("value"):
            return entry["value"]
    return None


def wikipedia_url(sitelinks: dict[str, Any] | None) -> str | None:
    """Build the English Wikipedia URL from the ``enwiki`` sitelink title."""
    title = ((sitelinks or {}).get("enwiki") or {}).get("title")
    if not isinstance(title, str) or not title:
        return None
    return settings.wikipedia_base_url + quote(title.replace(" ", "_"), safe="")


def extract_facts(
    entity_id: str,
    claims: dict[str, Any] | None,
    labels: dict[str, Any] | None = None,
    descriptions: dict[str, Any] | None = None,
    sitelinks: dict[str, Any] | None = None,
    image_url_for: Callable[[str], str] | None = None,
) -> BiographicalFacts:
    """Turn an entity's raw data into validated biographical facts.

    A birth year after the death year marks a contradictory record: both years
    are dropped instead of guessing which one is wrong.

    Args:
        entity_id: Identifier used as the label of last resort
        claims: Raw claims mapping
        labels: Labels per language
        descriptions: Descriptions per language
        sitelinks: Sitelinks per site
        image_url_for: Turns an image file name into a URL (identity if None)

    Returns:
        BiographicalFacts for the entity
    """
    birth_year = year_from_claims(claims, settings.property_birth)
    death_year = year_from_claims(claims, settings.property_death)

    if birth_year is not None and death_year is not None and birth_year > death_year:
        birth_year = None
        death_year = None

    image_file = first_string(claims, settings.property_image)
    image_url = None
    if image_file:
        image_url = image_url_for(image_file) if image_url_for else image_file

    return BiographicalFacts(
        label=pick_language(labels, settings.language) or entity_id,
        description=pick_language(descriptions, settings.language) or "",
        wikipedia_url=wikipedia_url(sitelinks),
        image_url=image_url or None,
        birth_year=birth_year,
        death_year=death_year,
        age=age_at_death(birth_year, death_year),
    )
