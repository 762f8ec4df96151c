"""Pydantic schemas for people and search results."""

from people_of_history.schemas.person import (
    BiographicalFacts,
    Person,
    Relations,
    SearchHit,
)

__all__ = [
    "BiographicalFacts",
    "Person",
    "Relations",
    "SearchHit",
]
