"""Parent and child extraction from an entity's claims."""

from typing import Any

from people_of_history.config import settings
from people_of_history.extraction.claims import entity_ids
from people_of_history.extraction.identifiers import sanitize_ids
from people_of_history.schemas import Relations


def extract_relations(claims: dict[str, Any] | None) -> Relations:
    """Extract parents (fathers then mothers) and children from claims.

    Args:
        claims: Raw claims mapping of the entity

    Returns:
        Relations with sanitized, deduplicated id lists
    """
    parents = entity_ids(claims, settings.property_father) + entity_ids(
        claims, settings.property_mother
    )
    children = entity_ids(claims, settings.property_child)
    return Relations(parent_ids=sanitize_ids(parents), child_ids=sanitize_ids(children))
