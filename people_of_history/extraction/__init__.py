"""Pure extraction of facts and relations from raw knowledge-base entities."""

from people_of_history.extraction.facts import extract_facts
from people_of_history.extraction.identifiers import is_qid, sanitize_ids
from people_of_history.extraction.relations import extract_relations

__all__ = ["extract_facts", "extract_relations", "is_qid", "sanitize_ids"]
