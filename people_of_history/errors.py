"""Exceptions raised while talking to the knowledge base.

Bad biographical data is never an error: unusable facts are dropped from the
person instead.
"""


class PeopleOfHistoryError(Exception):
    """Base class for all People of History errors."""


class NotFound(PeopleOfHistoryError):
    """The identifier has no record in the knowledge base."""

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(f"No entity for {entity_id}")


class TransportError(PeopleOfHistoryError):
    """The knowledge base could not be reached or answered with an error."""


class Cancelled(PeopleOfHistoryError):
    """The operation was superseded or aborted before it completed."""
