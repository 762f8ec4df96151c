"""Person search against the knowledge base.

Search runs in two phases: a free-text search returns generic items (ships,
cities, films named after people), then one batched fetch of their claims keeps
only the items that are an instance of "human".
"""

import logging

from people_of_history.cancellation import CancellationToken
from people_of_history.config import settings
from people_of_history.errors import Cancelled
from people_of_history.extraction import sanitize_ids
from people_of_history.extraction.claims import has_target
from people_of_history.knowledge_base import KnowledgeBaseClient, RawEntity
from people_of_history.schemas import SearchHit

logger = logging.getLogger(__name__)


def is_human(entity: RawEntity | None) -> bool:
    """Check whether an entity has an instance-of statement pointing at human."""
    if not entity:
        return False
    return has_target(entity.get("claims"), settings.property_instance_of, settings.class_human)


class PersonSearch:
    """Find people by name."""

    def __init__(self, client: KnowledgeBaseClient, limit: int | None = None):
        """Initialize the search.

        Args:
            client: Knowledge base to search
            limit: Maximum number of raw hits (default: settings.search_limit)
        """
        self.client = client
        self.limit = settings.search_limit if limit is None else limit

    async def search(self, query: str, token: CancellationToken | None = None) -> list[SearchHit]:
        """Search for people matching ``query``.

        Hits that are missing from the claims fetch are treated as non-human.

        Args:
            query: Free-text query
            token: Cancellation token of the request

        Returns:
            Human hits in relevance order

        Raises:
            TransportError: If the knowledge base could not be reached
            Cancelled: If the token fired before the search completed
        """
        token = token or CancellationToken()
        query = query.strip()
        if not query:
            return []

        raw_hits = await token.run(self.client.search(query, self.limit))
        ids = sanitize_ids(raw.get("id") for raw in raw_hits)
        if not ids:
            logger.debug("No hits for %r", query)
            return []

        hits = {}
        for raw in raw_hits:
            hits.setdefault(raw.get("id"), raw)

        entities = await token.run(self.client.get_entities(ids, "claims"))
        people = [
            SearchHit(
                id=entity_id,
                label=hits[entity_id].get("label") or entity_id,
                description=hits[entity_id].get("description") or "",
            )
            for entity_id in ids
            if is_human(entities.get(entity_id))
        ]
        logger.debug("%r: %d hits, %d people", query, len(ids), len(people))
        return people


class LatestSearch:
    """Single-slot register that only lets the latest search run.

    Every submission cancels the one before it, then waits a short settle
    delay so rapid successive queries (typing) only reach the knowledge base
    once they stop changing.
    """

    def __init__(self, search: PersonSearch, settle_delay: float | None = None):
        self.search = search
        self.settle_delay = settings.search_settle_delay if settle_delay is None else settle_delay
        self._token: CancellationToken | None = None

    def cancel(self) -> None:
        """Cancel the pending submission, if any."""
        if self._token is not None:
            self._token.cancel()
            self._token = None

    async def submit(self, query: str) -> list[SearchHit]:
        """Run ``query`` after the settle delay unless superseded first.

        Raises:
            Cancelled: If a newer submission (or cancel) superseded this one
            TransportError: If the knowledge base could not be reached
        """
        self.cancel()
        token = CancellationToken()
        self._token = token
        try:
            await token.sleep(self.settle_delay)
            return await self.search.search(query, token)
        except Cancelled:
            logger.debug("Search for %r superseded", query)
            raise
        finally:
            if self._token is token:
                self._token = None
