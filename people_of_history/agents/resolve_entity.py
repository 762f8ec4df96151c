"""Entity resolution: fetch, normalize and cache people by identifier."""

import logging
from collections.abc import Callable
from typing import Any

from people_of_history.cancellation import CancellationToken
from people_of_history.errors import NotFound
from people_of_history.extraction import extract_facts, extract_relations, is_qid
from people_of_history.knowledge_base import KnowledgeBaseClient
from people_of_history.schemas import Person
from people_of_history.storage import EntityCache

logger = logging.getLogger(__name__)

ENTITY_PROPS = "labels|descriptions|claims|sitelinks"


class EntityResolver:
    """Resolve identifiers into people, sharing one fetch per identifier."""

    def __init__(
        self,
        client: KnowledgeBaseClient,
        cache: EntityCache | None = None,
        image_url_for: Callable[[str], str] | None = None,
    ):
        """Initialize the resolver.

        Args:
            client: Knowledge base to fetch entities from
            cache: Session cache (default: a new empty cache)
            image_url_for: Turns image file names into URLs
        """
        self.client = client
        self.cache = cache if cache is not None else EntityCache()
        self.image_url_for = image_url_for

    def peek(self, entity_id: str) -> Person | None:
        """Return an already resolved person without any network call."""
        return self.cache.peek(entity_id)

    async def resolve(self, entity_id: str, token: CancellationToken | None = None) -> Person:
        """Resolve an identifier into a person.

        Concurrent calls for the same identifier wait on the same fetch. If
        every caller is cancelled before it completes, the fetch is abandoned
        and nothing is cached.

        Args:
            entity_id: Item identifier such as ``Q3044``
            token: Cancellation token of the calling node

        Returns:
            The resolved person

        Raises:
            NotFound: If the identifier has no record
            TransportError: If the knowledge base could not be reached
            Cancelled: If the token fired before the person was resolved
        """
        token = token or CancellationToken()
        token.raise_if_cancelled()

        if not is_qid(entity_id):
            raise NotFound(entity_id)

        entry = self.cache.get(entity_id)
        if entry is not None and entry.task.cancelled():
            self.cache.discard(entry)
            entry = None
        if entry is not None and not entry.in_flight:
            logger.debug("Cache hit for %s", entity_id)
            return entry.task.result()

        if entry is None:
            logger.debug("Cache miss for %s, fetching", entity_id)
            entry = self.cache.start(entity_id, self._fetch(entity_id))

        entry.waiters += 1
        try:
            return await token.run(entry.task, cancel_inner=False)
        finally:
            entry.waiters -= 1
            if entry.waiters == 0 and entry.in_flight:
                logger.debug("All callers of %s cancelled, abandoning fetch", entity_id)
                entry.task.cancel()
                self.cache.discard(entry)

    async def _fetch(self, entity_id: str) -> Person:
        entities = await self.client.get_entities([entity_id], ENTITY_PROPS)
        entity = entities.get(entity_id)
        if entity is None:
            raise NotFound(entity_id)
        return self.normalize(entity_id, entity)

    def normalize(self, entity_id: str, entity: dict[str, Any]) -> Person:
        """Compose a person from a raw entity. Pure, no I/O."""
        claims = entity.get("claims") or {}
        facts = extract_facts(
            entity_id,
            claims,
            labels=entity.get("labels"),
            descriptions=entity.get("descriptions"),
            sitelinks=entity.get("sitelinks"),
            image_url_for=self.image_url_for,
        )
        return Person.compose(entity_id, facts, extract_relations(claims))
