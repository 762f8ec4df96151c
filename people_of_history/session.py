"""One browsing session: a knowledge-base client and the resolver cache shared by every tree."""

from people_of_history.agents import EntityResolver, LatestSearch, PersonSearch, TreeExpander
from people_of_history.knowledge_base import KnowledgeBaseClient, WikidataClient, commons_image_url


class KnowledgeBaseSession:
    """Wire the client, resolver and searches for a session."""

    def __init__(self, client: KnowledgeBaseClient | None = None, search_limit: int | None = None):
        """Initialize the session.

        Args:
            client: Knowledge base client (default: a new WikidataClient, closed with the session)
            search_limit: Maximum number of raw search hits
        """
        self._owns_client = client is None
        self.client = client if client is not None else WikidataClient()
        self.resolver = EntityResolver(self.client, image_url_for=commons_image_url)
        self.search = PersonSearch(self.client, limit=search_limit)
        self.latest_search = LatestSearch(self.search)

    def tree(self, max_depth: int | None = None) -> TreeExpander:
        """Create a tree expander backed by the session cache."""
        return TreeExpander(self.resolver, max_depth=max_depth)

    async def aclose(self) -> None:
        self.latest_search.cancel()
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "KnowledgeBaseSession":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
