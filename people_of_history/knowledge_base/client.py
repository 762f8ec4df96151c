"""Wikidata API client.

API: https://www.wikidata.org/w/api.php
Type: MediaWiki action API (wbsearchentities, wbgetentities)

The core only depends on the ``KnowledgeBaseClient`` protocol; ``WikidataClient``
is the implementation used by the CLI and the web API.
"""

import logging
from typing import Any, Protocol
from urllib.parse import quote

import httpx

from people_of_history.config import settings
from people_of_history.errors import TransportError

logger = logging.getLogger(__name__)

RawEntity = dict[str, Any]


class KnowledgeBaseClient(Protocol):
    """What the resolver and search need from a knowledge base."""

    async def search(self, query: str, limit: int) -> list[dict[str, Any]]:
        """Free-text search returning ``{id, label, description}`` hits."""
        ...

    async def get_entities(self, ids: list[str], props: str) -> dict[str, RawEntity]:
        """Fetch several entities in one call, keyed by id. Missing ids are absent."""
        ...


def commons_image_url(filename: str, width: int | None = None) -> str:
    """Build a Wikimedia Commons file URL for an image statement value.

    Args:
        filename: File name as stored in the image statement
        width: Thumbnail width (default: twice the avatar size)

    Returns:
        URL of the scaled image
    """
    width = width or settings.avatar_size * 2
    safe = quote(filename.replace(" ", "_"), safe="")
    return f"{settings.commons_filepath_url}{safe}?width={width}"


class WikidataClient:
    """Async client for the Wikidata action API."""

    def __init__(
        self,
        api_url: str | None = None,
        language: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            api_url: API endpoint (default: settings.wikidata_api_url)
            language: Label and search language (default: settings.language)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.api_url = api_url or settings.wikidata_api_url
        self.language = language or settings.language
        self.client = httpx.AsyncClient(
            timeout=timeout or settings.request_timeout,
            follow_redirects=True,
            transport=transport,
            headers={
                "User-Agent": settings.user_agent,
                "Accept": "application/json",
            },
        )

    async def __aenter__(self) -> "WikidataClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _get_json(self, params: dict[str, str]) -> dict[str, Any]:
        """Issue one API request and return the decoded JSON payload."""
        params = {**params, "format": "json"}
        try:
            response = await self.client.get(self.api_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Wikidata %s failed: HTTP %s", params.get("action"), e.response.status_code)
            raise TransportError(f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("Wikidata %s failed: %s", params.get("action"), e)
            raise TransportError(f"Request failed: {e!s}") from e
        except ValueError as e:
            raise TransportError("Invalid JSON from knowledge base") from e

        if not isinstance(data, dict):
            raise TransportError("Unexpected response from knowledge base")
        if "error" in data:
            error = data["error"] or {}
            raise TransportError(f"API error: {error.get('info') or error.get('code') or 'unknown'}")
        return data

    async def search(self, query: str, limit: int) -> list[dict[str, Any]]:
        """Search items by label and alias.

        Args:
            query: Free-text query
            limit: Maximum number of hits

        Returns:
            Hits in relevance order with id, label and description
        """
        data = await self._get_json(
            {
                "action": "wbsearchentities",
                "language": self.language,
                "uselang": self.language,
                "type": "item",
                "search": query,
                "limit": str(limit),
            }
        )
        hits = data.get("search")
        if not isinstance(hits, list):
            return []
        return [
            {
                "id": hit.get("id"),
                "label": hit.get("label"),
                "description": hit.get("description"),
            }
            for hit in hits
            if isinstance(hit, dict)
        ]

    async def get_entities(self, ids: list[str], props: str) -> dict[str, RawEntity]:
        """Fetch entities by id in a single request.

        Args:
            ids: Item identifiers (the API accepts up to 50 per request)
            props: Pipe-separated entity parts, e.g. ``labels|claims``

        Returns:
            Mapping of id to raw entity; missing entities are left out
        """
        if not ids:
            return {}
        logger.debug("Fetching %d entities (%s)", len(ids), props)
        data = await self._get_json(
            {
                "action": "wbgetentities",
                "ids": "|".join(ids),
                "languages": self.language,
                "props": props,
            }
        )
        entities = data.get("entities")
        if not isinstance(entities, dict):
            return {}
        return {
            entity_id: entity
            for entity_id, entity in entities.items()
            if isinstance(entity, dict) and "missing" not in entity
        }
