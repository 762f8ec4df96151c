"""Person search API endpoints."""

import logging

from quart import Blueprint, Response, jsonify, request

from people_of_history.errors import TransportError
from people_of_history.web.api import get_knowledge_base

logger = logging.getLogger(__name__)

search_bp = Blueprint("search", __name__)


@search_bp.route("/api/search", methods=["GET"])
async def search_people() -> tuple[Response, int]:
    """Search for people by name.

    Query parameters:
        - q: Name to search for

    Returns:
        JSON with the human hits in relevance order. A failed search is a 502,
        an empty result is a normal 200 with no results.
    """
    query = request.args.get("q", "")

    try:
        hits = await get_knowledge_base().search.search(query)
    except TransportError as e:
        return jsonify({"error": f"Search failed: {e!s}"}), 502
    except Exception as e:
        logger.exception("Search for %r failed", query)
        return jsonify({"error": f"Search failed: {e!s}"}), 500

    return jsonify(
        {
            "success": True,
            "query": query.strip(),
            "results": [hit.model_dump() for hit in hits],
        }
    ), 200
