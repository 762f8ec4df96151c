"""Person lookup API endpoints."""

import logging

from quart import Blueprint, Response, jsonify

from people_of_history.errors import NotFound, TransportError
from people_of_history.render import age_badge, lifespan
from people_of_history.web.api import get_knowledge_base

logger = logging.getLogger(__name__)

people_bp = Blueprint("people", __name__)


@people_bp.route("/api/people/<qid>", methods=["GET"])
async def get_person(qid: str) -> tuple[Response, int]:
    """Get one person's biographical summary and relation ids.

    Args:
        qid: Wikidata identifier

    Returns:
        JSON with the person, a rendered lifespan and age badge
    """
    try:
        person = await get_knowledge_base().resolver.resolve(qid)
    except NotFound as e:
        return jsonify({"error": str(e)}), 404
    except TransportError as e:
        return jsonify({"error": f"Failed to load person: {e!s}"}), 502
    except Exception as e:
        logger.exception("Loading %s failed", qid)
        return jsonify({"error": f"Failed to load person: {e!s}"}), 500

    return jsonify(
        {
            "success": True,
            "person": person.model_dump(),
            "lifespan": lifespan(person.birth_year, person.death_year),
            "age_badge": age_badge(person),
            "parent_count": person.parent_count,
            "child_count": person.child_count,
        }
    ), 200
