"""Family tree API endpoints."""

import logging

from quart import Blueprint, Response, current_app, jsonify, request

from people_of_history.agents import NodeStatus
from people_of_history.agents.expand_tree import relations_for
from people_of_history.errors import NotFound, TransportError
from people_of_history.web.api import get_knowledge_base

logger = logging.getLogger(__name__)

tree_bp = Blueprint("tree", __name__)


@tree_bp.route("/api/tree/<qid>", methods=["GET"])
async def get_tree(qid: str) -> tuple[Response, int]:
    """Get a person's family tree expanded to a depth.

    Query parameters:
        - depth: Levels to expand (default from config, capped at the depth limit)
        - relation: parents, children or both (default: both)

    Returns:
        JSON with the nested tree. Relatives that failed to load stay in the
        tree with status "failed"; only a failed root is an error response.
    """
    depth = request.args.get("depth", current_app.config["DEFAULT_TREE_DEPTH"], type=int)
    relation = request.args.get("relation", "both")

    try:
        relations_for(relation)  # type: ignore[arg-type]
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    if depth is None or depth < 0:
        return jsonify({"error": "depth must be a non-negative integer"}), 400

    depth = min(depth, current_app.config["MAX_TREE_DEPTH"])

    try:
        expander = get_knowledge_base().tree(max_depth=current_app.config["MAX_TREE_DEPTH"])
        root = await expander.set_root(qid)
        if root.status is NodeStatus.FAILED:
            if isinstance(root.failure, NotFound):
                status = 404
            elif isinstance(root.failure, TransportError):
                status = 502
            else:
                status = 500
            return jsonify({"error": root.error}), status
        await expander.expand_to(root, depth, relation)  # type: ignore[arg-type]
    except Exception as e:
        logger.exception("Building the tree of %s failed", qid)
        return jsonify({"error": f"Failed to get tree data: {e!s}"}), 500

    return jsonify(
        {
            "success": True,
            "depth": depth,
            "max_depth": expander.max_depth,
            "tree": root.to_dict(),
        }
    ), 200
