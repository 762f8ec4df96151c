"""Main Quart application for the People of History API."""

from quart import Quart, jsonify
from quart_cors import cors

from people_of_history import __version__
from people_of_history.knowledge_base import KnowledgeBaseClient
from people_of_history.web.api import KNOWLEDGE_BASE_EXTENSION
from people_of_history.web.api.people import people_bp
from people_of_history.web.api.search import search_bp
from people_of_history.web.api.tree import tree_bp
from people_of_history.web.config import get_config


def create_app(
    config_name: str = "development", client: KnowledgeBaseClient | None = None
) -> Quart:
    """Create and configure the Quart application.

    Args:
        config_name: Configuration environment name
        client: Optional knowledge base client (default: Wikidata)

    Returns:
        Configured Quart app
    """
    app = Quart(__name__)

    # Load configuration
    config = get_config(config_name)
    app.config.from_object(config)
    if client is not None:
        app.config["KNOWLEDGE_BASE_CLIENT"] = client

    # Enable CORS for frontend (only needed in development)
    if config.DEBUG:
        app = cors(
            app,
            allow_origin=config.CORS_ORIGINS,
            allow_methods=["GET", "OPTIONS"],
            allow_headers=["Content-Type"],
        )

    # Register blueprints
    app.register_blueprint(search_bp)
    app.register_blueprint(people_bp)
    app.register_blueprint(tree_bp)

    # Register routes
    register_routes(app)

    @app.after_serving
    async def close_knowledge_base() -> None:
        session = app.extensions.pop(KNOWLEDGE_BASE_EXTENSION, None)
        if session is not None:
            await session.aclose()

    return app


def register_routes(app: Quart) -> None:
    """Register API routes.

    Args:
        app: Quart application
    """

    @app.route("/api/health", methods=["GET"])
    async def health_check():
        """Health check endpoint."""
        return jsonify(
            {
                "status": "healthy",
                "service": "people-of-history",
                "version": __version__,
            }
        )

    @app.route("/api/info", methods=["GET"])
    async def info():
        """Get API information."""
        return jsonify(
            {
                "service": "People of History API",
                "version": __version__,
                "endpoints": {
                    "health": "/api/health",
                    "info": "/api/info",
                    "search": "/api/search?q=<name>",
                    "person": "/api/people/<qid>",
                    "tree": "/api/tree/<qid>?depth=<n>&relation=<parents|children|both>",
                },
            }
        )
