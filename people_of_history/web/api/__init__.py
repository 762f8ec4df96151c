"""API blueprints and the knowledge-base session they share."""

from quart import current_app

from people_of_history.session import KnowledgeBaseSession

KNOWLEDGE_BASE_EXTENSION = "people_of_history"


def get_knowledge_base() -> KnowledgeBaseSession:
    """Return the app's knowledge-base session, creating it on first use.

    The session (and its resolver cache) lives as long as the app serves.
    """
    session = current_app.extensions.get(KNOWLEDGE_BASE_EXTENSION)
    if session is None:
        session = KnowledgeBaseSession(
            client=current_app.config.get("KNOWLEDGE_BASE_CLIENT"),
            search_limit=current_app.config.get("SEARCH_LIMIT"),
        )
        current_app.extensions[KNOWLEDGE_BASE_EXTENSION] = session
    return session
