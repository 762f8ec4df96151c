"""Knowledge base clients."""

from people_of_history.knowledge_base.client import (
    KnowledgeBaseClient,
    RawEntity,
    WikidataClient,
    commons_image_url,
)

__all__ = ["KnowledgeBaseClient", "RawEntity", "WikidataClient", "commons_image_url"]
