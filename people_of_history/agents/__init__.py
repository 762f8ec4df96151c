"""Resolution, search and tree expansion over the knowledge base."""

from people_of_history.agents.expand_tree import NodeStatus, TreeExpander, TreeNode
from people_of_history.agents.resolve_entity import EntityResolver
from people_of_history.agents.search_people import LatestSearch, PersonSearch

__all__ = [
    "EntityResolver",
    "LatestSearch",
    "NodeStatus",
    "PersonSearch",
    "TreeExpander",
    "TreeNode",
]
