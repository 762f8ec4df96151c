"""Depth-bounded family tree expansion.

A tree is made of one recursive node type. Every node owns the relatives it
spawned and a cancellation token for its own resolution; discarding a node
fires the tokens of its whole subtree. Relatives of a node are only spawned
(and fetched) while the node is shallower than the depth limit, but the
parent and child counts of every loaded node are always available.
"""

import asyncio
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from people_of_history.agents.resolve_entity import EntityResolver
from people_of_history.cancellation import CancellationToken
from people_of_history.config import settings
from people_of_history.errors import Cancelled, NotFound, TransportError
from people_of_history.render import age_badge, lifespan
from people_of_history.schemas import Person

logger = logging.getLogger(__name__)

Relation = Literal["parents", "children"]
RelationChoice = Literal["parents", "children", "both"]


class NodeStatus(str, Enum):
    """Lifecycle of a tree node. Only PENDING ever changes."""

    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"
    CANCELLED = "cancelled"


def relations_for(choice: RelationChoice) -> tuple[Relation, ...]:
    if choice == "both":
        return ("parents", "children")
    if choice in ("parents", "children"):
        return (choice,)
    raise ValueError(f"Unknown relation: {choice}")


@dataclass(eq=False)
class TreeNode:
    """A person at some depth of the tree, with the relatives it spawned."""

    entity_id: str
    depth: int = 0
    status: NodeStatus = NodeStatus.PENDING
    person: Person | None = None
    error: str | None = None
    failure: Exception | None = field(default=None, repr=False)
    parents: list["TreeNode"] | None = None
    children: list["TreeNode"] | None = None
    token: CancellationToken = field(default_factory=CancellationToken, repr=False)

    @property
    def label(self) -> str:
        return self.person.label if self.person else self.entity_id

    @property
    def parent_ids(self) -> list[str]:
        return self.person.parent_ids if self.person else []

    @property
    def child_ids(self) -> list[str]:
        return self.person.child_ids if self.person else []

    @property
    def parent_count(self) -> int:
        return len(self.parent_ids)

    @property
    def child_count(self) -> int:
        return len(self.child_ids)

    def relation_ids(self, relation: Relation) -> list[str]:
        return self.parent_ids if relation == "parents" else self.child_ids

    def relatives(self, relation: Relation) -> list["TreeNode"] | None:
        """Spawned relatives, or None if the relation was never expanded."""
        return self.parents if relation == "parents" else self.children

    def set_relatives(self, relation: Relation, nodes: list["TreeNode"] | None) -> None:
        if relation == "parents":
            self.parents = nodes
        else:
            self.children = nodes

    def walk(self) -> Iterator["TreeNode"]:
        """Yield this node and all spawned descendants, depth first."""
        yield self
        for relation in ("parents", "children"):
            for node in self.relatives(relation) or []:
                yield from node.walk()

    def cancel(self) -> None:
        """Fire this node's token; a pending node becomes CANCELLED."""
        self.token.cancel()
        if self.status is NodeStatus.PENDING:
            self.status = NodeStatus.CANCELLED

    def to_dict(self) -> dict[str, Any]:
        """Serialize the node and its spawned relatives for the web API."""
        data: dict[str, Any] = {
            "id": self.entity_id,
            "depth": self.depth,
            "status": self.status.value,
            "label": self.label,
            "parent_count": self.parent_count,
            "child_count": self.child_count,
        }
        if self.person:
            data["person"] = self.person.model_dump()
            data["lifespan"] = lifespan(self.person.birth_year, self.person.death_year)
            data["age_badge"] = age_badge(self.person)
        if self.error:
            data["error"] = self.error
        for relation in ("parents", "children"):
            nodes = self.relatives(relation)
            data[relation] = [node.to_dict() for node in nodes] if nodes is not None else None
        return data


class TreeExpander:
    """Grow a family tree around a root person, one relation at a time."""

    def __init__(self, resolver: EntityResolver, max_depth: int | None = None):
        """Initialize the expander.

        Args:
            resolver: Session resolver shared by every branch
            max_depth: Deepest level whose relatives are never spawned
                (default: settings.max_depth)
        """
        self.resolver = resolver
        self.max_depth = settings.max_depth if max_depth is None else max_depth
        self.root: TreeNode | None = None

    async def set_root(self, entity_id: str) -> TreeNode:
        """Replace the current tree with a new root and load it.

        Args:
            entity_id: Identifier of the root person

        Returns:
            The loaded root node (READY, FAILED or CANCELLED)
        """
        if self.root is not None:
            self.discard(self.root)
        node = TreeNode(entity_id=entity_id, depth=0)
        self.root = node
        return await self.load(node)

    async def load(self, node: TreeNode) -> TreeNode:
        """Resolve a pending node's person. Never raises for lookup failures.

        A failure only marks this node; its parent and siblings are untouched.
        Records that cannot be turned into a person fail the same way.
        """
        if node.status is not NodeStatus.PENDING:
            return node
        try:
            person = await self.resolver.resolve(node.entity_id, node.token)
        except Cancelled:
            node.status = NodeStatus.CANCELLED
            return node
        except (NotFound, TransportError) as e:
            if node.token.cancelled:
                node.status = NodeStatus.CANCELLED
            else:
                logger.info("Could not load %s at depth %d: %s", node.entity_id, node.depth, e)
                node.status = NodeStatus.FAILED
                node.error = str(e)
                node.failure = e
            return node
        except Exception as e:
            logger.exception("Could not build %s at depth %d", node.entity_id, node.depth)
            node.status = NodeStatus.FAILED
            node.error = f"Invalid record: {e}"
            node.failure = e
            return node

        if node.token.cancelled:
            node.status = NodeStatus.CANCELLED
        else:
            node.person = person
            node.status = NodeStatus.READY
        return node

    def can_expand(self, node: TreeNode) -> bool:
        """Check whether the node may spawn relatives (ready and above the limit)."""
        return node.status is NodeStatus.READY and node.depth < self.max_depth

    async def expand(self, node: TreeNode, relation: RelationChoice = "both") -> list[TreeNode]:
        """Spawn and load the node's relatives concurrently.

        Relations that were already expanded keep their nodes. At the depth
        limit nothing is spawned and no fetch happens.

        Args:
            node: Node to expand
            relation: "parents", "children" or "both"

        Returns:
            The node's relatives for the requested relation(s)
        """
        relations = relations_for(relation)
        if not self.can_expand(node):
            if node.status is NodeStatus.READY:
                logger.debug("Depth limit reached at %s (depth %d)", node.entity_id, node.depth)
            return []

        spawned = []
        for rel in relations:
            if node.relatives(rel) is None:
                nodes = [
                    TreeNode(entity_id=entity_id, depth=node.depth + 1)
                    for entity_id in node.relation_ids(rel)
                ]
                node.set_relatives(rel, nodes)
                spawned.extend(nodes)

        await asyncio.gather(*(self.load(child) for child in spawned))
        return [child for rel in relations for child in node.relatives(rel) or []]

    def collapse(self, node: TreeNode, relation: RelationChoice = "both") -> None:
        """Discard the node's spawned relatives, cancelling pending loads."""
        for rel in relations_for(relation):
            for child in node.relatives(rel) or []:
                self.discard(child)
            node.set_relatives(rel, None)

    def discard(self, node: TreeNode) -> None:
        """Cancel a node and its whole subtree."""
        for descendant in node.walk():
            descendant.cancel()

    async def expand_to(
        self, node: TreeNode, depth: int, relation: RelationChoice = "both"
    ) -> TreeNode:
        """Expand level by level until ``depth`` (capped at the depth limit).

        Args:
            node: Node to start from
            depth: Absolute depth of the deepest nodes to load
            relation: Relation(s) to follow

        Returns:
            The starting node
        """
        target = min(depth, self.max_depth)
        frontier = [node]
        while frontier:
            expandable = [n for n in frontier if n.depth < target and self.can_expand(n)]
            levels = await asyncio.gather(*(self.expand(n, relation) for n in expandable))
            frontier = [child for level in levels for child in level]
        return node
