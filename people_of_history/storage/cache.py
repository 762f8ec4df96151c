"""Session cache of resolved people.

Each identifier maps to one entry holding the task that resolves it. The entry
is in flight while the task runs, then holds either the resolved person or a
terminal ``NotFound``. Transport failures and cancelled fetches remove the
entry so the next request fetches again. Entries are never evicted otherwise.
"""

import asyncio
import logging
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any

from people_of_history.errors import NotFound
from people_of_history.schemas import Person

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """One identifier's resolution, shared by every branch that needs it."""

    entity_id: str
    task: "asyncio.Task[Person]"
    waiters: int = 0

    @property
    def in_flight(self) -> bool:
        return not self.task.done()

    @property
    def person(self) -> Person | None:
        """The resolved person, or None while in flight or after a failure."""
        if self.task.done() and not self.task.cancelled() and self.task.exception() is None:
            return self.task.result()
        return None


class EntityCache:
    """Identifier to resolution mapping, first writer wins."""

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entity_id: str) -> CacheEntry | None:
        return self._entries.get(entity_id)

    def peek(self, entity_id: str) -> Person | None:
        """Return the resolved person for ``entity_id`` without any I/O."""
        entry = self._entries.get(entity_id)
        return entry.person if entry else None

    def start(self, entity_id: str, resolution: Coroutine[Any, Any, Person]) -> CacheEntry:
        """Register the in-flight resolution of an uncached identifier.

        Args:
            entity_id: Identifier being resolved
            resolution: Coroutine producing the person

        Returns:
            The new entry

        Raises:
            RuntimeError: If an entry for the identifier already exists
        """
        if entity_id in self._entries:
            resolution.close()
            raise RuntimeError(f"{entity_id} is already cached")

        entry = CacheEntry(entity_id=entity_id, task=asyncio.ensure_future(resolution))
        entry.task.add_done_callback(lambda task: self._settle(entry))
        self._entries[entity_id] = entry
        return entry

    def discard(self, entry: CacheEntry) -> None:
        """Remove ``entry`` if it is still the current entry for its identifier."""
        if self._entries.get(entry.entity_id) is entry:
            del self._entries[entry.entity_id]

    def _settle(self, entry: CacheEntry) -> None:
        if entry.task.cancelled():
            logger.debug("Resolution of %s cancelled, dropping entry", entry.entity_id)
            self.discard(entry)
            return
        error = entry.task.exception()
        if error is not None and not isinstance(error, NotFound):
            logger.debug("Resolution of %s failed (%s), dropping entry", entry.entity_id, error)
            self.discard(entry)
