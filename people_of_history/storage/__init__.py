"""Session-scoped storage for resolved entities."""

from people_of_history.storage.cache import CacheEntry, EntityCache

__all__ = ["CacheEntry", "EntityCache"]
