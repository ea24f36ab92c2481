"""
Handle Cache

In-memory mapping of cache key to vector store handle.

Design choices
--------------
- Process-lifetime entries: no TTL and no automatic eviction.
- Keys are namespaced (``domain_<domain>``, ``user_<id>``) so domain and user
  handles can never collide.
- Owned by a ``VectorStoreAccessor`` and injectable, so tests can supply an
  isolated instance.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from ..db.vector_store import VectorStore

DOMAIN_PREFIX = "domain_"
USER_PREFIX = "user_"


def domain_key(domain: str) -> str:
    return f"{DOMAIN_PREFIX}{domain}"


def user_key(user_id: str) -> str:
    return f"{USER_PREFIX}{user_id}"


class HandleCache:
    """
    Key to ``VectorStore`` mapping with explicit invalidation.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, VectorStore] = {}

    def get(self, key: str) -> Optional[VectorStore]:
        return self._entries.get(key)

    def set(self, key: str, handle: VectorStore) -> None:
        self._entries[key] = handle

    def delete(self, key: str) -> bool:
        """
        Remove one entry. Returns True if it existed.
        """
        return self._entries.pop(key, None) is not None

    def clear(self, prefix: Optional[str] = None) -> int:
        """
        Remove every entry, or only those whose key starts with ``prefix``.

        Returns the number of removed entries.
        """
        if prefix is None:
            removed = len(self._entries)
            self._entries.clear()
            return removed

        doomed = [key for key in self._entries if key.startswith(prefix)]
        for key in doomed:
            del self._entries[key]
        return len(doomed)

    def keys(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
