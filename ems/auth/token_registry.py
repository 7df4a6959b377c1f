"""In-memory registry of live token identifiers.

A signed token is only accepted while its identifier is present here, which
is what makes logout possible for otherwise stateless JWTs. The registry is
shared by every request thread, so all access goes through one lock.

Entries live in a ``cachetools.TLRUCache`` so each identifier expires with
its own token lifetime and stale entries are dropped without being looked up.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Set

from cachetools import TLRUCache

logger = logging.getLogger(__name__)

DEFAULT_MAX_TOKENS = 1_000_000


@dataclass(frozen=True)
class RegistryEntry:
    user_id: int
    expires_at_ms: int


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


def _entry_expiry(token_id: str, entry: RegistryEntry, now: int) -> int:
    return entry.expires_at_ms


class _TokenCache(TLRUCache):
    """TLRU cache that reports every entry it drops on its own."""

    def __init__(self, maxsize: int, timer: Callable[[], int],
                 on_drop: Callable[[str, RegistryEntry], None]):
        super().__init__(maxsize=maxsize, ttu=_entry_expiry, timer=timer)
        self._on_drop = on_drop

    def expire(self, time=None):
        expired = super().expire(time)
        for token_id, entry in expired:
            self._on_drop(token_id, entry)
        return expired

    def popitem(self):
        token_id, entry = super().popitem()
        logger.warning(f"Token registry full, evicted token {token_id} of user {entry.user_id}")
        self._on_drop(token_id, entry)
        return token_id, entry


class TokenRegistry:
    """Thread-safe map of token identifier to (user id, expiry)."""

    def __init__(self, clock: Callable[[], int] = _wall_clock_ms,
                 maxsize: int = DEFAULT_MAX_TOKENS):
        self._clock = clock
        self._maxsize = maxsize
        self._cache = self._new_cache()
        # Secondary index for revoking every token of one user
        self._by_user: Dict[int, Set[str]] = {}
        self._lock = threading.RLock()

    def put(self, token_id: str, user_id: int, ttl_millis: int) -> None:
        """Register ``token_id`` for ``user_id``, replacing any existing entry.

        A non-positive ttl stores nothing.
        """
        entry = RegistryEntry(user_id=user_id, expires_at_ms=self._clock() + ttl_millis)
        with self._lock:
            previous = self._cache.pop(token_id, None)
            if previous is not None:
                self._unindex(token_id, previous)
            self._cache[token_id] = entry
            if token_id in self._cache:
                self._by_user.setdefault(user_id, set()).add(token_id)
        logger.debug(f"Registered token {token_id} for user {user_id} (ttl {ttl_millis}ms)")

    def resolve(self, token_id: str) -> Optional[int]:
        """Return the user id for a live identifier, or None."""
        with self._lock:
            self._cache.expire()
            entry = self._cache.get(token_id)
        if entry is None:
            logger.debug(f"Token {token_id} not registered (logged out, expired or never issued)")
            return None
        return entry.user_id

    def revoke(self, token_id: str) -> None:
        """Remove ``token_id``; unknown identifiers are ignored."""
        with self._lock:
            entry = self._cache.pop(token_id, None)
            if entry is not None:
                self._unindex(token_id, entry)
        if entry is not None:
            logger.info(f"Token {token_id} revoked")

    def revoke_user(self, user_id: int) -> int:
        """Remove every live identifier registered for ``user_id``."""
        with self._lock:
            self._cache.expire()
            token_ids = self._by_user.pop(user_id, set())
            for token_id in token_ids:
                self._cache.pop(token_id, None)
        logger.info(f"Revoked {len(token_ids)} tokens for user {user_id}")
        return len(token_ids)

    def clear(self) -> None:
        """Remove all entries, logging out every user."""
        with self._lock:
            self._cache = self._new_cache()
            self._by_user.clear()
        logger.warning("All tokens cleared from registry - all users logged out")

    def __len__(self) -> int:
        with self._lock:
            self._cache.expire()
            return len(self._cache)

    def _new_cache(self) -> _TokenCache:
        return _TokenCache(self._maxsize, self._clock, self._unindex)

    def _unindex(self, token_id: str, entry: RegistryEntry) -> None:
        ids = self._by_user.get(entry.user_id)
        if ids is None:
            return
        ids.discard(token_id)
        if not ids:
            del self._by_user[entry.user_id]
