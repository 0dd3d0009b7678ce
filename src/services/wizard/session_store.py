"""
Wizard Session Store
====================

Where in-progress wizard sessions live between interactions.

DESIGN:
    Discord interactions carry no session cookie, so the wizard keeps its
    drafts in a side table keyed by (guild_id, user_id). The table sits
    behind SessionStore so the TTL policy stays out of the wizard logic
    and a shared cache could replace the in-memory dict.

    Mutations of one session are serialized with a per-key asyncio.Lock
    obtained from ``lock(key)``. Two clicks on the same wizard apply one
    after the other instead of overwriting each other's draft.

Author: حَـــــنَّـــــا
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class SessionStore(ABC, Generic[K, V]):
    """Keyed session storage with idle expiry."""

    @abstractmethod
    def get(self, key: K) -> Optional[V]:
        """Return the live session for ``key``, or None if absent or expired."""

    @abstractmethod
    def set(self, key: K, value: V) -> None:
        """Store ``value`` and reset its idle timer."""

    @abstractmethod
    def delete(self, key: K) -> bool:
        """Remove the session. Returns True if one existed."""

    @abstractmethod
    def sweep(self, now: Optional[float] = None) -> int:
        """Drop sessions idle longer than the TTL. Returns how many were dropped."""

    @abstractmethod
    def lock(self, key: K) -> asyncio.Lock:
        """Lock serializing mutations of the session at ``key``."""


class InMemorySessionStore(SessionStore[K, V]):
    """
    Process-local session store.

    Args:
        ttl: Idle lifetime in seconds.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(self, ttl: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl
        self._clock = clock
        self._sessions: Dict[K, Tuple[V, float]] = {}
        self._locks: Dict[K, asyncio.Lock] = {}

    @property
    def ttl(self) -> float:
        return self._ttl

    def _is_expired(self, touched_at: float, now: float) -> bool:
        return now - touched_at > self._ttl

    def get(self, key: K) -> Optional[V]:
        entry = self._sessions.get(key)
        if entry is None:
            return None
        value, touched_at = entry
        if self._is_expired(touched_at, self._clock()):
            self._sessions.pop(key, None)
            return None
        return value

    def set(self, key: K, value: V) -> None:
        self._sessions[key] = (value, self._clock())

    def delete(self, key: K) -> bool:
        existed = self._sessions.pop(key, None) is not None
        self._drop_lock(key)
        return existed

    def sweep(self, now: Optional[float] = None) -> int:
        now = self._clock() if now is None else now
        expired = [
            key for key, (_, touched_at) in self._sessions.items()
            if self._is_expired(touched_at, now)
        ]
        for key in expired:
            del self._sessions[key]
        # Locks outlive their session when it is deleted while held
        for key in [k for k in self._locks if k not in self._sessions]:
            self._drop_lock(key)
        return len(expired)

    def lock(self, key: K) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def _drop_lock(self, key: K) -> None:
        lock = self._locks.get(key)
        if lock is not None and not lock.locked():
            del self._locks[key]

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, key: K) -> bool:
        return self.get(key) is not None


__all__ = ["SessionStore", "InMemorySessionStore"]
