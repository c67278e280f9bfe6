"""
Per-identity write locks.

Serialises concurrent saves for the same entity path inside one process.
Locks are dropped once no task holds a reference to them. Exclusion across
processes is not provided; callers running several workers must ensure a
single writer per identity themselves.

Dependencies: asyncio, weakref
System role: In-process mutual exclusion for image saves
"""

import asyncio
import weakref


class IdentityLocks:
    """Registry of asyncio locks keyed by entity path."""

    def __init__(self) -> None:
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def get(self, key: str) -> asyncio.Lock:
        """Return the lock for ``key``, creating it on first use."""
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock
