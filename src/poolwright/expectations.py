"""
In-memory bookkeeping of lease creations that have been issued but not yet
observed through a list of the store.

One tracker is constructed per process and handed to every allocator. Entries
are never persisted; after a restart the lease list is the only truth.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from .core import EXPECTATIONS_TTL_SECONDS
from .logger import logger


@dataclass
class ExpectationEntry:
    key: str
    add: int
    timestamp: float

    def fulfilled(self) -> bool:
        return self.add <= 0


class ExpectationTracker:
    def __init__(
        self,
        ttl_seconds: float = EXPECTATIONS_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, ExpectationEntry] = {}
        self._lock = threading.Lock()

    def expect_creations(self, key: str, count: int) -> None:
        """Records that `count` creations are expected for `key`, replacing any prior count."""
        with self._lock:
            self._entries[key] = ExpectationEntry(
                key=key, add=count, timestamp=self._clock()
            )
        logger.debug(f"expecting {count} creation(s) for {key}")

    def expect_creations_if_satisfied(self, key: str, count: int) -> bool:
        """
        Registers `count` expected creations for `key` unless creations are
        still outstanding for it. Check and registration happen under one lock
        so only one of several overlapping passes for a key gets True.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not self._satisfied(entry):
                return False
            self._entries[key] = ExpectationEntry(
                key=key, add=count, timestamp=self._clock()
            )
        logger.debug(f"expecting {count} creation(s) for {key}")
        return True

    def creation_observed(self, key: str) -> None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return
            entry.add -= 1
            if entry.fulfilled():
                del self._entries[key]

    def delete_expectations(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)
        logger.debug(f"deleted expectations for {key}")

    def get_expectations(self, key: str) -> ExpectationEntry | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            return ExpectationEntry(entry.key, entry.add, entry.timestamp)

    def satisfied_expectations(self, key: str) -> bool:
        """
        True when nothing is outstanding for `key`: no entry, every expected
        creation observed, or the entry has outlived the TTL.
        """
        with self._lock:
            entry = self._entries.get(key)
            return entry is None or self._satisfied(entry)

    def _satisfied(self, entry: ExpectationEntry) -> bool:
        if entry.fulfilled():
            return True
        if self._clock() - entry.timestamp > self.ttl_seconds:
            logger.debug(f"expectations for {entry.key} expired")
            return True
        return False
