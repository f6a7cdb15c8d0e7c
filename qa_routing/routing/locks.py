"""
Per-moderator locks serializing assignment decisions.

A decision reads a moderator's workload, scores it and writes an
assignment. Two decisions interleaving on the same moderator would both
see the old workload, so every decision holds the locks of all the
moderators it evaluates until its assignment is committed.

Provides:
- Redis locks (cross-process) when Redis is reachable
- In-memory fallback with one threading.Lock per moderator
"""

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from functools import lru_cache
from typing import Dict, List, Optional

import redis
from redis.exceptions import LockError, RedisError

from qa_routing.config import get_settings
from qa_routing.constants import MODERATOR_LOCK_KEY
from qa_routing.exceptions import LockTimeout, PersistenceFailure
from qa_routing.logging import get_logger
from qa_routing.redis_client import redis_client

logger = get_logger("routing.locks")


class ModeratorLockRegistry:
    """
    Lock registry keyed by moderator id.

    Locks are always taken in ascending id order, so two decisions with
    overlapping candidate pools cannot deadlock.

    Usage:
        locks = get_lock_registry()
        with locks.hold([3, 1, 2]):
            ...  # read workloads, assign, commit
    """

    def __init__(
        self,
        redis_conn: Optional[redis.Redis] = None,
        timeout: float = 30.0,
        wait: float = 10.0,
    ):
        self._redis = redis_conn
        self.timeout = timeout
        self.wait = wait
        self._memory_locks: Dict[int, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    @property
    def backend(self) -> str:
        return "redis" if self._redis is not None else "memory"

    def _memory_lock(self, moderator_id: int) -> threading.Lock:
        with self._registry_lock:
            lock = self._memory_locks.get(moderator_id)
            if lock is None:
                lock = threading.Lock()
                self._memory_locks[moderator_id] = lock
            return lock

    def _acquire(self, moderator_id: int):
        """
        Acquire one moderator lock.

        Raises:
            LockTimeout: if the lock is still held after `wait` seconds.
            PersistenceFailure: if Redis fails while acquiring.
        """
        if self._redis is not None:
            lock = self._redis.lock(
                MODERATOR_LOCK_KEY.format(moderator_id=moderator_id),
                timeout=self.timeout,
                blocking_timeout=self.wait,
            )
            try:
                acquired = lock.acquire()
            except RedisError as e:
                logger.error("moderator_lock_failed", moderator_id=moderator_id, error=str(e))
                raise PersistenceFailure(f"Lock store unavailable: {e}") from e
            if not acquired:
                raise LockTimeout(moderator_id, self.wait)
            return lock

        lock = self._memory_lock(moderator_id)
        if not lock.acquire(timeout=self.wait):
            raise LockTimeout(moderator_id, self.wait)
        return lock

    def _release(self, moderator_id: int, lock) -> None:
        try:
            lock.release()
        except LockError as e:
            # Redis lock expired before release; the TTL already freed it
            logger.warning("moderator_lock_expired", moderator_id=moderator_id, error=str(e))
        except RedisError as e:
            # Unreachable store; the lock TTL frees the key
            logger.warning("moderator_lock_release_failed", moderator_id=moderator_id, error=str(e))

    @contextmanager
    def hold(self, moderator_ids: Iterable[int]) -> Iterator[List[int]]:
        """
        Hold the locks of every given moderator for the duration of the block.

        Yields:
            The sorted, de-duplicated moderator ids that are locked.
        """
        ids = sorted(set(moderator_ids))
        acquired = []
        try:
            for moderator_id in ids:
                acquired.append((moderator_id, self._acquire(moderator_id)))
            yield ids
        finally:
            for moderator_id, lock in reversed(acquired):
                self._release(moderator_id, lock)


def build_lock_registry(backend: str = "auto", timeout: float = 30.0, wait: float = 10.0) -> ModeratorLockRegistry:
    """
    Create a registry for the requested backend.

    "auto" uses Redis when reachable. "redis" falls back to memory with a
    warning if Redis is down; locks then only serialize within this process.
    """
    conn = None
    if backend in ("auto", "redis"):
        if redis_client.is_available:
            conn = redis_client.client
        elif backend == "redis":
            logger.warning("redis_lock_backend_unavailable", fallback="memory")

    registry = ModeratorLockRegistry(redis_conn=conn, timeout=timeout, wait=wait)
    logger.info("moderator_locks_ready", backend=registry.backend)
    return registry


@lru_cache(maxsize=1)
def get_lock_registry() -> ModeratorLockRegistry:
    """Get the process-wide lock registry built from settings."""
    settings = get_settings()
    return build_lock_registry(
        backend=settings.routing_lock_backend,
        timeout=settings.routing_lock_timeout,
        wait=settings.routing_lock_wait,
    )


__all__ = ["ModeratorLockRegistry", "build_lock_registry", "get_lock_registry"]
