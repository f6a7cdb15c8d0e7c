"""
Tests for the moderator lock registry.
"""

import threading

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import LockError

from qa_routing.exceptions import LockTimeout, PersistenceFailure
from qa_routing.routing import ModeratorLockRegistry, build_lock_registry


class FakeRedisLock:
    def __init__(self, name, acquired=True, fail_release=False, error=None):
        self.name = name
        self.acquired = acquired
        self.fail_release = fail_release
        self.error = error
        self.released = False

    def acquire(self):
        if self.error is not None:
            raise self.error
        return self.acquired

    def release(self):
        if self.fail_release:
            raise LockError("Cannot release an unlocked lock")
        self.released = True


class FakeRedis:
    def __init__(self, acquired=True, fail_release=False, error=None):
        self.acquired = acquired
        self.fail_release = fail_release
        self.error = error
        self.locks: list[FakeRedisLock] = []
        self.lock_kwargs: list[dict] = []

    def lock(self, name, **kwargs):
        lock = FakeRedisLock(name, self.acquired, self.fail_release, self.error)
        self.locks.append(lock)
        self.lock_kwargs.append(kwargs)
        return lock


class TestMemoryBackend:
    def test_hold_sorts_and_deduplicates(self):
        registry = ModeratorLockRegistry()
        with registry.hold([3, 1, 3, 2]) as ids:
            assert ids == [1, 2, 3]
        assert registry.backend == "memory"

    def test_released_after_exception(self):
        registry = ModeratorLockRegistry(wait=0.1)
        with pytest.raises(RuntimeError):
            with registry.hold([5]):
                raise RuntimeError("fail inside critical section")

        with registry.hold([5]) as ids:
            assert ids == [5]

    def test_timeout_when_held_elsewhere(self):
        registry = ModeratorLockRegistry(wait=0.05)
        holding = threading.Event()
        done = threading.Event()

        def holder():
            with registry.hold([1]):
                holding.set()
                done.wait(2)

        thread = threading.Thread(target=holder)
        thread.start()
        holding.wait(2)
        try:
            with pytest.raises(LockTimeout) as exc_info:
                with registry.hold([1, 2]):
                    pass
            assert exc_info.value.moderator_id == 1
            assert exc_info.value.code == "lock_timeout"
        finally:
            done.set()
            thread.join()

        # Nothing stays locked after the failed attempt
        with registry.hold([1, 2]):
            pass

    def test_disjoint_moderators_do_not_block(self):
        registry = ModeratorLockRegistry(wait=0.05)
        acquired = threading.Event()

        def other():
            with registry.hold([2]):
                acquired.set()

        with registry.hold([1]):
            thread = threading.Thread(target=other)
            thread.start()
            thread.join(1)

        assert acquired.is_set()

    def test_build_memory_registry(self):
        registry = build_lock_registry("memory", timeout=5, wait=1)
        assert registry.backend == "memory"
        assert registry.wait == 1


class TestRedisBackend:
    def test_uses_moderator_keys(self):
        fake = FakeRedis()
        registry = ModeratorLockRegistry(redis_conn=fake, timeout=30, wait=10)

        with registry.hold([2, 1]):
            pass

        assert registry.backend == "redis"
        assert [lock.name for lock in fake.locks] == [
            "routing:moderator:1:lock",
            "routing:moderator:2:lock",
        ]
        assert fake.lock_kwargs[0] == {"timeout": 30, "blocking_timeout": 10}
        assert all(lock.released for lock in fake.locks)

    def test_acquire_failure_raises_timeout(self):
        registry = ModeratorLockRegistry(redis_conn=FakeRedis(acquired=False), wait=0.5)

        with pytest.raises(LockTimeout):
            with registry.hold([7]):
                pass

    def test_expired_lock_release_is_logged_not_raised(self):
        registry = ModeratorLockRegistry(redis_conn=FakeRedis(fail_release=True))

        with registry.hold([1]) as ids:
            assert ids == [1]

    def test_connection_error_becomes_persistence_failure(self):
        fake = FakeRedis(error=RedisConnectionError("Redis went away"))
        registry = ModeratorLockRegistry(redis_conn=fake)

        with pytest.raises(PersistenceFailure) as exc_info:
            with registry.hold([1, 2]):
                pass

        assert exc_info.value.code == "persistence_failure"
        assert not isinstance(exc_info.value, LockTimeout)
        assert len(fake.locks) == 1
