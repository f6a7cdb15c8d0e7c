"""
Redis client with connection pooling.

Provides a singleton Redis client used for cross-process moderator locks,
with graceful degradation when Redis is unavailable.
"""

from typing import Optional

import redis
from redis.exceptions import ConnectionError, TimeoutError

from qa_routing.config import get_settings
from qa_routing.logging import get_logger

logger = get_logger("redis")


class RedisClient:
    """
    Redis client with connection pooling.

    Features:
    - Singleton pattern for connection reuse
    - Connection pooling (configurable max connections)
    - Graceful fallback when Redis is unavailable

    Usage:
        from qa_routing.redis_client import redis_client

        if redis_client.is_available:
            lock = redis_client.client.lock("key", timeout=30)
    """

    _instance: Optional["RedisClient"] = None
    _pool: Optional[redis.ConnectionPool] = None
    _initialized: bool = False
    _available: bool = False

    def __new__(cls) -> "RedisClient":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        # Prevent re-initialization
        pass

    def initialize(self, force: bool = False) -> bool:
        """
        Initialize Redis connection pool.

        Args:
            force: Force re-initialization even if already initialized

        Returns:
            True if Redis is available and connected, False otherwise
        """
        if self._initialized and not force:
            return self._available

        try:
            settings = get_settings()

            self._pool = redis.ConnectionPool(
                host=settings.redis_host,
                port=settings.redis_port,
                db=settings.redis_db,
                password=settings.redis_password,
                max_connections=50,
                socket_timeout=5,
                socket_connect_timeout=5,
            )

            # Test connection
            client = redis.Redis(connection_pool=self._pool)
            client.ping()

            self._available = True
            self._initialized = True
            logger.info("redis_connected", host=settings.redis_host, port=settings.redis_port)
            return True

        except (ConnectionError, TimeoutError) as e:
            logger.warning("redis_connection_failed", error=str(e))
            self._available = False
            self._initialized = True
            return False
        except Exception as e:
            logger.warning("redis_init_error", error=str(e))
            self._available = False
            self._initialized = True
            return False

    @property
    def client(self) -> Optional[redis.Redis]:
        """Get Redis client from pool."""
        if not self._initialized:
            self.initialize()

        if not self._available or self._pool is None:
            return None

        return redis.Redis(connection_pool=self._pool)

    @property
    def is_available(self) -> bool:
        """Check if Redis is available."""
        if not self._initialized:
            self.initialize()
        return self._available

    def close(self) -> None:
        """Disconnect the pool and forget the connection state."""
        if self._pool is not None:
            self._pool.disconnect()
        self._pool = None
        self._initialized = False
        self._available = False


# Global singleton
redis_client = RedisClient()


__all__ = ["RedisClient", "redis_client"]
