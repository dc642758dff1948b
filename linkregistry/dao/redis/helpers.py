import functools
from typing import Any, TypeVar
from collections.abc import Callable

import redis

from linkregistry.dao.exceptions import DataStoreError


__all__ = ['connection_label', 'handle_redis_connection_error']


F = TypeVar('F', bound=Callable[..., Any])


def connection_label(client: redis.Redis) -> str:
    """Return `host:port/db` for the server a client talks to."""
    info = client.connection_pool.connection_kwargs
    return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"


def handle_redis_connection_error(method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    The wrapped method's owner must expose its client as `self.redis`.

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise
            redis.exceptions.ConnectionError or redis.exceptions.TimeoutError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues with Redis.

    Example:
        >>> @handle_redis_connection_error
        ... def load(self):
        ...     return self.redis.get('registry:entries')
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to Redis at {connection_label(self.redis)}.") from e

    return wrapper
