"""Redis client setup shared by Redis-backed DAOs.

The client is built from the `backends.redis` section of the app config
(see linkregistry.utils.config), or injected directly in tests:

    backends:
        redis:
            host: localhost
            port: 6379
            db: 0
            username: null
            password: null

Example:
    >>> class EntryRedisDAO(RedisClientMixin, EntryBaseDAO):
    ...     pass
    ...
    >>> dao = EntryRedisDAO(redis_config={'host': 'redis.internal'}, prefix='linkregistry:prod')
    >>> dao.keys.entries_key()
    'linkregistry:prod:registry:entries'
"""

from typing import Any
from collections.abc import Mapping

import redis

from linkregistry.dao.redis.redis_key_schema import RedisKeySchema
from linkregistry.dao.redis.helpers import handle_redis_connection_error


class RedisClientMixin:
    """Give a DAO a healthchecked Redis client and its key schema.

    Attributes:
        redis (redis.Redis):
            Client connected to the configured server. Responses are decoded to str.
        keys (RedisKeySchema):
            Namespaced key names for this app and environment.
    """

    def __init__(
        self,
        redis_config: Mapping[str, Any] | None = None,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ):
        """Connect to Redis and PING it once

        Args:
            redis_config (Mapping[str, Any] | None):
                `host`, `port`, `db`, `username` and `password` of the server.
                Missing or null settings fall back to localhost:6379/0 without auth.
            redis_client (redis.Redis | None):
                Ready client to use instead of building one from `redis_config`.
            prefix (str | None):
                Namespace for every key, e.g. 'linkregistry:prod'.

        Raises:
            DataStoreError: If the server doesn't answer the PING.
        """
        self.redis = redis_client if redis_client is not None else self._build_client(redis_config or {})
        self.keys = RedisKeySchema(prefix=prefix)
        self._healthcheck()

    @staticmethod
    def _build_client(redis_config: Mapping[str, Any]) -> redis.Redis:
        return redis.Redis(
            host=redis_config.get('host') or 'localhost',
            port=int(redis_config.get('port') or 6379),
            db=int(redis_config.get('db') or 0),
            username=redis_config.get('username'),
            password=redis_config.get('password'),
            decode_responses=True,
        )

    @handle_redis_connection_error
    def _healthcheck(self) -> bool:
        return bool(self.redis.ping())
