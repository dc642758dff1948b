from linkregistry.dao.redis.redis_key_schema import RedisKeySchema
from linkregistry.dao.redis.mixins import RedisClientMixin
from linkregistry.dao.redis.entry_redis_dao import EntryRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'EntryRedisDAO',
]
