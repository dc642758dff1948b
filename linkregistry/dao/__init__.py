from linkregistry.dao.base import EntryBaseDAO
from linkregistry.dao.memory import EntryMemoryDAO
from linkregistry.dao.redis import EntryRedisDAO


__all__ = [
    'EntryBaseDAO',
    'EntryMemoryDAO',
    'EntryRedisDAO',
]
