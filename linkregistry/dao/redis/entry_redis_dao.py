"""Data Access Object (DAO) implementation for persisting the registry in Redis

This module provides a Redis-based implementation of EntryBaseDAO. The whole
entry collection lives as one JSON blob under a single (prefixed) key, so
every save replaces the snapshot atomically.

Responsibilities:
    - Load and decode the entry collection from Redis;
    - Encode and store the entry collection in Redis;
    - Raise DataStoreError on connectivity issues or corrupted snapshots.

Classes:
    EntryRedisDAO:
        DAO for storing and retrieving the EntryModel collection in a Redis datastore.

Example:
    >>> from linkregistry.dao.redis import EntryRedisDAO

    >>> dao = EntryRedisDAO(prefix="linkregistry:dev")
    >>> dao.load()
    []
    >>> dao.save([entry])
    <EntryRedisDAO>
    >>> dao.load()
    [EntryModel(code='abc123', target='https://example.com', ...)]
"""

import logging
from collections.abc import Sequence

from beartype import beartype

from linkregistry.models import EntryModel
from linkregistry.dao.base import EntryBaseDAO
from linkregistry.dao.codec import dump_entries, load_entries
from linkregistry.dao.redis.mixins import RedisClientMixin
from linkregistry.dao.redis.helpers import handle_redis_connection_error


logger = logging.getLogger(__name__)


class EntryRedisDAO(RedisClientMixin, EntryBaseDAO):
    """Redis-based Data Access Object (DAO) for the registry's entry collection

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        load(**kwargs) -> list[EntryModel]:
            GET the snapshot key and decode it. Missing key yields an empty list.
            Raises DataStoreError on connectivity issues or an unreadable snapshot.

        save(entries: Sequence[EntryModel], **kwargs) -> EntryRedisDAO:
            SET the snapshot key to the encoded collection.
            Raises DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    def load(self, **kwargs) -> list[EntryModel]:
        """Load the entry collection from Redis

        Returns:
            list[EntryModel]:
                Stored entries in stored order, empty if the key doesn't exist.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur or the snapshot can't be decoded.

        Example:
            >>> dao.load()
            [EntryModel(code='abc123', ...)]
        """
        entries_key = self.keys.entries_key()
        blob = self.redis.get(entries_key)
        if blob is None:
            logger.debug('No registry snapshot stored yet.', extra={'key': entries_key})
            return []

        entries = load_entries(blob)
        logger.debug('Loaded registry snapshot.', extra={'key': entries_key, 'entries': len(entries)})
        return entries

    @handle_redis_connection_error
    @beartype
    def save(self, entries: Sequence[EntryModel], **kwargs) -> 'EntryRedisDAO':
        """Store the entry collection in Redis

        The snapshot is written with a single SET, so concurrent readers see
        either the previous or the new collection, never a partial one.

        Args:
            entries (Sequence[EntryModel]):
                Complete ordered entry collection.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            EntryRedisDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If a Redis connection issue occurs.
        """
        entries_key = self.keys.entries_key()
        self.redis.set(entries_key, dump_entries(entries))
        logger.debug('Saved registry snapshot.', extra={'key': entries_key, 'entries': len(entries)})
        return self
