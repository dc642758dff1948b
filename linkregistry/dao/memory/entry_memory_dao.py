"""In-process blob store implementation of EntryBaseDAO.

Intended for local runs and tests. Entries go through the same JSON codec as
the Redis backend, so a save/load cycle here behaves exactly like one against
Redis, minus the network.

Example:
    >>> store = {}
    >>> dao = EntryMemoryDAO(store=store, prefix='linkregistry:local')
    >>> dao.save([entry]).load()
    [EntryModel(code='abc123', ...)]
    >>> list(store)
    ['linkregistry:local:registry:entries']
"""

from typing import Optional
from collections.abc import MutableMapping, Sequence

from beartype import beartype

from linkregistry.models import EntryModel
from linkregistry.dao.base import EntryBaseDAO
from linkregistry.dao.codec import dump_entries, load_entries


class EntryMemoryDAO(EntryBaseDAO):
    """DAO keeping the encoded entry collection in a plain mapping.

    Attributes:
        store (MutableMapping[str, str]):
            Backing key-value store. Pass a shared dict to let several DAOs
            (or a reloaded registry) see the same snapshot.
        key (str):
            Key holding the snapshot.
    """

    def __init__(self, store: Optional[MutableMapping[str, str]] = None, prefix: Optional[str] = None):
        self.store = {} if store is None else store
        self.key = 'registry:entries' if prefix is None else f'{prefix}:registry:entries'

    def load(self, **kwargs) -> list[EntryModel]:
        blob = self.store.get(self.key)
        return [] if blob is None else load_entries(blob)

    @beartype
    def save(self, entries: Sequence[EntryModel], **kwargs) -> 'EntryMemoryDAO':
        self.store[self.key] = dump_entries(entries)
        return self
