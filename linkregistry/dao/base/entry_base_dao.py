"""Abstract base class for registry entry data access objects (DAOs).

This class establishes a consistent contract for all entry DAO implementations,
regardless of the underlying blob store (e.g., Redis, an in-process dict).

The registry treats persistence as a single blob: the whole ordered entry
collection is loaded once and written back after every mutation.

Responsibilities:
    - Provide an interface for loading and saving the EntryModel collection.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from linkregistry.dao import EntryRedisDAO
        >>> dao = EntryRedisDAO(prefix='linkregistry:dev')

        >>> entries = dao.load()
        >>> len(entries)
        0

        >>> dao.save([*entries, new_entry])
        <EntryRedisDAO>
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from linkregistry.models import EntryModel


class EntryBaseDAO(ABC):
    """Interface for registry entry data access objects (DAOs).

    Methods:
        load(**kwargs) -> list[EntryModel]:
            Read the stored entry collection, in stored order.
            Returns an empty list if nothing was stored yet.
            Raises DataStoreError on connection, read or decoding failure.

        save(entries: Sequence[EntryModel], **kwargs) -> EntryBaseDAO:
            Replace the stored entry collection.
            Raises DataStoreError on connection or write failure.

    Subclassing:
        Datastore-specific implementations (e.g., EntryRedisDAO or
        EntryMemoryDAO) must extend this class and implement all
        abstract methods.
    """

    @abstractmethod
    def load(self, **kwargs) -> list[EntryModel]:
        """Load the stored entry collection.

        Args:
            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            list[EntryModel]: Stored entries in stored order (possibly empty).

        Raises:
            DataStoreError:
                If there is an error in the data store or the snapshot is unreadable.
        """
        pass

    @abstractmethod
    def save(self, entries: Sequence[EntryModel], **kwargs) -> 'EntryBaseDAO':
        """Replace the stored entry collection.

        Args:
            entries (Sequence[EntryModel]):
                Complete ordered entry collection to persist.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            EntryBaseDAO: self (for method chaining)

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
