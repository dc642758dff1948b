from linkregistry.dao.memory.entry_memory_dao import EntryMemoryDAO


__all__ = ['EntryMemoryDAO']
