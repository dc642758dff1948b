from linkregistry.registry.registry import Registry
from linkregistry.registry.factory import create_dao, create_registry


__all__ = [
    'Registry',
    'create_dao',
    'create_registry',
]
