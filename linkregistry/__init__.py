from linkregistry.models import EntryModel, ClickEventModel
from linkregistry.registry import Registry, create_registry


__all__ = [
    'EntryModel',
    'ClickEventModel',
    'Registry',
    'create_registry',
]
