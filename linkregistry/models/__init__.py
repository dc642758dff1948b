from linkregistry.models.click_event_model import ClickEventModel
from linkregistry.models.entry_model import EntryModel


__all__ = [
    'ClickEventModel',
    'EntryModel',
]
