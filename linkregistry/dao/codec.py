"""JSON codec for the persisted entry collection.

The whole registry is stored as a single JSON document:

    {
        "version": 1,
        "entries": [
            {
                "code": "abc123",
                "target": "https://example.com",
                "created_at": "2025-10-15T12:00:00.123456+00:00",
                "expires_at": "2025-10-15T12:30:00.123456+00:00",
                "validity_minutes": 30,
                "clicks": [
                    {"timestamp": "...", "source": "Direct", "location": "Berlin, DE", "agent": "..."}
                ]
            }
        ]
    }

Timestamps are ISO-8601 with microsecond precision, so click ordering
survives a round trip.

Functions:
    dump_entries(entries) -> str
        Serialize an entry collection into a JSON document.
    load_entries(blob) -> list[EntryModel]
        Deserialize a JSON document into an entry collection.
"""

import json
from collections.abc import Sequence

from linkregistry.models import EntryModel
from linkregistry.dao.exceptions import DataStoreError
from linkregistry.constants import SNAPSHOT_VERSION


__all__ = ['dump_entries', 'load_entries']


def dump_entries(entries: Sequence[EntryModel]) -> str:
    return json.dumps(
        {
            'version': SNAPSHOT_VERSION,
            'entries': [entry.to_dict() for entry in entries],
        }
    )


def load_entries(blob: str | bytes) -> list[EntryModel]:
    """Deserialize a JSON snapshot into entries

    Args:
        blob (str | bytes):
            JSON document produced by dump_entries().

    Returns:
        list[EntryModel]:
            Entries in stored order.

    Raises:
        DataStoreError:
            If the document isn't valid JSON, has an unknown version or
            holds malformed entries.
    """
    try:
        document = json.loads(blob)
    except json.JSONDecodeError as e:
        raise DataStoreError('Stored registry snapshot is not valid JSON.') from e

    if not isinstance(document, dict) or document.get('version') != SNAPSHOT_VERSION:
        raise DataStoreError(f'Unsupported registry snapshot (expected version {SNAPSHOT_VERSION}).')

    try:
        return [EntryModel.from_dict(item) for item in document.get('entries', [])]
    except (KeyError, TypeError, ValueError) as e:
        raise DataStoreError(f'Stored registry snapshot holds a malformed entry ({e!r}).') from e
