import random
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from linkregistry.dao import EntryBaseDAO, EntryMemoryDAO
from linkregistry.registry import Registry


@pytest.fixture
def frozen_time():
    """Freeze the clock at 2025-10-15 12:00:00 UTC; tick() it to move forward."""
    with freeze_time('2025-10-15 12:00:00') as frozen:
        yield frozen


@pytest.fixture
def store() -> dict[str, str]:
    """Shared blob store, so a second DAO can reload what the first one saved."""
    return {}


@pytest.fixture
def dao(store) -> EntryMemoryDAO:
    return EntryMemoryDAO(store=store, prefix='testapp:test')


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def registry(dao, rng, frozen_time) -> Registry:
    return Registry(dao, rng=rng)


@pytest.fixture
def mock_dao() -> EntryBaseDAO:
    """Mock DAO starting from an empty collection."""
    _dao = MagicMock(spec=EntryBaseDAO)
    _dao.load.return_value = []
    _dao.save.return_value = _dao
    return _dao
