"""Unit tests for the Registry service

Test coverage includes:

1. Shortening
   - Ensures expires_at is exactly created_at + validity_minutes.
   - Confirms generated shortcodes are 6 Base62 characters and pairwise unique.
   - Confirms requested shortcodes are used verbatim and duplicates raise DuplicateCodeError.
   - Ensures malformed input raises InvalidInputError without side effects.
   - Validates collision retries, shortcode widening and space exhaustion.

2. Resolution
   - Ensures live shortcodes resolve and record exactly one click per call.
   - Confirms missing and expired shortcodes return None without recording clicks.
   - Validates fallback click labels and distinct log reasons.

3. Listing and retention
   - Ensures entries are listed most recent first.
   - Confirms expired entries stay listed for 24 hours, then get purged and free their shortcode.
   - Confirms the registry saves after a purge only if something was removed.

4. Persistence
   - Ensures a reloaded registry reproduces every entry and click.
   - Confirms save failures raise PersistenceError but keep the in-memory effect.
   - Confirms load failures raise PersistenceError.

5. Configuration
   - Validates policy parameters and construction from the app config.

6. Concurrency
   - Ensures concurrent callers can't create duplicate shortcodes or lose clicks.

7. Logging
   - Ensures failing log filters and handlers never abort an operation or mask its errors.
"""

import re
import random
import logging
import threading
from datetime import datetime, timedelta, UTC

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from linkregistry.constants import CLICK_SOURCES, CLICK_LOCATIONS
from linkregistry.dao import EntryMemoryDAO
from linkregistry.dao.exceptions import DataStoreError
from linkregistry.exceptions import (
    BadConfigurationError,
    DuplicateCodeError,
    InvalidInputError,
    PersistenceError,
    ShortcodeSpaceExhaustedError,
)
from linkregistry.models import EntryModel
from linkregistry.registry import Registry
from linkregistry.registry import registry as registry_module


NOW = datetime(2025, 10, 15, 12, 0, 0, tzinfo=UTC)


# -------------------------------
# 1. Shortening
# -------------------------------


@pytest.mark.parametrize('validity_minutes', [1, 30, 90, 1440, 525_600])
def test_shorten_computes_expiry_from_validity(registry, validity_minutes):
    """Ensure expires_at - created_at equals the requested validity exactly."""
    entry = registry.shorten('https://example.com/article/123', validity_minutes=validity_minutes)

    assert entry.created_at == NOW
    assert entry.expires_at - entry.created_at == timedelta(minutes=validity_minutes)
    assert entry.validity_minutes == validity_minutes
    assert entry.clicks == ()


def test_shorten_uses_default_validity(registry):
    """Ensure validity defaults to 30 minutes."""
    entry = registry.shorten('https://example.com')
    assert entry.validity_minutes == 30
    assert entry.expires_at == NOW + timedelta(minutes=30)


def test_shorten_generates_base62_shortcode(registry):
    """Ensure generated shortcodes are 6 alphanumeric characters."""
    entry = registry.shorten('https://example.com')
    assert re.fullmatch(r'[A-Za-z0-9]{6}', entry.code)
    assert entry.code in registry


def test_shorten_persists_before_returning(registry, store):
    """Ensure the created entry is saved before shorten() returns."""
    entry = registry.shorten('https://example.com')
    reloaded = EntryMemoryDAO(store=store, prefix='testapp:test').load()
    assert reloaded == [entry]


def test_generated_shortcodes_are_unique(registry):
    """Ensure many generated shortcodes never collide."""
    codes = [registry.shorten(f'https://example.com/{i}').code for i in range(500)]
    assert len(set(codes)) == 500
    assert len(registry) == 500


def test_shorten_with_requested_code(registry):
    """Ensure a requested shortcode is used verbatim."""
    entry = registry.shorten('https://example.com', validity_minutes=5, requested_code='abc123')
    assert entry.code == 'abc123'
    assert registry.get('abc123') == entry


def test_shorten_with_duplicate_requested_code(registry):
    """Ensure a duplicate requested shortcode raises and leaves the registry unchanged."""
    registry.shorten('https://example.com/first', requested_code='abc123')

    with pytest.raises(DuplicateCodeError, match=re.escape("Shortcode 'abc123' already exists.")):
        registry.shorten('https://example.com/second', requested_code='abc123')

    assert len(registry) == 1
    assert registry.get('abc123').target == 'https://example.com/first'


def test_shorten_rejects_code_held_by_expired_entry(registry, frozen_time):
    """Ensure expired-but-retained entries still occupy their shortcode."""
    registry.shorten('https://example.com', validity_minutes=1, requested_code='abc123')
    frozen_time.tick(delta=timedelta(hours=2))

    with pytest.raises(DuplicateCodeError):
        registry.shorten('https://example.com', requested_code='abc123')


@pytest.mark.parametrize(
    'target, validity_minutes, requested_code',
    [
        ('', 30, None),
        ('   ', 30, None),
        ('example.com/article', 30, None),
        ('not a url', 30, None),
        ('https://', 30, None),
        (' https://example.com', 30, None),
        ('https://example.com', 0, None),
        ('https://example.com', -5, None),
        ('https://example.com', True, None),
        ('https://example.com', 10**10, None),
        ('https://example.com', 10**13, None),
        ('https://example.com', 30, ''),
        ('https://example.com', 30, 'abc-123'),
        ('https://example.com', 30, 'a' * 21),
        ('https://example.com', 30, 'ÄÖÜ123'),
        ('https://example.com', 30, 'abc 123'),
    ],
)
def test_shorten_with_invalid_input(registry, store, target, validity_minutes, requested_code):
    """Ensure malformed input raises InvalidInputError without side effects."""
    with pytest.raises(InvalidInputError):
        registry.shorten(target, validity_minutes=validity_minutes, requested_code=requested_code)

    assert len(registry) == 0
    assert store == {}


@pytest.mark.parametrize('validity_minutes', [10**10, 10**13, 10**20])
def test_shorten_with_unrepresentable_expiry(registry, store, validity_minutes):
    """Ensure a validity reaching past the latest representable date is rejected as invalid input."""
    with pytest.raises(InvalidInputError, match='latest representable date'):
        registry.shorten('https://example.com', validity_minutes=validity_minutes)

    assert len(registry) == 0
    assert store == {}


def test_shorten_accepts_long_validity(registry):
    """Ensure a validity of a century is still accepted."""
    validity_minutes = 100 * 365 * 24 * 60
    entry = registry.shorten('https://example.com', validity_minutes=validity_minutes)
    assert entry.expires_at == NOW + timedelta(minutes=validity_minutes)


@pytest.mark.parametrize('requested_code', ['a', 'Z9', 'a' * 20])
def test_shorten_accepts_requested_code_length_bounds(registry, requested_code):
    """Ensure 1 and 20 character requested shortcodes are accepted."""
    assert registry.shorten('https://example.com', requested_code=requested_code).code == requested_code


def test_shorten_with_invalid_type(registry):
    """Ensure invalid parameter types raise TypeError or Beartype error."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        registry.shorten(12345)
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        registry.shorten('https://example.com', validity_minutes='30')


def test_shorten_retries_generated_collisions(registry, monkeypatch):
    """Ensure a colliding generated shortcode is redrawn, never handed out."""
    registry.shorten('https://example.com/taken', requested_code='abc123')
    draws = iter(['abc123', 'abc123', 'xyz789'])
    monkeypatch.setattr(registry_module, 'generate_shortcode', lambda rng, length: next(draws))

    entry = registry.shorten('https://example.com/new')

    assert entry.code == 'xyz789'
    assert registry.get('abc123').target == 'https://example.com/taken'


def test_shorten_widens_shortcode_after_repeated_collisions(dao, rng, frozen_time, monkeypatch):
    """Ensure the generated length grows by one after max_generation_attempts collisions."""
    registry = Registry(dao, rng=rng, max_generation_attempts=3)
    registry.shorten('https://example.com/taken', requested_code='aaaaaa')
    lengths = []

    def fake_generate(rng, length):
        lengths.append(length)
        return 'aaaaaa' if length == 6 else 'b' * length

    monkeypatch.setattr(registry_module, 'generate_shortcode', fake_generate)

    entry = registry.shorten('https://example.com/new')

    assert entry.code == 'bbbbbbb'
    assert lengths == [6, 6, 6, 7]


def test_shorten_raises_when_shortcode_space_is_exhausted(dao, rng, frozen_time, monkeypatch):
    """Ensure generation gives up once every allowed length keeps colliding."""
    registry = Registry(dao, rng=rng, shortcode_length=20, max_generation_attempts=2)
    registry.shorten('https://example.com/taken', requested_code='a' * 20)
    monkeypatch.setattr(registry_module, 'generate_shortcode', lambda rng, length: 'a' * 20)

    with pytest.raises(ShortcodeSpaceExhaustedError):
        registry.shorten('https://example.com/new')

    assert len(registry) == 1


# -------------------------------
# 2. Resolution
# -------------------------------


def test_resolve_returns_target_and_records_click(registry):
    """Ensure resolving a live shortcode returns its target and records one click."""
    entry = registry.shorten('https://example.com/article/123', requested_code='abc123')

    target = registry.resolve('abc123', agent='Mozilla/5.0', source='Email', location='Berlin, DE')

    assert target == entry.target
    clicks = registry.get('abc123').clicks
    assert len(clicks) == 1
    assert clicks[0].timestamp == NOW
    assert clicks[0].source == 'Email'
    assert clicks[0].location == 'Berlin, DE'
    assert clicks[0].agent == 'Mozilla/5.0'


def test_resolve_appends_one_click_per_call(registry, frozen_time):
    """Ensure every resolution appends exactly one click, in chronological order."""
    registry.shorten('https://example.com', requested_code='abc123')

    for _ in range(3):
        frozen_time.tick(delta=timedelta(seconds=1))
        assert registry.resolve('abc123', agent='curl/8.5.0') == 'https://example.com'

    clicks = registry.get('abc123').clicks
    assert registry.get('abc123').click_count == 3
    assert [click.timestamp for click in clicks] == [NOW + timedelta(seconds=s) for s in (1, 2, 3)]


def test_resolve_samples_fallback_labels(registry):
    """Ensure missing source and location are sampled from the fallback enumerations."""
    registry.shorten('https://example.com', requested_code='abc123')
    registry.resolve('abc123', agent='curl/8.5.0')

    click = registry.get('abc123').clicks[0]
    assert click.source in CLICK_SOURCES
    assert click.location in CLICK_LOCATIONS
    assert click.agent == 'curl/8.5.0'


def test_resolve_persists_click(registry, store):
    """Ensure recorded clicks are saved before resolve() returns."""
    registry.shorten('https://example.com', requested_code='abc123')
    registry.resolve('abc123', agent='curl/8.5.0', source='Direct', location='Tokyo, JP')

    reloaded = EntryMemoryDAO(store=store, prefix='testapp:test').load()
    assert reloaded[0].click_count == 1
    assert reloaded[0].clicks[0].location == 'Tokyo, JP'


def test_resolve_missing_shortcode(mock_dao):
    """Ensure an unknown shortcode resolves to None without saving."""
    registry = Registry(mock_dao)
    assert registry.resolve('nope42', agent='curl/8.5.0') is None
    mock_dao.save.assert_not_called()


def test_resolve_expired_shortcode(registry, frozen_time):
    """Ensure an expired shortcode resolves to None and records no click."""
    registry.shorten('https://example.com', validity_minutes=10, requested_code='abc123')
    frozen_time.tick(delta=timedelta(minutes=10, seconds=1))

    assert registry.resolve('abc123', agent='curl/8.5.0') is None
    assert registry.get('abc123').click_count == 0


def test_resolve_at_exact_expiry_is_still_live(registry, frozen_time):
    """Ensure a shortcode still resolves at the very moment it expires."""
    registry.shorten('https://example.com', validity_minutes=10, requested_code='abc123')
    frozen_time.tick(delta=timedelta(minutes=10))

    assert registry.resolve('abc123', agent='curl/8.5.0') == 'https://example.com'


def test_resolve_logs_distinct_failure_reasons(registry, frozen_time, caplog):
    """Ensure missing and expired shortcodes are told apart in the logs only."""
    registry.shorten('https://example.com', validity_minutes=1, requested_code='abc123')
    frozen_time.tick(delta=timedelta(minutes=2))

    with caplog.at_level(logging.WARNING, logger='linkregistry.registry.registry'):
        assert registry.resolve('abc123', agent='curl/8.5.0') is None
        assert registry.resolve('nope42', agent='curl/8.5.0') is None

    reasons = [record.reason for record in caplog.records if hasattr(record, 'reason')]
    assert reasons == ['expired', 'not_found']


def test_resolve_with_invalid_type(registry):
    """Ensure invalid shortcode types raise TypeError or Beartype error."""
    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        registry.resolve(12345, agent='curl/8.5.0')


def test_resolve_requires_agent(registry):
    """Ensure the client identifier must be supplied with every resolution."""
    registry.shorten('https://example.com', requested_code='abc123')

    with pytest.raises((TypeError, BeartypeCallHintParamViolation)):
        registry.resolve('abc123')

    assert registry.get('abc123').click_count == 0


# -------------------------------
# 3. Listing and retention
# -------------------------------


def test_list_entries_most_recent_first(registry, frozen_time):
    """Ensure entries are listed by creation time, newest first."""
    for code in ('first', 'second', 'third'):
        registry.shorten('https://example.com', requested_code=code)
        frozen_time.tick(delta=timedelta(minutes=1))

    assert [entry.code for entry in registry.list_entries()] == ['third', 'second', 'first']


def test_list_entries_keeps_recently_expired(registry, frozen_time):
    """Ensure entries expired for less than 24 hours are still listed."""
    registry.shorten('https://example.com', validity_minutes=1, requested_code='abc123')
    frozen_time.tick(delta=timedelta(hours=23))

    entries = registry.list_entries()

    assert [entry.code for entry in entries] == ['abc123']
    assert entries[0].is_expired(datetime.now(UTC))


def test_list_entries_keeps_entry_at_retention_boundary(registry, frozen_time):
    """Ensure an entry expired for exactly 24 hours is still retained."""
    registry.shorten('https://example.com', validity_minutes=1, requested_code='abc123')
    frozen_time.tick(delta=timedelta(minutes=1, hours=24))

    assert [entry.code for entry in registry.list_entries()] == ['abc123']


def test_list_entries_purges_stale_entries_and_frees_code(registry, frozen_time, store):
    """Ensure entries expired for more than 24 hours are purged and their shortcode freed."""
    registry.shorten('https://example.com/old', validity_minutes=1, requested_code='abc123')
    registry.shorten('https://example.com/live', validity_minutes=60 * 48, requested_code='keep42')
    frozen_time.tick(delta=timedelta(minutes=1, hours=24, seconds=1))

    assert [entry.code for entry in registry.list_entries()] == ['keep42']
    assert 'abc123' not in registry
    assert [entry.code for entry in EntryMemoryDAO(store=store, prefix='testapp:test').load()] == ['keep42']

    reused = registry.shorten('https://example.com/new', requested_code='abc123')
    assert reused.target == 'https://example.com/new'


def test_purge_expired_is_idempotent(registry, frozen_time):
    """Ensure a second purge removes nothing."""
    registry.shorten('https://example.com', validity_minutes=1, requested_code='abc123')
    frozen_time.tick(delta=timedelta(days=2))

    assert registry.purge_expired() == 1
    assert registry.purge_expired() == 0


def test_list_entries_saves_only_after_removal(mock_dao, frozen_time):
    """Ensure listing without purgeable entries doesn't write to the data store."""
    registry = Registry(mock_dao)
    registry.shorten('https://example.com', validity_minutes=1, requested_code='abc123')
    assert mock_dao.save.call_count == 1

    registry.list_entries()
    assert mock_dao.save.call_count == 1

    frozen_time.tick(delta=timedelta(days=2))
    registry.list_entries()
    assert mock_dao.save.call_count == 2
    mock_dao.save.assert_called_with([])


def test_list_entries_does_not_touch_clicks(registry):
    """Ensure listing doesn't record clicks."""
    registry.shorten('https://example.com', requested_code='abc123')
    registry.resolve('abc123', agent='curl/8.5.0')

    registry.list_entries()
    registry.list_entries()

    assert registry.get('abc123').click_count == 1


def test_get_returns_none_for_unknown_code(registry):
    """Ensure get() returns None for unknown shortcodes."""
    assert registry.get('nope42') is None


# -------------------------------
# 4. Persistence
# -------------------------------


def test_reloaded_registry_reproduces_entries(registry, store, frozen_time):
    """Ensure a registry built over the same store sees identical entries and clicks."""
    registry.shorten('https://example.com/a', validity_minutes=15, requested_code='alpha1')
    frozen_time.tick(delta=timedelta(microseconds=250))
    registry.shorten('https://example.com/b', validity_minutes=45)
    registry.resolve('alpha1', agent='Mozilla/5.0', source='Referral', location='Sydney, AU')
    frozen_time.tick(delta=timedelta(microseconds=1))
    registry.resolve('alpha1', agent='curl/8.5.0', source='Direct', location='Toronto, CA')

    reloaded = Registry(EntryMemoryDAO(store=store, prefix='testapp:test'))

    assert reloaded.list_entries() == registry.list_entries()
    assert reloaded.get('alpha1').clicks == registry.get('alpha1').clicks


def test_shorten_with_save_failure_keeps_entry(mock_dao, frozen_time):
    """Ensure a failed save raises PersistenceError but keeps the entry in memory."""
    mock_dao.save.side_effect = DataStoreError("Can't connect to Redis at redis.test:6379/0.")
    registry = Registry(mock_dao)

    with pytest.raises(PersistenceError) as exc_info:
        registry.shorten('https://example.com', requested_code='abc123')

    assert isinstance(exc_info.value.result, EntryModel)
    assert exc_info.value.result.code == 'abc123'
    assert 'abc123' in registry
    assert isinstance(exc_info.value.__cause__, DataStoreError)


def test_resolve_with_save_failure_keeps_click(mock_dao, frozen_time):
    """Ensure a failed save after a click raises PersistenceError but keeps the click."""
    registry = Registry(mock_dao)
    registry.shorten('https://example.com', requested_code='abc123')
    mock_dao.save.side_effect = DataStoreError('boom')

    with pytest.raises(PersistenceError) as exc_info:
        registry.resolve('abc123', agent='curl/8.5.0')

    assert exc_info.value.result == 'https://example.com'
    assert registry.get('abc123').click_count == 1


def test_list_entries_with_save_failure_exposes_listing(mock_dao, frozen_time):
    """Ensure a failed save after a purge still exposes the purged listing."""
    registry = Registry(mock_dao)
    registry.shorten('https://example.com/old', validity_minutes=1, requested_code='old123')
    registry.shorten('https://example.com/new', validity_minutes=60 * 72, requested_code='new123')
    frozen_time.tick(delta=timedelta(days=2))
    mock_dao.save.side_effect = DataStoreError('boom')

    with pytest.raises(PersistenceError) as exc_info:
        registry.list_entries()

    assert [entry.code for entry in exc_info.value.result] == ['new123']
    assert 'old123' not in registry


def test_persistence_failure_is_logged(mock_dao, frozen_time, caplog):
    """Ensure persistence failures are logged as errors."""
    mock_dao.save.side_effect = DataStoreError('boom')
    registry = Registry(mock_dao)

    with caplog.at_level(logging.ERROR, logger='linkregistry.registry.registry'):
        with pytest.raises(PersistenceError):
            registry.shorten('https://example.com')

    assert [record.event for record in caplog.records if record.levelno >= logging.ERROR] == ['PERSISTENCE_FAILURE']


def test_load_failure_raises_persistence_error(mock_dao):
    """Ensure an unreadable store prevents the registry from starting."""
    mock_dao.load.side_effect = DataStoreError('Stored registry snapshot is not valid JSON.')

    with pytest.raises(PersistenceError, match='not valid JSON'):
        Registry(mock_dao)


# -------------------------------
# 5. Configuration
# -------------------------------


@pytest.mark.parametrize(
    'kwargs',
    [
        {'default_validity_minutes': 0},
        {'shortcode_length': 0},
        {'shortcode_length': 21},
        {'max_generation_attempts': 0},
        {'retention': timedelta(hours=-1)},
    ],
)
def test_invalid_policy_raises_error(mock_dao, kwargs):
    """Ensure out-of-range policy parameters raise BadConfigurationError."""
    with pytest.raises(BadConfigurationError):
        Registry(mock_dao, **kwargs)


def test_from_config(mock_dao, frozen_time):
    """Ensure the registry section of the app config is applied."""
    registry = Registry.from_config(
        mock_dao,
        {
            'default_validity_minutes': 5,
            'shortcode_length': 8,
            'max_generation_attempts': 3,
            'retention_hours': 12,
        },
    )

    entry = registry.shorten('https://example.com')

    assert registry.retention == timedelta(hours=12)
    assert registry.max_generation_attempts == 3
    assert len(entry.code) == 8
    assert entry.validity_minutes == 5


def test_injected_clock_and_rng(mock_dao):
    """Ensure the injected clock and random source drive timestamps and shortcodes."""
    moment = datetime(2030, 1, 1, tzinfo=UTC)
    first = Registry(mock_dao, clock=lambda: moment, rng=random.Random(7)).shorten('https://example.com')
    second = Registry(mock_dao, clock=lambda: moment, rng=random.Random(7)).shorten('https://example.com')

    assert first.created_at == moment
    assert first.code == second.code


# -------------------------------
# 6. Concurrency
# -------------------------------


def test_concurrent_requested_codes_admit_one_winner(registry):
    """Ensure concurrent shorten() calls with the same shortcode create it once."""
    outcomes = []
    barrier = threading.Barrier(8)

    def worker(i):
        barrier.wait()
        try:
            registry.shorten(f'https://example.com/{i}', requested_code='race42')
        except DuplicateCodeError:
            outcomes.append('duplicate')
        else:
            outcomes.append('created')

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ['created'] + ['duplicate'] * 7
    assert len(registry) == 1


def test_concurrent_resolutions_keep_every_click(registry):
    """Ensure concurrent resolve() calls never lose a click."""
    registry.shorten('https://example.com', requested_code='abc123')

    def worker():
        for _ in range(25):
            registry.resolve('abc123', agent='load-test')

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert registry.get('abc123').click_count == 200


# -------------------------------
# 7. Logging
# -------------------------------


class FailingFilter(logging.Filter):
    def filter(self, record):
        raise RuntimeError('log sink unavailable')


class FailingHandler(logging.Handler):
    def emit(self, record):
        raise RuntimeError('log sink unavailable')


@pytest.fixture(params=['filter', 'handler'])
def failing_log_sink(request):
    """Attach a raising filter or handler to the registry logger."""
    registry_logger = logging.getLogger('linkregistry.registry.registry')
    level = registry_logger.level
    registry_logger.setLevel(logging.DEBUG)

    if request.param == 'filter':
        sink = FailingFilter()
        registry_logger.addFilter(sink)
    else:
        sink = FailingHandler()
        registry_logger.addHandler(sink)

    yield sink

    registry_logger.removeFilter(sink)
    registry_logger.removeHandler(sink)
    registry_logger.setLevel(level)


def test_failing_log_sink_never_aborts_operations(registry, store, failing_log_sink, capsys):
    """Ensure shorten(), resolve() and list_entries() complete while every log call fails."""
    registry.shorten('https://example.com', requested_code='abc123')

    assert registry.resolve('abc123', agent='curl/8.5.0') == 'https://example.com'
    assert registry.resolve('nope42', agent='curl/8.5.0') is None
    assert [entry.code for entry in registry.list_entries()] == ['abc123']

    reloaded = EntryMemoryDAO(store=store, prefix='testapp:test').load()
    assert reloaded[0].click_count == 1
    assert 'Logging error in linkregistry.registry.registry' in capsys.readouterr().err


def test_failing_log_sink_keeps_invalid_input_error(registry, failing_log_sink):
    """Ensure a rejected request still raises InvalidInputError, not the logging error."""
    with pytest.raises(InvalidInputError):
        registry.shorten('example.com')


def test_failing_log_sink_keeps_persistence_error(mock_dao, frozen_time, failing_log_sink):
    """Ensure a save failure still surfaces as PersistenceError with its result."""
    mock_dao.save.side_effect = DataStoreError('boom')
    registry = Registry(mock_dao)

    with pytest.raises(PersistenceError) as exc_info:
        registry.shorten('https://example.com', requested_code='abc123')

    assert exc_info.value.result.code == 'abc123'
    assert 'abc123' in registry
