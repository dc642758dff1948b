"""Short-code redirection registry

The Registry owns the ordered collection of EntryModel records keyed by
shortcode. It is the only writer to its DAO: the collection is loaded once
at construction and saved back after every mutation.

Responsibilities:
    - Register targets under requested or randomly generated shortcodes;
    - Enforce shortcode uniqueness across live and expired-but-retained entries;
    - Resolve shortcodes while live and record one click per resolution;
    - Purge entries expired for longer than the retention window;
    - Surface persistence failures without rolling back the in-memory state.

Entry lifecycle (computed from `expires_at` at read time, never stored):

    Live  ──(now > expires_at)──►  Expired-Retained  ──(expires_at < now - retention)──►  Purged

Concurrency:
    Every operation runs under one re-entrant lock, so check-then-insert,
    find-then-append and filter-then-save sequences never interleave.

Logging:
    Records go through a guarded logger, so a failing handler or filter is
    reported on stderr and never interrupts an operation.

Example:
    >>> from linkregistry.dao import EntryMemoryDAO
    >>> registry = Registry(EntryMemoryDAO())
    >>> entry = registry.shorten('https://example.com/article/123', validity_minutes=60)
    >>> registry.resolve(entry.code, agent='curl/8.5.0')
    'https://example.com/article/123'
    >>> registry.get(entry.code).click_count
    1
    >>> registry.resolve('missing', agent='curl/8.5.0')
    >>> [e.code for e in registry.list_entries()] == [entry.code]
    True
"""

import random
import threading
from datetime import datetime, timedelta
from collections.abc import Callable

from beartype import beartype

from linkregistry.models import EntryModel, ClickEventModel
from linkregistry.dao.base import EntryBaseDAO
from linkregistry.dao.exceptions import DataStoreError
from linkregistry.types import RegistryConfig
from linkregistry.utils.helpers import utcnow, is_absolute_url
from linkregistry.utils.logging import get_guarded_logger
from linkregistry.utils.shortener import generate_shortcode, is_valid_shortcode
from linkregistry.constants import CLICK_SOURCES, CLICK_LOCATIONS, Policy, Shortcode
from linkregistry.exceptions import (
    BadConfigurationError,
    DuplicateCodeError,
    InvalidInputError,
    PersistenceError,
    ShortcodeSpaceExhaustedError,
)
from linkregistry.registry.constants import (
    ENTRY_CREATED,
    SHORTCODE_GENERATED,
    SHORTCODE_COLLISION,
    REQUESTED_CODE_ACCEPTED,
    DUPLICATE_CODE,
    INVALID_INPUT,
    REDIRECT_SUCCESS,
    SHORTCODE_NOT_FOUND,
    SHORTCODE_EXPIRED,
    ENTRIES_PURGED,
    PERSISTENCE_FAILURE,
)


logger = get_guarded_logger(__name__)


class Registry:
    """Registry of shortcode -> target URL entries

    Attributes:
        dao (EntryBaseDAO):
            Persistence collaborator. Loaded once, saved after every mutation.
        clock (Callable[[], datetime]):
            Source of the current time (timezone-aware).
        rng (random.Random):
            Source of randomness for shortcodes and fallback click labels.
        default_validity_minutes (int):
            Validity used when `shorten()` gets none.
        shortcode_length (int):
            Length of generated shortcodes.
        max_generation_attempts (int):
            Collisions tolerated at one length before the length widens.
        retention (timedelta):
            How long expired entries stay listed before being purged.

    Methods:
        shorten(target, validity_minutes=None, requested_code=None) -> EntryModel
        resolve(code, agent, source=None, location=None) -> str | None
        list_entries() -> list[EntryModel]
        get(code) -> EntryModel | None
        purge_expired() -> int
    """

    def __init__(
        self,
        dao: EntryBaseDAO,
        clock: Callable[[], datetime] = utcnow,
        rng: random.Random | None = None,
        default_validity_minutes: int = Policy.DEFAULT_VALIDITY_MINUTES,
        shortcode_length: int = Shortcode.DEFAULT_LENGTH,
        max_generation_attempts: int = Shortcode.MAX_GENERATION_ATTEMPTS,
        retention: timedelta = timedelta(hours=Policy.RETENTION_HOURS),
    ):
        """Initialize the registry and load the stored entries

        Raises:
            BadConfigurationError:
                If a policy parameter is out of range.
            PersistenceError:
                If the stored entries can't be loaded. The registry refuses
                to start empty over an unreadable store, since its next save
                would overwrite the snapshot.
        """
        if default_validity_minutes <= 0:
            raise BadConfigurationError(f'Default validity must be positive (given value: {default_validity_minutes}).')
        if not Shortcode.MIN_LENGTH <= shortcode_length <= Shortcode.MAX_LENGTH:
            raise BadConfigurationError(
                f'Shortcode length must be between {Shortcode.MIN_LENGTH} and {Shortcode.MAX_LENGTH} (given value: {shortcode_length}).'
            )
        if max_generation_attempts < 1:
            raise BadConfigurationError(f'Max generation attempts must be at least 1 (given value: {max_generation_attempts}).')
        if retention < timedelta(0):
            raise BadConfigurationError(f'Retention window must not be negative (given value: {retention}).')

        self.dao = dao
        self.clock = clock
        self.rng = rng if rng is not None else random.SystemRandom()
        self.default_validity_minutes = default_validity_minutes
        self.shortcode_length = shortcode_length
        self.max_generation_attempts = max_generation_attempts
        self.retention = retention

        self._lock = threading.RLock()

        try:
            stored = dao.load()
        except DataStoreError as e:
            logger.exception('Failed to load registry entries.', extra={'event': PERSISTENCE_FAILURE, 'operation': 'load'})
            raise PersistenceError(f'Failed to load registry entries: {e}') from e

        self._entries: dict[str, EntryModel] = {entry.code: entry for entry in stored}
        logger.info('Loaded registry entries.', extra={'entries': len(self._entries)})

    @classmethod
    def from_config(cls, dao: EntryBaseDAO, registry_config: RegistryConfig, **kwargs) -> 'Registry':
        """Build a registry from the `registry` section of the app config

        Example:
            >>> config = load_config()
            >>> Registry.from_config(EntryMemoryDAO(), config['registry'])
            <Registry>
        """
        return cls(
            dao,
            default_validity_minutes=int(registry_config['default_validity_minutes']),
            shortcode_length=int(registry_config['shortcode_length']),
            max_generation_attempts=int(registry_config['max_generation_attempts']),
            retention=timedelta(hours=float(registry_config['retention_hours'])),
            **kwargs,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, code: object) -> bool:
        with self._lock:
            return code in self._entries

    @beartype
    def shorten(self, target: str, validity_minutes: int | None = None, requested_code: str | None = None) -> EntryModel:
        """Register `target` under a requested or generated shortcode

        Args:
            target (str):
                Absolute URL to redirect to.
            validity_minutes (int | None):
                Positive number of minutes the shortcode stays live.
                Defaults to `default_validity_minutes`.
            requested_code (str | None):
                1-20 alphanumeric characters to use verbatim. A random
                shortcode is generated when omitted.

        Returns:
            EntryModel: the created entry, with its computed `expires_at`.

        Raises:
            InvalidInputError:
                If the target, validity or requested shortcode is malformed.
            DuplicateCodeError:
                If `requested_code` is already held by the registry.
            ShortcodeSpaceExhaustedError:
                If no free shortcode could be generated.
            PersistenceError:
                If saving fails. The entry is kept in memory and exposed as `result`.

        Example:
            >>> registry.shorten('https://example.com', validity_minutes=5, requested_code='abc123')
            EntryModel(code='abc123', target='https://example.com', ...)
        """
        validity_minutes = self.default_validity_minutes if validity_minutes is None else validity_minutes
        logger.info(
            'Shortening URL.',
            extra={'target': target, 'validityMinutes': validity_minutes, 'requestedCode': requested_code},
        )
        self._validate_shorten_request(target, validity_minutes, requested_code)

        with self._lock:
            if requested_code is not None:
                if requested_code in self._entries:
                    logger.warning('Requested shortcode already exists.', extra={'code': requested_code, 'event': DUPLICATE_CODE})
                    raise DuplicateCodeError(f"Shortcode '{requested_code}' already exists. Please choose a different one.")
                code = requested_code
                logger.info('Using requested shortcode.', extra={'code': code, 'event': REQUESTED_CODE_ACCEPTED})
            else:
                code = self._generate_unique_shortcode()

            now = self.clock()
            entry = EntryModel(
                code=code,
                target=target,
                created_at=now,
                expires_at=now + timedelta(minutes=validity_minutes),
                validity_minutes=validity_minutes,
            )
            self._entries[code] = entry
            self._save(operation='shorten', result=entry)

        logger.info('Shortened URL.', extra={'code': code, 'target': target, 'event': ENTRY_CREATED})
        return entry

    @beartype
    def resolve(self, code: str, agent: str, source: str | None = None, location: str | None = None) -> str | None:
        """Resolve a live shortcode to its target and record a click

        Unknown and expired shortcodes are both reported as None. They are
        told apart only in the logs.

        Args:
            code (str):
                Shortcode to resolve (exact match).
            agent (str):
                Client-identifying string, e.g. a User-Agent header.
            source (str | None):
                Referral channel label. Sampled from CLICK_SOURCES when None.
            location (str | None):
                Geographic origin label. Sampled from CLICK_LOCATIONS when None.

        Returns:
            str | None: the target URL, or None if the shortcode can't redirect.

        Raises:
            PersistenceError:
                If saving the click fails. The click is kept in memory and
                the target is exposed as `result`.

        Example:
            >>> registry.resolve('abc123', agent='Mozilla/5.0', source='Email', location='Berlin, DE')
            'https://example.com'
        """
        with self._lock:
            now = self.clock()
            entry = self._entries.get(code)

            if entry is None:
                logger.warning('Shortcode not found.', extra={'code': code, 'event': SHORTCODE_NOT_FOUND, 'reason': 'not_found'})
                return None

            if entry.is_expired(now):
                logger.warning(
                    'Shortcode expired.',
                    extra={
                        'code': code,
                        'event': SHORTCODE_EXPIRED,
                        'reason': 'expired',
                        'expiresAt': entry.expires_at.isoformat(),
                    },
                )
                return None

            click = ClickEventModel(
                timestamp=now,
                source=source if source is not None else self.rng.choice(CLICK_SOURCES),
                location=location if location is not None else self.rng.choice(CLICK_LOCATIONS),
                agent=agent,
            )
            entry = entry.with_click(click)
            self._entries[code] = entry
            self._save(operation='resolve', result=entry.target)

        logger.info(
            'Click recorded, redirecting to target.',
            extra={'code': code, 'event': REDIRECT_SUCCESS, 'clicks': entry.click_count},
        )
        return entry.target

    def list_entries(self) -> list[EntryModel]:
        """Purge stale entries, then return the rest, most recently created first

        Live and expired-but-retained entries are both returned; callers
        compare `expires_at` with the current time to flag expired ones.

        Raises:
            PersistenceError:
                If saving after a purge fails. The listing is exposed as `result`.
        """
        with self._lock:
            try:
                self.purge_expired()
            except PersistenceError as e:
                raise PersistenceError(str(e), result=self._sorted_entries()) from e
            return self._sorted_entries()

    @beartype
    def get(self, code: str) -> EntryModel | None:
        """Return the retained entry for `code` (live or expired) without recording a click."""
        with self._lock:
            return self._entries.get(code)

    def purge_expired(self) -> int:
        """Remove entries expired for longer than the retention window

        Idempotent. Saves only if something was removed.

        Returns:
            int: number of removed entries.
        """
        with self._lock:
            now = self.clock()
            purgeable = [code for code, entry in self._entries.items() if entry.is_purgeable(now, self.retention)]
            if not purgeable:
                return 0

            for code in purgeable:
                del self._entries[code]

            logger.info(
                'Purged expired entries.',
                extra={'event': ENTRIES_PURGED, 'removed': len(purgeable), 'codes': purgeable},
            )
            self._save(operation='purge', result=len(purgeable))
            return len(purgeable)

    def _sorted_entries(self) -> list[EntryModel]:
        return sorted(self._entries.values(), key=lambda entry: entry.created_at, reverse=True)

    def _generate_unique_shortcode(self) -> str:
        # Widen by one character after `max_generation_attempts` consecutive collisions
        for length in range(self.shortcode_length, Shortcode.MAX_LENGTH + 1):
            for attempt in range(1, self.max_generation_attempts + 1):
                code = generate_shortcode(self.rng, length)
                if code not in self._entries:
                    logger.info(
                        'Generated shortcode.',
                        extra={'code': code, 'event': SHORTCODE_GENERATED, 'attempt': attempt, 'length': length},
                    )
                    return code
                logger.debug('Generated shortcode collides, retrying.', extra={'code': code, 'event': SHORTCODE_COLLISION})

            if length < Shortcode.MAX_LENGTH:
                logger.warning(
                    'Too many shortcode collisions, widening generated shortcodes.',
                    extra={'event': SHORTCODE_COLLISION, 'length': length + 1},
                )

        raise ShortcodeSpaceExhaustedError('Failed to generate a free shortcode at any allowed length.')

    def _validate_shorten_request(self, target: str, validity_minutes: int, requested_code: str | None) -> None:
        problem = None
        if not is_absolute_url(target):
            problem = f"Target '{target}' is not a valid absolute URL."
        elif isinstance(validity_minutes, bool) or validity_minutes <= 0:
            problem = f'Validity must be a positive number of minutes (given value: {validity_minutes!r}).'
        elif not self._expiry_is_representable(validity_minutes):
            problem = f'Validity of {validity_minutes} minutes reaches past the latest representable date.'
        elif requested_code is not None and not is_valid_shortcode(requested_code):
            problem = (
                f"Requested shortcode '{requested_code}' must be {Shortcode.MIN_LENGTH}-{Shortcode.MAX_LENGTH} "
                'alphanumeric characters.'
            )

        if problem is not None:
            logger.warning('Rejected shorten request.', extra={'event': INVALID_INPUT, 'reason': problem})
            raise InvalidInputError(problem)

    def _expiry_is_representable(self, validity_minutes: int) -> bool:
        try:
            self.clock() + timedelta(minutes=validity_minutes)
        except OverflowError:
            return False
        return True

    def _save(self, operation: str, result: object) -> None:
        try:
            self.dao.save(list(self._entries.values()))
        except DataStoreError as e:
            logger.exception(
                'Failed to persist registry entries, keeping in-memory state.',
                extra={'event': PERSISTENCE_FAILURE, 'operation': operation},
            )
            raise PersistenceError(f'Failed to persist registry entries after {operation}: {e}', result=result) from e
