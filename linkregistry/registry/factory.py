"""Wire a Registry to the configured persistence backend.

Functions:
    create_dao(app_config) -> EntryBaseDAO
        Instantiate the DAO named by `active_backend`.
    create_registry(app_config=None, **kwargs) -> Registry
        Load config (unless given), create the DAO and build the Registry.

Example:
    >>> from linkregistry.registry import create_registry
    >>> registry = create_registry()
    >>> registry.list_entries()
    []
"""

import logging

from linkregistry.types import AppConfig
from linkregistry.constants import Backend
from linkregistry.dao import EntryBaseDAO, EntryMemoryDAO, EntryRedisDAO
from linkregistry.exceptions import BadConfigurationError, PersistenceError
from linkregistry.dao.exceptions import DataStoreError
from linkregistry.registry.registry import Registry
from linkregistry.utils.config import load_config, app_prefix


logger = logging.getLogger(__name__)


def create_dao(app_config: AppConfig) -> EntryBaseDAO:
    """Create the DAO selected by `active_backend`

    Raises:
        BadConfigurationError: If the backend is unknown.
        PersistenceError: If the backend can't be reached (Redis healthcheck).
    """
    backend = app_config['active_backend']
    backend_config = app_config['backends'].get(backend) or {}

    if backend == Backend.MEMORY:
        logger.debug('Using in-memory backend for registry entries.')
        return EntryMemoryDAO(prefix=app_prefix())

    if backend == Backend.REDIS:
        logger.debug('Using Redis backend for registry entries.')
        try:
            return EntryRedisDAO(redis_config=backend_config, prefix=app_prefix())
        except DataStoreError as e:
            raise PersistenceError(str(e)) from e

    raise BadConfigurationError(f'Unknown active_backend {backend!r}.')


def create_registry(app_config: AppConfig | None = None, **kwargs) -> Registry:
    """Build a Registry over the configured backend

    Args:
        app_config (AppConfig | None):
            Configuration as returned by load_config(). Loaded when None.
        **kwargs:
            Forwarded to Registry (e.g. `clock`, `rng`).
    """
    app_config = app_config if app_config is not None else load_config()
    return Registry.from_config(create_dao(app_config), app_config['registry'], **kwargs)
