"""Utility functions for application configuration management.

Configuration lives in one YAML document per application environment
(`APP_ENV`) under the project's `config/` directory:

    config/
    ├── local.yml
    └── prod.yml

The YAML document follows this structure (every key is optional; missing
keys fall back to built-in defaults):

    active_backend: redis
    backends:
        redis:
            host: localhost
            port: 6379
            db: 0
    registry:
        default_validity_minutes: 30
        shortcode_length: 6
        max_generation_attempts: 10
        retention_hours: 24

Redis connection settings can additionally be overridden per process via
`REDIS_HOST`, `REDIS_PORT`, `REDIS_DB`, `REDIS_USERNAME` and `REDIS_PASSWORD`.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`) value,
        defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return key prefix for DAOs, or None if `APP_NAME` is not set.

    project_root() -> Path
        Return the absolute path to the project root directory, using
        `PROJECT_ROOT` when available.

    load_config() -> dict
        Load the configuration document for the current environment,
        merged over defaults and environment overrides.

Example:
    >>> from linkregistry.utils.config import load_config
    >>> config = load_config()
    >>> config['active_backend']
    'redis'
    >>> config['backends']['redis']['host']
    'localhost'
"""

import os
import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from linkregistry.types import AppConfig
from linkregistry.constants import ENV, Backend, Policy, Shortcode
from linkregistry.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)


DEFAULT_CONFIG: AppConfig = {
    'active_backend': Backend.REDIS.value,
    'backends': {
        'redis': {
            'host': 'localhost',
            'port': 6379,
            'db': 0,
            'username': None,
            'password': None,
        },
        'memory': {},
    },
    'registry': {
        'default_validity_minutes': Policy.DEFAULT_VALIDITY_MINUTES,
        'shortcode_length': Shortcode.DEFAULT_LENGTH,
        'max_generation_attempts': Shortcode.MAX_GENERATION_ATTEMPTS,
        'retention_hours': Policy.RETENTION_HOURS,
    },
}

REDIS_ENV_OVERRIDES = {
    ENV.Redis.HOST: ('host', str),
    ENV.Redis.PORT: ('port', int),
    ENV.Redis.DB: ('db', int),
    ENV.Redis.USERNAME: ('username', str),
    ENV.Redis.PASSWORD: ('password', str),
}


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Returns:
        str:
            Value of `APP_ENV` environment variable, `'local'` by default.

    Example:
        >>> os.environ['APP_ENV'] = 'prod'
        >>> app_env()
        'prod'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'

    Returns:
        str:
            Value of `APP_NAME` environment variable.
            None if variable is not set.
    """
    return os.environ.get(ENV.App.APP_NAME)


def project_root() -> Path:
    """Return the absolute path to the project root directory

    Uses the PROJECT_ROOT environment variable.
    Falls back to the directory above the `linkregistry` package.

    Returns:
        Path:
            Absolute path to the project root directory.
    """
    return Path(os.environ.get(ENV.App.PROJECT_ROOT, Path(__file__).resolve().parents[2]))


def app_prefix() -> str | None:
    """Return key prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'linkregistry'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'linkregistry:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _apply_redis_env_overrides(config: AppConfig) -> AppConfig:
    redis_config = config['backends']['redis']
    for env_name, (key, cast) in REDIS_ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is None or value == '':
            continue
        try:
            redis_config[key] = cast(value)
        except ValueError as e:
            raise BadConfigurationError(f'Environment variable {env_name} has an invalid value: {value!r}.') from e
    return config


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration for the current application environment

    Reads `<project root>/config/<APP_ENV>.yml` (or `path` when given),
    merges it over DEFAULT_CONFIG and applies Redis environment overrides.
    A missing file is not an error: defaults are used.

    Args:
        path (Path | None):
            Explicit YAML document to read instead of the environment's default.

    Returns:
        dict: The merged configuration.

    Raises:
        BadConfigurationError:
            If the document can't be parsed, isn't a mapping, or names
            an unknown backend.

    Example:
        >>> app_config = load_config()
        >>> app_config['registry']['retention_hours']
        24
    """
    path = path or project_root() / 'config' / f'{app_env()}.yml'

    try:
        with open(path, encoding='utf-8') as f:
            document = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.debug('No configuration file found, using defaults.', extra={'path': str(path)})
        document = {}
    except yaml.YAMLError as e:
        raise BadConfigurationError(f'Configuration file {path} is not valid YAML.') from e
    else:
        logger.debug('Loaded configuration file.', extra={'path': str(path), 'appEnv': app_env()})

    if not isinstance(document, dict):
        raise BadConfigurationError(f'Configuration file {path} must hold a mapping at the top level.')

    config = _apply_redis_env_overrides(_deep_merge(DEFAULT_CONFIG, document))

    backend = config['active_backend']
    if backend not in {b.value for b in Backend}:
        raise BadConfigurationError(f'Unknown active_backend {backend!r} (expected one of: {", ".join(Backend)}).')

    return config
