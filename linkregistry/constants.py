from enum import StrEnum


class Shortcode:
    """Shortcode shape constraints."""

    DEFAULT_LENGTH = 6
    MIN_LENGTH = 1
    MAX_LENGTH = 20
    # Consecutive collisions tolerated at one length before widening by a character
    MAX_GENERATION_ATTEMPTS = 10


class Policy:
    """Registry policy defaults."""

    DEFAULT_VALIDITY_MINUTES = 30
    RETENTION_HOURS = 24


class Backend(StrEnum):
    """Persistence backends selectable via `active_backend`."""

    REDIS = 'redis'
    MEMORY = 'memory'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        LOG_LEVEL = 'LOG_LEVEL'

    class Redis(StrEnum):
        HOST = 'REDIS_HOST'
        PORT = 'REDIS_PORT'
        DB = 'REDIS_DB'
        USERNAME = 'REDIS_USERNAME'
        PASSWORD = 'REDIS_PASSWORD'  # noqa: S105


# Fallback click classification labels, used when the caller can't supply real values
CLICK_SOURCES = (
    'Direct',
    'Google Search',
    'Social Media',
    'Email',
    'Referral',
    'Advertisement',
)
CLICK_LOCATIONS = (
    'New York, US',
    'London, UK',
    'Tokyo, JP',
    'Sydney, AU',
    'Toronto, CA',
    'Berlin, DE',
    'Mumbai, IN',
    'São Paulo, BR',
)

# Version tag of the serialized entry collection
SNAPSHOT_VERSION = 1
