from typing import Any


class LinkRegistryError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:link_registry_error'


class RegistryError(LinkRegistryError):
    """Base exception for errors raised by Registry operations."""

    error_code = 'registry:registry_error'


class InvalidInputError(RegistryError):
    """Raised when a target, validity period or requested shortcode is malformed."""

    error_code = 'registry:invalid_input_error'


class DuplicateCodeError(RegistryError):
    """Raised when a requested shortcode is already held by the registry."""

    error_code = 'registry:duplicate_code_error'


class ShortcodeSpaceExhaustedError(RegistryError):
    """Raised when no free shortcode can be generated at any allowed length."""

    error_code = 'registry:shortcode_space_exhausted_error'


class PersistenceError(RegistryError):
    """Raised when the registry can't read from or write to its data store.

    The in-memory effect of the triggering operation is kept. Its outcome
    (created entry, resolved target, listed entries) is exposed via `result`
    so callers can carry on while warning the user.
    """

    error_code = 'registry:persistence_error'

    def __init__(self, message: str, result: Any = None):
        super().__init__(message)
        self.result = result


class ConfigurationError(LinkRegistryError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
