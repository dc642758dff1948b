from typing import Any, TypeAlias


# Type aliases for Python dictionaries
AppConfig: TypeAlias = dict[str, Any]
RegistryConfig: TypeAlias = dict[str, Any]
SerializedEntry: TypeAlias = dict[str, Any]
SerializedClick: TypeAlias = dict[str, Any]
