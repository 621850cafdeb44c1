"""
Type definitions: the configuration a :class:`GenericType` is built from.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from typing import Any, List, Mapping, Optional

from .core.collection import CollectionBuilder
from .core.entity import EntityBuilder
from .errors import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(value: Any, *, key: str) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"Invalid boolean value for '{key}': {value!r}")


def _parse_int(value: Any, *, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid integer value for '{key}': {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid integer value for '{key}': {value!r}") from exc


def _parse_fields(value: Any, *, key: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    try:
        names = list(value)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid field list for '{key}': {value!r}") from exc
    for name in names:
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"Invalid field name in '{key}': {name!r}")
    return names


@dataclass
class TypeDefinition:
    """
    Normalized configuration for one entity type.

    ``entity_builder`` and ``collection_builder`` default to the generic
    builders when left as ``None``.
    """

    identity_field: str
    index_fields: List[str] = field(default_factory=list)
    entity_builder: Optional[EntityBuilder] = None
    collection_builder: Optional[CollectionBuilder] = None
    materialize_on_load: bool = True
    scan_warning_threshold: int = 10

    def __post_init__(self) -> None:
        if not isinstance(self.identity_field, str) or not self.identity_field:
            raise ConfigurationError("'identity_field' must be a non-empty string")
        self.index_fields = _parse_fields(self.index_fields, key="index_fields")
        self.materialize_on_load = _parse_bool(self.materialize_on_load, key="materialize_on_load")
        self.scan_warning_threshold = _parse_int(
            self.scan_warning_threshold, key="scan_warning_threshold"
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], **kwargs: Any) -> "TypeDefinition":
        """
        Build a definition from a mapping; keyword arguments take precedence.
        """

        known = {f.name for f in fields(cls)}
        values = dict(data)
        values.update(kwargs)
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigurationError(f"Unknown type definition keys: {', '.join(unknown)}")
        if "identity_field" not in values:
            raise ConfigurationError("Type definition requires 'identity_field'")
        return cls(**values)

    @classmethod
    def from_env(cls, prefix: str, **kwargs: Any) -> "TypeDefinition":
        """
        Build a definition from ``<PREFIX>_IDENTITY_FIELD`` and friends.
        """

        prefix = prefix.rstrip("_").upper()
        identity_field = os.getenv(f"{prefix}_IDENTITY_FIELD")
        if not identity_field and "identity_field" not in kwargs:
            raise ConfigurationError(f"Environment variable {prefix}_IDENTITY_FIELD is not set")

        values: dict[str, Any] = {}
        if identity_field:
            values["identity_field"] = identity_field
        env_keys = {
            "index_fields": f"{prefix}_INDEX_FIELDS",
            "materialize_on_load": f"{prefix}_MATERIALIZE_ON_LOAD",
            "scan_warning_threshold": f"{prefix}_SCAN_WARNING_THRESHOLD",
        }
        for key, env_var in env_keys.items():
            value = os.getenv(env_var)
            if value is not None:
                values[key] = value
        return cls.from_mapping(values, **kwargs)
