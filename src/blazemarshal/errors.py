"""
Error hierarchy for blazemarshal.
"""

from __future__ import annotations

from typing import Any


class MarshalError(RuntimeError):
    """Base error for identity map failures."""


class ConfigurationError(MarshalError, ValueError):
    """Raised when a type definition or its values are invalid."""


class MissingIdentityField(MarshalError, KeyError):
    """Raised when a record lacks the configured identity field."""

    def __init__(self, identity_field: str | None, record: Any = None) -> None:
        self.identity_field = identity_field
        self.record = record
        if identity_field is None:
            message = "No identity field is configured for this type."
        else:
            message = f"Record is missing identity field '{identity_field}'."
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownIdentity(MarshalError, KeyError):
    """Raised when a batch lookup references an identity that was never loaded."""

    def __init__(self, identity_value: Any) -> None:
        self.identity_value = identity_value
        super().__init__(f"No entity loaded with identity value {identity_value!r}.")

    def __str__(self) -> str:
        return str(self.args[0])


class DuplicateRelation(MarshalError):
    """Raised when a relation name is registered twice on the same type."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Relation '{name}' already exists.")


class UnknownRelation(MarshalError, KeyError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Relation '{name}' does not exist.")

    def __str__(self) -> str:
        return str(self.args[0])


class RelationError(MarshalError):
    """Raised when a relation definition cannot be built."""


class DuplicateType(MarshalError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Type '{name}' is already defined.")


class UnknownType(MarshalError, KeyError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Type '{name}' is not defined.")

    def __str__(self) -> str:
        return str(self.args[0])
