"""
Manager holding every entity type of a domain by name.
"""

from __future__ import annotations

from collections import defaultdict
from threading import RLock
from typing import Any, Dict, List, Mapping, Optional

from .config import TypeDefinition
from .core.relations import Relation, RelationBuilder
from .errors import ConfigurationError, DuplicateRelation, DuplicateType, UnknownType
from .hooks import HookDispatcher
from .persistence.generic_type import GenericType
from .utils import get_logger


class Manager:
    """
    Registry of named types.

    Types are declared with :meth:`set_type` and only built on first access
    through :meth:`get_type`. Relations may be declared before or after their
    type is built; pending ones are attached when it is.

    ``types`` maps type names to :class:`TypeDefinition` objects or mappings;
    ``relations`` maps type names to ``{relation_name: definition}``.
    """

    def __init__(
        self,
        types: Optional[Mapping[str, Any]] = None,
        relations: Optional[Mapping[str, Mapping[str, Any]]] = None,
        *,
        relation_builder: Optional[RelationBuilder] = None,
        hook_dispatcher: Optional[HookDispatcher] = None,
    ) -> None:
        self.relation_builder = relation_builder or RelationBuilder()
        self.hook_dispatcher = hook_dispatcher
        self.logger = get_logger("manager")
        self._definitions: Dict[str, TypeDefinition] = {}
        self._types: Dict[str, GenericType] = {}
        self._relations: Dict[str, Dict[str, Relation]] = defaultdict(dict)
        self._lock = RLock()

        for name, definition in (types or {}).items():
            self.set_type(name, definition)
        for type_name, type_relations in (relations or {}).items():
            for relation_name, info in type_relations.items():
                self.set_relation(type_name, relation_name, info)

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __getitem__(self, name: str) -> GenericType:
        return self.get_type(name)

    def set_type(self, name: str, definition: TypeDefinition | Mapping[str, Any]) -> None:
        with self._lock:
            if name in self._definitions:
                raise DuplicateType(name)
            if isinstance(definition, Mapping):
                definition = TypeDefinition.from_mapping(definition)
            elif not isinstance(definition, TypeDefinition):
                raise ConfigurationError(
                    f"Type '{name}' must be defined by a TypeDefinition or a mapping"
                )
            self._definitions[name] = definition

    def get_type(self, name: str) -> GenericType:
        with self._lock:
            if name in self._types:
                return self._types[name]
            try:
                definition = self._definitions[name]
            except KeyError:
                raise UnknownType(name) from None
            type_ = GenericType.from_definition(
                definition, name=name, hook_dispatcher=self.hook_dispatcher
            )
            for relation_name, relation in self._relations[name].items():
                type_.set_relation(relation_name, relation)
            self._types[name] = type_
            self.logger.debug("Built type '%s'", name)
            return type_

    def get_types(self) -> List[str]:
        with self._lock:
            return list(self._definitions)

    def get_built_types(self) -> List[str]:
        with self._lock:
            return list(self._types)

    def set_relation(self, type_name: str, relation_name: str, info: Any) -> Relation:
        """
        Declare a relation on ``type_name``.

        ``info`` is either a relation object or a mapping understood by the
        relation builder.
        """
        with self._lock:
            if type_name not in self._definitions:
                raise UnknownType(type_name)
            if relation_name in self._relations[type_name]:
                raise DuplicateRelation(relation_name)
            if isinstance(info, Mapping):
                relation = self.relation_builder.new_instance(self, type_name, relation_name, info)
            else:
                relation = info
            self._relations[type_name][relation_name] = relation
            if type_name in self._types:
                self._types[type_name].set_relation(relation_name, relation)
            return relation
