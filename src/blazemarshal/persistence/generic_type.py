"""
Identity map for a single entity type.

A :class:`GenericType` stores every loaded record exactly once per identity
value, converts records into entities lazily, indexes them for lookup,
remembers what each entity looked like at load time, and hands out
collections that alias the same storage slots.
"""

from __future__ import annotations

from threading import RLock
from time import monotonic
from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..core.collection import CollectionBuilder, GenericCollectionBuilder
from ..core.entity import EntityBuilder, GenericEntityBuilder
from ..core.record import MISSING, read_field, to_record
from ..errors import DuplicateRelation, MissingIdentityField, UnknownRelation
from ..hooks import AFTER_LOAD, AFTER_MATERIALIZE, AFTER_NEW, HookDispatcher, hooks
from ..utils import ScanTracker, get_logger, time_call
from .identity_map import IdentityMap
from .indexes import FieldIndexes
from .slots import SlotStore
from .snapshots import SnapshotRegistry, changed_fields
from .unit_of_work import UnitOfWork

if TYPE_CHECKING:
    from ..config import TypeDefinition
    from ..core.relations import Relation


def _as_values(values: Any) -> List[Any]:
    if isinstance(values, (str, bytes)):
        return [values]
    try:
        return list(values)
    except TypeError:
        return [values]


class GenericType:
    """
    Identity map, indexes and change tracking for one entity type.

    Every public operation runs under a single re-entrant lock, so an instance
    shared between threads behaves as one critical section.

    Reads are side-effecting: any path that returns an entity (identity or
    field lookup, collection iteration, field value listing) converts the
    underlying raw record on first access and keeps the result.
    """

    def __init__(
        self,
        identity_field: Optional[str] = None,
        index_fields: Iterable[str] = (),
        entity_builder: Optional[EntityBuilder] = None,
        collection_builder: Optional[CollectionBuilder] = None,
        *,
        name: Optional[str] = None,
        materialize_on_load: bool = True,
        scan_warning_threshold: int = 10,
        hook_dispatcher: Optional[HookDispatcher] = None,
    ) -> None:
        self.name = name
        self.materialize_on_load = materialize_on_load
        self._identity_field = identity_field
        self._indexes = FieldIndexes(index_fields)
        self._entity_builder: EntityBuilder = entity_builder or GenericEntityBuilder()
        self._collection_builder: CollectionBuilder = (
            collection_builder or GenericCollectionBuilder()
        )
        self._slots = SlotStore(self._materialize, self._materialized)
        self._identity_map = IdentityMap()
        self._snapshots = SnapshotRegistry()
        self._unit_of_work = UnitOfWork()
        self._relations: Dict[str, "Relation"] = {}
        self._lock = RLock()
        self.hooks = hook_dispatcher or hooks
        self.logger = get_logger("persistence.generic_type")
        self.scan_tracker = ScanTracker(self.logger, warning_threshold=scan_warning_threshold)

    @classmethod
    def from_definition(
        cls,
        definition: "TypeDefinition",
        *,
        name: Optional[str] = None,
        hook_dispatcher: Optional[HookDispatcher] = None,
    ) -> "GenericType":
        return cls(
            definition.identity_field,
            definition.index_fields,
            definition.entity_builder,
            definition.collection_builder,
            name=name,
            materialize_on_load=definition.materialize_on_load,
            scan_warning_threshold=definition.scan_warning_threshold,
            hook_dispatcher=hook_dispatcher,
        )

    def __repr__(self) -> str:
        label = self.name or "anonymous"
        return f"<{self.__class__.__name__} {label} slots={len(self._slots)}>"

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #
    def set_identity_field(self, name: str) -> None:
        with self._lock:
            self._identity_field = name

    def get_identity_field(self) -> Optional[str]:
        return self._identity_field

    def set_index_fields(self, names: Iterable[str] = ()) -> None:
        """
        Replace the indexed fields, discarding every existing index.

        Slots that are already loaded are not re-indexed.
        """
        with self._lock:
            names = list(names)
            if len(self._identity_map):
                self.logger.warning(
                    "Index fields of type '%s' replaced after %s records were loaded; "
                    "existing records are not indexed",
                    self.name,
                    len(self._identity_map),
                )
            self._indexes.configure(names)

    def get_index_fields(self) -> List[str]:
        with self._lock:
            return self._indexes.fields()

    def set_entity_builder(self, builder: EntityBuilder) -> None:
        with self._lock:
            self._entity_builder = builder

    def get_entity_builder(self) -> EntityBuilder:
        return self._entity_builder

    def set_collection_builder(self, builder: CollectionBuilder) -> None:
        with self._lock:
            self._collection_builder = builder

    def get_collection_builder(self) -> CollectionBuilder:
        return self._collection_builder

    # ------------------------------------------------------------------ #
    # Loading
    # ------------------------------------------------------------------ #
    def load_entity(self, record: Any) -> Any:
        """
        Load one record and return its entity.

        Loading an identity that is already present returns the existing
        entity and discards ``record``.
        """
        with self._lock:
            normalized = to_record(record)
            offset = self._store(normalized, self._identity_of(normalized))
            return self._slots.get(offset)

    def load_collection(self, records: Iterable[Any]) -> Any:
        """
        Load many records and return a collection in input order.

        Every record is checked for its identity field and for hashable index
        values before any of them is stored.
        """
        with self._lock:
            normalized = [to_record(record) for record in records]
            identity_values = [self._identity_of(record) for record in normalized]
            for record, identity_value in zip(normalized, identity_values):
                if identity_value not in self._identity_map:
                    self._index_entries(record)
            context = {"type_name": self.name, "records": len(normalized)}
            with time_call("generic_type.load_collection", self.logger, context=context, threshold_ms=200):
                for record, identity_value in zip(normalized, identity_values):
                    self._store(record, identity_value)
            return self.get_collection(identity_values)

    # ------------------------------------------------------------------ #
    # Lookup
    # ------------------------------------------------------------------ #
    def get_identity_values(self) -> List[Any]:
        with self._lock:
            return self._identity_map.values()

    def get_field_values(self, field: str) -> Dict[Any, Any]:
        """
        Map each loaded identity value to the entity's value for ``field``.
        """
        with self._lock:
            return {
                identity_value: read_field(self._slots.get(offset), field, None)
                for identity_value, offset in self._identity_map.items()
            }

    def get_entity(self, identity_value: Any) -> Any:
        with self._lock:
            offset = self._identity_map.get(identity_value)
            if offset is None:
                return None
            return self._slots.get(offset)

    def get_entity_by_field(self, field: str, value: Any) -> Any:
        """
        Return the first entity whose ``field`` equals ``value``, or ``None``.

        Identity and indexed fields are answered from the indexes (for an
        indexed field the first loaded match wins). Any other field is found
        by scanning every slot in order, converting each one it inspects.
        """
        with self._lock:
            if field == self._identity_field:
                return self.get_entity(value)

            if field in self._indexes:
                offset = self._indexes.first(field, value)
                if offset is None:
                    return None
                return self._slots.get(offset)

            for offset in self._scan(field, [value], first_only=True):
                return self._slots.get(offset)
            return None

    def get_collection(self, identity_values: Iterable[Any]) -> Any:
        """
        Return a collection aliasing the slots of ``identity_values`` in order.

        Raises :class:`UnknownIdentity` if any value was never loaded.
        """
        with self._lock:
            refs = [
                self._slots.ref(self._identity_map.require(identity_value))
                for identity_value in identity_values
            ]
            return self._collection_builder.new_instance(refs)

    def get_collection_by_field(self, field: str, values: Any) -> Any:
        """
        Return a collection of entities whose ``field`` is any of ``values``.

        Identity and indexed lookups follow the order of ``values``; an
        unindexed field is scanned and keeps slot order.
        """
        with self._lock:
            values = _as_values(values)

            if field == self._identity_field:
                offsets = [
                    offset
                    for offset in (self._identity_map.get(value) for value in values)
                    if offset is not None
                ]
            elif field in self._indexes:
                offsets = []
                for value in values:
                    offsets.extend(self._indexes.offsets(field, value))
            else:
                offsets = self._scan(field, values)

            refs = [self._slots.ref(offset) for offset in offsets]
            return self._collection_builder.new_instance(refs)

    # ------------------------------------------------------------------ #
    # New entities and change tracking
    # ------------------------------------------------------------------ #
    def new_entity(self, fields: Optional[Mapping[str, Any]] = None) -> Any:
        """
        Create an entity that is stored but not indexed.

        It is reachable only through :meth:`get_new_entities` or by iterating
        the type, and every one of its fields counts as changed.
        """
        with self._lock:
            entity = self._entity_builder.new_instance(to_record(fields or {}))
            offset = self._slots.append_entity(entity)
            self._unit_of_work.register_new(offset)
            self.logger.debug("Created new entity in slot %s of type '%s'", offset, self.name)
            self.hooks.fire(AFTER_NEW, entity, type_name=self.name, type=self, offset=offset)
            return entity

    def get_new_entities(self) -> List[Any]:
        with self._lock:
            return [self._slots.get(offset) for offset in self._unit_of_work.new_offsets()]

    def get_changed_entities(self) -> Dict[Any, Any]:
        """
        Return loaded entities that differ from their snapshot, keyed by identity.
        """
        with self._lock:
            changed = {}
            for identity_value, offset in self._identity_map.items():
                entity = self._slots.get(offset)
                if self.get_changed_fields(entity):
                    changed[identity_value] = entity
            return changed

    def get_initial_data(self, entity: Any) -> Optional[Mapping[str, Any]]:
        with self._lock:
            return self._snapshots.get(entity)

    def get_changed_fields(self, entity: Any) -> Dict[str, Any]:
        with self._lock:
            return changed_fields(
                entity, self._snapshots.get(entity), ignore=self._relations
            )

    # ------------------------------------------------------------------ #
    # Relations
    # ------------------------------------------------------------------ #
    def set_relation(self, name: str, relation: "Relation") -> None:
        with self._lock:
            if name in self._relations:
                raise DuplicateRelation(name)
            self._relations[name] = relation

    def get_relation(self, name: str) -> "Relation":
        with self._lock:
            try:
                return self._relations[name]
            except KeyError:
                raise UnknownRelation(name) from None

    def get_relation_names(self) -> List[str]:
        with self._lock:
            return list(self._relations)

    def get_related(self, entity: Any, name: str) -> Any:
        # Resolved outside our lock; the relation takes the foreign type's lock.
        relation = self.get_relation(name)
        return relation.get_for_entity(entity)

    # ------------------------------------------------------------------ #
    # Slot access
    # ------------------------------------------------------------------ #
    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    def __getitem__(self, offset: int) -> Any:
        with self._lock:
            return self._slots.get(offset)

    def __iter__(self) -> Iterator[Any]:
        with self._lock:
            entities = [self._slots.get(offset) for offset in self._slots.offsets()]
        return iter(entities)

    def scan_stats(self) -> List[dict[str, object]]:
        with self._lock:
            return self.scan_tracker.summary()

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #
    def _identity_of(self, record: Mapping[str, Any]) -> Any:
        if self._identity_field is None:
            raise MissingIdentityField(None, record)
        value = read_field(record, self._identity_field, MISSING)
        if value is MISSING:
            self.logger.debug(
                "Rejected record without identity field '%s' for type '%s'",
                self._identity_field,
                self.name,
            )
            raise MissingIdentityField(self._identity_field, record)
        return value

    def _store(self, record: Dict[str, Any], identity_value: Any) -> int:
        """
        Store ``record`` under ``identity_value`` unless it is already loaded.

        Index values are read and checked before the slot is appended, so a
        record that cannot be indexed leaves the type untouched. Hooks fire
        only once the slot, identity and index entries are all in place.
        """
        offset = self._identity_map.get(identity_value)
        if offset is not None:
            return offset

        if self.materialize_on_load:
            entity = self._entity_builder.new_instance(record)
            entries = self._index_entries(entity)
            offset = self._slots.append_entity(entity)
            self._snapshots.attach(offset, entity, record)
        else:
            entries = self._index_entries(record)
            offset = self._slots.append_record(record)

        self._identity_map.add(identity_value, offset)
        for field, value in entries:
            self._indexes.add(field, value, offset)

        self.logger.debug(
            "Loaded identity %r into slot %s of type '%s'", identity_value, offset, self.name
        )
        if self.materialize_on_load:
            self._materialized(offset, self._slots.peek(offset))
        # In lazy mode the slot still holds the raw record.
        self.hooks.fire(
            AFTER_LOAD,
            self._slots.peek(offset),
            type_name=self.name,
            type=self,
            identity=identity_value,
            offset=offset,
            record=record,
            materialized=self._slots.is_materialized(offset),
        )
        return offset

    def _index_entries(self, source: Any) -> List[Tuple[str, Any]]:
        entries = []
        for field in self._indexes.fields():
            value = read_field(source, field, None)
            try:
                hash(value)
            except TypeError:
                raise TypeError(
                    f"Index field '{field}' of type '{self.name}' has unhashable value {value!r}"
                ) from None
            entries.append((field, value))
        return entries

    def _materialize(self, offset: int, record: Mapping[str, Any]) -> Any:
        entity = self._entity_builder.new_instance(record)
        self._snapshots.attach(offset, entity, record)
        return entity

    def _materialized(self, offset: int, entity: Any) -> None:
        self.logger.debug("Materialized slot %s of type '%s'", offset, self.name)
        self.hooks.fire(AFTER_MATERIALIZE, entity, type_name=self.name, type=self, offset=offset)

    def _scan(self, field: str, values: List[Any], *, first_only: bool = False) -> List[int]:
        start = monotonic()
        matches: List[int] = []
        scanned = 0
        for offset in self._slots.offsets():
            if self._unit_of_work.is_new(offset):
                continue
            scanned += 1
            current = read_field(self._slots.get(offset), field, MISSING)
            if current is not MISSING and current in values:
                matches.append(offset)
                if first_only:
                    break
        self.scan_tracker.record(field, scanned, (monotonic() - start) * 1000)
        return matches
