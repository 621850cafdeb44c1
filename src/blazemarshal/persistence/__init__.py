"""
Identity map components: slot store, indexes, snapshots and the type facade.
"""

from .generic_type import GenericType
from .identity_map import IdentityMap
from .indexes import FieldIndexes
from .slots import SlotRef, SlotStore
from .snapshots import SnapshotRegistry, changed_fields
from .unit_of_work import UnitOfWork

__all__ = [
    "FieldIndexes",
    "GenericType",
    "IdentityMap",
    "SlotRef",
    "SlotStore",
    "SnapshotRegistry",
    "UnitOfWork",
    "changed_fields",
]
