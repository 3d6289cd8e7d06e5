"""Abstract blueprints, data model and core utilities.

Every registry adapter inherits from :class:`RegistryBlueprint` and talks to
its zone through a :class:`RecordStoreBlueprint`.
"""

from .registry import RegistryBlueprint
from .record_store import RecordStoreBlueprint
from .records import RecordKey, RecordSet, RecordType
from .service import ChangeResult, Service
from .editor import RecordSetEditor
from .supported_services import existing_operations


__all__ = [
    "RegistryBlueprint",
    "RecordStoreBlueprint",
    "RecordKey",
    "RecordSet",
    "RecordType",
    "ChangeResult",
    "Service",
    "RecordSetEditor",
    "existing_operations",
]
