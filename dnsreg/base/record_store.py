"""Record store blueprint."""

from abc import ABC, abstractmethod
from typing import Literal

from dnsreg.base.records import RecordKey, RecordSet, RecordType

ChangeAction = Literal["UPSERT", "DELETE"]


class RecordStoreBlueprint(ABC):
    """Abstract interface for authoritative reads and writes of record sets.

    Maps to AWS Route 53.
    """

    @abstractmethod
    def get_zone_name(self, zone_id: str) -> str:
        """Return the fully qualified name of a hosted zone.

        Args:
            zone_id: Hosted zone identifier.

        Returns:
            Zone name with trailing dot (e.g. ``example.com.``).
        """

    @abstractmethod
    def get_record_set(self, zone_id: str, key: RecordKey) -> RecordSet | None:
        """Fetch the record set selected by *key*.

        Returns:
            The record set, or ``None`` when none exists at *key*.
        """

    @abstractmethod
    def list_record_sets(
        self, zone_id: str, name: str, record_type: RecordType
    ) -> list[RecordSet]:
        """List every record set at *name* and *record_type*, all identifiers."""

    @abstractmethod
    def change(self, zone_id: str, action: ChangeAction, record_set: RecordSet) -> None:
        """Submit a single-change batch.

        Args:
            zone_id: Hosted zone identifier.
            action: ``UPSERT`` writes the full value list, ``DELETE`` removes
                the set (values and TTL must match the stored set).
            record_set: The complete record set to write or delete.
        """
