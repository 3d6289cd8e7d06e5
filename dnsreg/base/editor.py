"""Record set editor.

Turns "add this value" / "remove this value" into the minimal change
against the record store: create a single-value set, append, drop one
value, or delete the set once it would become empty. State is always
re-read before writing since other hosts modify the same zone.
"""

from __future__ import annotations

from dnsreg.base.logger import reg_logger
from dnsreg.base.record_store import RecordStoreBlueprint
from dnsreg.base.records import RecordKey, RecordSet


class RecordSetEditor:
    """Value-level edits of weighted record sets in one hosted zone.

    Attributes:
        store: Record store client.
        zone_id: Hosted zone ID.
        ttl: TTL for newly created record sets.
    """

    def __init__(self, store: RecordStoreBlueprint, zone_id: str, ttl: int) -> None:
        self.store = store
        self.zone_id = zone_id
        self.ttl = ttl

    def _fetch(self, key: RecordKey) -> RecordSet | None:
        current = self.store.get_record_set(self.zone_id, key)
        if current is None or not current.matches(key):
            return None
        return current

    def upsert_value(self, key: RecordKey, value: str) -> None:
        """Add *value* to the record set at *key*, creating it if needed.

        A value already present verbatim is left alone.

        Raises:
            RecordStoreError: On read or write failure.
        """
        current = self._fetch(key)
        if current is None:
            reg_logger.info(
                f"Creating new DNS entry for {key} with value {value}",
                zone=self.zone_id, record=key.name, operation="upsert_value",
            )
            self.store.change(
                self.zone_id, "UPSERT", RecordSet(key=key, values=[value], ttl=self.ttl)
            )
            return

        if value in current.values:
            reg_logger.debug(
                f"{key} already holds {value}",
                zone=self.zone_id, record=key.name, operation="upsert_value",
            )
            return

        reg_logger.info(
            f"Updating DNS entry for {key} adding value {value}",
            zone=self.zone_id, record=key.name, operation="upsert_value",
        )
        updated = current.model_copy(update={"values": [*current.values, value]})
        self.store.change(self.zone_id, "UPSERT", updated)

    def remove_value(self, key: RecordKey, value: str) -> None:
        """Remove the first value at *key* that contains *value*.

        Deletes the whole record set when that value is the last one. A
        missing set or value is a no-op.

        Raises:
            RecordStoreError: On read or write failure.
        """
        current = self._fetch(key)
        if current is None:
            reg_logger.info(
                f"Could not find {key} to remove {value}",
                zone=self.zone_id, record=key.name, operation="remove_value",
            )
            return

        pos = current.find(value)
        if pos == -1:
            reg_logger.info(
                f"{key} holds no value matching {value}",
                zone=self.zone_id, record=key.name, operation="remove_value",
            )
            return

        if len(current.values) == 1:
            # the only value is the one being removed
            self.store.change(self.zone_id, "DELETE", current)
            return

        remaining = current.values[:pos] + current.values[pos + 1:]
        self.store.change(
            self.zone_id, "UPSERT", current.model_copy(update={"values": remaining})
        )
