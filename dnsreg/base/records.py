"""Record set model shared by the editor, the codec and the record stores."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dnsreg.base.config import DEFAULT_TTL

DEFAULT_WEIGHT = 1


class RecordType(str, Enum):
    """Record families written by the registry."""

    A = "A"
    TXT = "TXT"
    SRV = "SRV"


class RecordKey(BaseModel):
    """Selects at most one record set within a zone."""

    model_config = ConfigDict(frozen=True)

    name: str
    record_type: RecordType
    identifier: str

    @field_validator("name")
    @classmethod
    def normalise_name(cls, value: str) -> str:
        # Route 53 reports names in lower case
        return value.lower()

    def __str__(self) -> str:
        return f"{self.name} {self.record_type.value} [{self.identifier}]"


class RecordSet(BaseModel):
    """A named, typed, identified collection of record values.

    A record set with no values is never persisted; it is deleted instead.
    """

    key: RecordKey
    values: list[str] = Field(default_factory=list)
    ttl: int = DEFAULT_TTL
    weight: int = DEFAULT_WEIGHT

    def matches(self, key: RecordKey) -> bool:
        return self.key == key

    def find(self, value: str) -> int:
        """Return the index of *value*, or of the first value containing it, or -1.

        An exact match wins over an earlier substring match.
        """
        if value in self.values:
            return self.values.index(value)
        for i, existing in enumerate(self.values):
            if value in existing:
                return i
        return -1
