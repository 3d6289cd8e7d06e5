"""Service value exchanged with the host, and the result of a change."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from dnsreg.base.config import DEFAULT_TTL
from dnsreg.base.exceptions import DNSRegError

# Per-service attributes opting into address records
PUBLISH_LOCAL_A_RECORD = "localarecord"
PUBLISH_PUBLIC_A_RECORD = "publicarecord"


class Service(BaseModel):
    """A service instance as seen by the registry.

    Attributes:
        id: Opaque unique instance ID (usually ``host:container:port``).
        name: Logical service name.
        port: Port the instance listens on.
        ttl: TTL in seconds.
        attrs: Per-registration flags such as ``localarecord``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    port: int = Field(ge=0, le=65535)
    ttl: int = DEFAULT_TTL
    attrs: dict[str, str] = Field(default_factory=dict)


class ChangeResult(BaseModel):
    """Outcome of :meth:`register` / :meth:`deregister`.

    A failure of the service (SRV) record is raised, never returned. Failures
    of the address and discovery records are collected in ``warnings`` so a
    caller can observe partial success.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    service: Service
    warnings: list[DNSRegError] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings
