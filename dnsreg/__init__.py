"""dnsreg — DNS-backed service registry.

Publishes service endpoints as records in a hosted DNS zone and lists the
services this node has registered.  Import :func:`registry_factory` to
create a registry from a connection URI::

    from dnsreg import Service, registry_factory

    registry = registry_factory("route53://Z123?recordPerHost=true")
    registry.ping()
    registry.register(Service(id="web-1:abc123:8080", name="web", port=8080))
"""

from .base import (
    RegistryBlueprint,
    RecordStoreBlueprint,
    ChangeResult,
    Service,
)
from .factory import registry_factory

__all__ = [
    "RegistryBlueprint",
    "RecordStoreBlueprint",
    "ChangeResult",
    "Service",
    "registry_factory",
]
