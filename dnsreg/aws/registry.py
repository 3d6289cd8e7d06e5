"""Route 53 service registry.

Each service is published as up to three record families under the
hosted zone's suffix:

* ``A``   ``<service>.<suffix>`` holding this node's local/public IPv4
  (opt-in per service through the ``localarecord``/``publicarecord``
  attributes),
* ``TXT`` ``<os hostname>.services.<suffix>`` holding the encoded service
  identity, used to list what this node runs,
* ``SRV`` ``_<service>._tcp.<suffix>`` holding ``1 1 <port> <hostname>``.

The SRV record is the primary family: its failure is raised. A and TXT
failures are logged and returned as warnings.

All record sets are weighted and keyed by a set identifier. With
``record_per_host`` the A and SRV identifier is this node's hostname, so
every host owns a disjoint record set. Otherwise it is the service name and
all hosts share one record set; concurrent writers to a shared set can lose
updates since each write replaces the whole value list.
"""

from __future__ import annotations

import threading
from functools import partial
from typing import Any, Callable

from dnsreg.aws.metadata import ec2_meta
from dnsreg.aws.record_store import RecordStore
from dnsreg.base.codec import (
    decode_pointer_text,
    encode_pointer_text,
    encode_service_record,
    unquote,
)
from dnsreg.base.config import RegistryConfig, parse_bool, validate_config
from dnsreg.base.editor import RecordSetEditor
from dnsreg.base.exceptions import ConfigurationError, DNSRegError, RecordDecodeError
from dnsreg.base.identity import IdentityResolver
from dnsreg.base.logger import reg_logger
from dnsreg.base.record_store import RecordStoreBlueprint
from dnsreg.base.records import RecordKey, RecordType
from dnsreg.base.registry import RegistryBlueprint
from dnsreg.base.service import (
    PUBLISH_LOCAL_A_RECORD,
    PUBLISH_PUBLIC_A_RECORD,
    ChangeResult,
    Service,
)

Edit = Callable[[RecordKey, str], None]


class Route53Registry(RegistryBlueprint):
    """Service registry backed by a Route 53 hosted zone.

    Attributes:
        config: Validated registry configuration.
        store: Record store client.
        identity: Hostname / address resolver for this node.
        editor: Value-level record set editor.
    """

    def __init__(
        self,
        config: RegistryConfig,
        store: RecordStoreBlueprint | None = None,
        identity: IdentityResolver | None = None,
    ) -> None:
        """Initialize the registry.

        Args:
            config: Registry configuration.
            store: Record store; a Route 53 client built from
                ``config.aws`` when omitted.
            identity: Identity resolver; uses the EC2 metadata service
                when ``config.use_ec2_metadata`` is set, the OS otherwise.
        """
        self.config = config
        self.store = store if store is not None else RecordStore(config.aws)
        if identity is None:
            metadata = (
                partial(ec2_meta, timeout=config.metadata_timeout)
                if config.use_ec2_metadata
                else None
            )
            identity = IdentityResolver(metadata)
        self.identity = identity
        self.editor = RecordSetEditor(self.store, config.zone_id, config.ttl)
        self._dns_suffix: str | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_uri(cls, uri: str, **overrides: Any) -> Route53Registry:
        """Build a registry from a ``route53://<zone id>?...`` URI."""
        return cls(validate_config("route53", uri, **overrides))

    def _require_ping(self) -> None:
        if self._dns_suffix is None:
            raise ConfigurationError("ping() must succeed before using the registry")

    @property
    def dns_suffix(self) -> str:
        """Zone suffix appended to every record name.

        Raises:
            ConfigurationError: If :meth:`ping` has not succeeded yet.
        """
        self._require_ping()
        return self._dns_suffix  # type: ignore[return-value]

    # --- Naming ---

    def _identifier(self, service: Service, hostname: str) -> str:
        return hostname if self.config.record_per_host else service.name

    def _address_key(self, service: Service, hostname: str) -> RecordKey:
        return RecordKey(
            name=f"{service.name}.{self.dns_suffix}",
            record_type=RecordType.A,
            identifier=self._identifier(service, hostname),
        )

    def _txt_domain(self, local_hostname: str) -> str:
        return f"{local_hostname}.services.{self.dns_suffix}"

    def _txt_key(self, service: Service) -> RecordKey:
        return RecordKey(
            name=self._txt_domain(self.identity.local_hostname()),
            record_type=RecordType.TXT,
            identifier=service.name,
        )

    def _srv_key(self, service: Service, hostname: str) -> RecordKey:
        return RecordKey(
            name=f"_{service.name}._tcp.{self.dns_suffix}",
            record_type=RecordType.SRV,
            identifier=self._identifier(service, hostname),
        )

    # --- Secondary record families ---

    def _best_effort(
        self, result: ChangeResult, label: str, fn: Callable[..., None], *args: Any
    ) -> None:
        try:
            fn(*args)
        except DNSRegError as e:
            reg_logger.error(
                f"Failed to update {label} for {result.service.name}: {e}",
                zone=self.config.zone_id,
                operation=label,
            )
            result.warnings.append(e)

    def _edit_address(self, edit: Edit, key: RecordKey, resolve: Callable[[], str]) -> None:
        edit(key, resolve())

    def _edit_txt(self, edit: Edit, service: Service, hostname: str) -> None:
        edit(self._txt_key(service), encode_pointer_text(service, hostname))

    def _update_secondary(
        self, service: Service, hostname: str, edit: Edit, result: ChangeResult
    ) -> None:
        families = (
            (PUBLISH_LOCAL_A_RECORD, self.identity.local_ipv4),
            (PUBLISH_PUBLIC_A_RECORD, self.identity.public_ipv4),
        )
        for attr, resolve in families:
            if not parse_bool(service.attrs.get(attr)):
                continue
            key = self._address_key(service, hostname)
            reg_logger.info(
                f"Updating {attr} for {key.name}",
                zone=self.config.zone_id, record=key.name, operation=attr,
            )
            self._best_effort(result, attr, self._edit_address, edit, key, resolve)

        self._best_effort(result, "discovery TXT record", self._edit_txt, edit, service, hostname)

    # --- Registry operations ---

    def ping(self) -> None:
        """Resolve the zone suffix from the hosted zone's name.

        Only the first successful call has an effect.

        Raises:
            ZoneNotFoundError: If the hosted zone does not exist.
            RecordStoreError: On any other Route 53 failure.
        """
        with self._lock:
            if self._dns_suffix is not None:
                return
            suffix = self.store.get_zone_name(self.config.zone_id)
            if self.config.dns_prefix:
                suffix = f"{self.config.dns_prefix}.{suffix}"
            self._dns_suffix = suffix
        reg_logger.info(
            f"Using DNS suffix {suffix}", zone=self.config.zone_id, operation="ping"
        )

    def register(self, service: Service) -> ChangeResult:
        """Publish *service*'s A (opt-in), TXT and SRV records.

        Raises:
            ConfigurationError: If called before :meth:`ping`.
            IdentityResolutionError: If the hostname cannot be resolved.
            RecordStoreError: If the SRV record could not be written.
        """
        self._require_ping()
        reg_logger.info(
            f"Registering service {service.id}||{service.name}",
            zone=self.config.zone_id, operation="register",
        )
        hostname = self.identity.hostname()
        result = ChangeResult(service=service)
        self._update_secondary(service, hostname, self.editor.upsert_value, result)
        self.editor.upsert_value(
            self._srv_key(service, hostname),
            encode_service_record(service.port, hostname),
        )
        return result

    def deregister(self, service: Service) -> ChangeResult:
        """Retract what :meth:`register` published for *service*.

        Raises:
            ConfigurationError: If called before :meth:`ping`.
            IdentityResolutionError: If the hostname cannot be resolved.
            RecordStoreError: If the SRV record could not be updated.
        """
        self._require_ping()
        reg_logger.info(
            f"Deregistering service {service.id}||{service.name}",
            zone=self.config.zone_id, operation="deregister",
        )
        hostname = self.identity.hostname()
        result = ChangeResult(service=service)
        self._update_secondary(service, hostname, self.editor.remove_value, result)
        self.editor.remove_value(
            self._srv_key(service, hostname),
            encode_service_record(service.port, hostname),
        )
        return result

    def services(self) -> list[Service]:
        """List services registered from this node.

        Reads the TXT record sets under this node's discovery name and keeps
        entries whose host label is either the registry hostname or the OS
        hostname. Malformed and foreign entries are skipped.
        """
        self._require_ping()
        local = self.identity.local_hostname()
        owners = {self.identity.hostname(), local}
        domain = self._txt_domain(local)
        found: list[Service] = []
        for record_set in self.store.list_record_sets(
            self.config.zone_id, domain, RecordType.TXT
        ):
            for raw in record_set.values:
                try:
                    decoded = decode_pointer_text(raw)
                except RecordDecodeError as e:
                    reg_logger.debug(
                        f"Skipping record: {e}",
                        zone=self.config.zone_id, record=domain, operation="services",
                    )
                    continue
                if decoded.host not in owners:
                    continue
                found.append(
                    Service(
                        id=unquote(raw),
                        name=decoded.name or decoded.suffix,
                        port=decoded.port,
                        ttl=record_set.ttl,
                    )
                )
        return found

    def refresh(self, service: Service) -> None:
        """No-op; records expire through their DNS TTL."""
