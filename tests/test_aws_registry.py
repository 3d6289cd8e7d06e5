"""Tests for the Route 53 service registry."""

from unittest.mock import MagicMock
import pytest

from conftest import StubIdentity
from dnsreg.aws.registry import Route53Registry
from dnsreg.base.config import RegistryConfig
from dnsreg.base.exceptions import (
    ConfigurationError,
    IdentityResolutionError,
    RecordStoreError,
    ZoneNotFoundError,
)
from dnsreg.base.record_store import RecordStoreBlueprint
from dnsreg.base.records import RecordType
from dnsreg.base.service import Service

SRV = "_web._tcp.example.com."
TXT = "node-1.services.example.com."
A = "web.example.com."


def _web(port: int = 8080, **attrs: str) -> Service:
    return Service(id=f"node-1:web-{port}:{port}", name="web", port=port, attrs=attrs)


# --- ping ---

class TestPing:
    def test_suffix_from_zone_name(self, make_registry):
        reg = make_registry()
        assert reg.dns_suffix == "example.com."

    def test_prefix(self, make_registry):
        reg = make_registry(dns_prefix="svc")
        assert reg.dns_suffix == "svc.example.com."

    def test_only_first_call_resolves(self):
        store = MagicMock(spec=RecordStoreBlueprint)
        store.get_zone_name.return_value = "example.com."
        reg = Route53Registry(RegistryConfig(zone_id="Z1"), store=store, identity=StubIdentity())
        reg.ping()
        reg.ping()
        store.get_zone_name.assert_called_once_with("Z1")

    def test_missing_zone(self):
        store = MagicMock(spec=RecordStoreBlueprint)
        store.get_zone_name.side_effect = ZoneNotFoundError("gone")
        reg = Route53Registry(RegistryConfig(zone_id="Z9"), store=store, identity=StubIdentity())
        with pytest.raises(ZoneNotFoundError):
            reg.ping()
        with pytest.raises(ConfigurationError):
            reg.services()

    @pytest.mark.parametrize("op", ["register", "deregister"])
    def test_operations_require_ping(self, op):
        store = MagicMock(spec=RecordStoreBlueprint)
        reg = Route53Registry(RegistryConfig(zone_id="Z1"), store=store, identity=StubIdentity())
        with pytest.raises(ConfigurationError):
            getattr(reg, op)(_web())
        store.change.assert_not_called()


# --- register ---

class TestRegister:
    def test_writes_txt_and_srv(self, make_registry, route53):
        reg = make_registry()
        result = reg.register(_web())
        assert result.ok
        assert route53.values(SRV, "SRV", "web") == ["1 1 8080 node-1"]
        assert route53.values(TXT, "TXT", "web") == ['"node-1:web-8080:8080|node-1:web-8080:8080|web"']
        assert not any(k[1] == "A" for k in route53.records)

    def test_srv_record_shape(self, make_registry, route53):
        make_registry().register(_web())
        rrs = route53.records[(SRV, "SRV", "web")]
        assert rrs["TTL"] == 30
        assert rrs["Weight"] == 1

    def test_address_records_opt_in(self, make_registry, route53):
        reg = make_registry(record_per_host=True)
        reg.register(_web(localarecord="true", publicarecord="1"))
        assert route53.values(A, "A", "node-1") == ["10.0.0.5", "54.1.2.3"]

    def test_unparsable_flag_is_false(self, make_registry, route53):
        make_registry().register(_web(localarecord="yes please"))
        assert route53.values(A, "A", "web") is None

    def test_same_address_written_once(self, make_registry, route53):
        identity = StubIdentity(local_ipv4="10.0.0.5", public_ipv4="10.0.0.5")
        reg = make_registry(identity=identity)
        reg.register(_web(localarecord="true", publicarecord="true"))
        assert route53.values(A, "A", "web") == ["10.0.0.5"]

    def test_repeat_registration_converges(self, make_registry, route53):
        reg = make_registry()
        reg.register(_web())
        reg.register(_web())
        assert route53.values(SRV, "SRV", "web") == ["1 1 8080 node-1"]
        assert len(route53.values(TXT, "TXT", "web")) == 1

    def test_shared_identifier_accumulates(self, make_registry, route53):
        reg = make_registry()
        reg.register(_web(8080))
        reg.register(_web(8081))
        assert route53.values(SRV, "SRV", "web") == ["1 1 8080 node-1", "1 1 8081 node-1"]

    def test_record_per_host_is_disjoint(self, make_registry, route53):
        a = make_registry(identity=StubIdentity("node-1"), record_per_host=True)
        b = make_registry(identity=StubIdentity("node-2"), record_per_host=True)
        a.register(_web())
        b.register(_web())
        assert route53.values(SRV, "SRV", "node-1") == ["1 1 8080 node-1"]
        assert route53.values(SRV, "SRV", "node-2") == ["1 1 8080 node-2"]
        sets = a.store.list_record_sets("Z1", SRV, RecordType.SRV)
        assert sorted(s.key.identifier for s in sets) == ["node-1", "node-2"]

    def test_secondary_failure_is_a_warning(self, make_registry, route53):
        identity = StubIdentity()
        identity.local_ipv4 = MagicMock(side_effect=IdentityResolutionError("offline"))
        reg = make_registry(identity=identity)
        result = reg.register(_web(localarecord="true"))
        assert not result.ok
        assert isinstance(result.warnings[0], IdentityResolutionError)
        assert route53.values(SRV, "SRV", "web") == ["1 1 8080 node-1"]

    def test_txt_failure_does_not_block_srv(self, make_registry, route53):
        reg = make_registry()
        original = reg.store.change

        def fail_txt(zone_id, action, record_set):
            if record_set.key.record_type is RecordType.TXT:
                raise RecordStoreError("txt rejected")
            original(zone_id, action, record_set)

        reg.store.change = fail_txt
        result = reg.register(_web())
        assert [str(w) for w in result.warnings] == ["txt rejected"]
        assert route53.values(SRV, "SRV", "web") == ["1 1 8080 node-1"]

    def test_srv_failure_raises(self, make_registry):
        reg = make_registry()
        original = reg.store.change

        def fail_srv(zone_id, action, record_set):
            if record_set.key.record_type is RecordType.SRV:
                raise RecordStoreError("srv rejected")
            original(zone_id, action, record_set)

        reg.store.change = fail_srv
        with pytest.raises(RecordStoreError, match="srv rejected"):
            reg.register(_web())

    def test_hostname_failure_raises(self, make_registry):
        identity = StubIdentity()
        identity.hostname = MagicMock(side_effect=IdentityResolutionError("no host"))
        reg = make_registry(identity=identity)
        with pytest.raises(IdentityResolutionError):
            reg.register(_web())


# --- deregister ---

class TestDeregister:
    def test_last_value_deletes_every_family(self, make_registry, route53):
        reg = make_registry()
        svc = _web(localarecord="true")
        reg.register(svc)
        result = reg.deregister(svc)
        assert result.ok
        assert route53.records == {}
        deletes = [c for c in route53.changes if c["Action"] == "DELETE"]
        assert [c["ResourceRecordSet"]["Type"] for c in deletes] == ["A", "TXT", "SRV"]

    def test_remaining_value_is_upserted(self, make_registry, route53):
        reg = make_registry()
        reg.register(_web(8080))
        reg.register(_web(8081))
        route53.changes.clear()
        reg.deregister(_web(8080))
        assert route53.values(SRV, "SRV", "web") == ["1 1 8081 node-1"]
        srv_changes = [c for c in route53.changes if c["ResourceRecordSet"]["Type"] == "SRV"]
        assert [c["Action"] for c in srv_changes] == ["UPSERT"]

    def test_unknown_service_is_noop(self, make_registry, route53):
        reg = make_registry()
        result = reg.deregister(_web())
        assert result.ok
        assert route53.changes == []

    def test_prefix_related_hostnames(self, make_registry, route53):
        longer = make_registry(identity=StubIdentity("web-2"))
        shorter = make_registry(identity=StubIdentity("web"))
        svc = Service(id="svc-80", name="svc", port=80)
        longer.register(svc)
        shorter.register(svc)
        key = ("_svc._tcp.example.com.", "SRV", "svc")
        assert route53.values(*key) == ["1 1 80 web-2", "1 1 80 web"]
        shorter.deregister(svc)
        assert route53.values(*key) == ["1 1 80 web-2"]

    def test_other_host_values_survive(self, make_registry, route53):
        a = make_registry(identity=StubIdentity("node-1"))
        b = make_registry(identity=StubIdentity("node-2"))
        a.register(_web())
        b.register(_web())
        a.deregister(_web())
        assert route53.values(SRV, "SRV", "web") == ["1 1 8080 node-2"]


# --- services ---

class TestServices:
    def test_register_then_list(self, make_registry):
        reg = make_registry()
        reg.register(_web(8080))
        services = reg.services()
        assert len(services) == 1
        svc = services[0]
        assert svc.name == "web"
        assert svc.port == 8080
        assert svc.id == "node-1:web-8080:8080|node-1:web-8080:8080|web"
        assert svc.ttl == 30

    def test_deregister_then_list(self, make_registry):
        reg = make_registry()
        reg.register(_web())
        reg.deregister(_web())
        assert reg.services() == []

    def test_lists_every_service_name(self, make_registry):
        reg = make_registry()
        reg.register(_web(8080))
        reg.register(Service(id="node-1:db:5432", name="db", port=5432))
        assert sorted((s.name, s.port) for s in reg.services()) == [("db", 5432), ("web", 8080)]

    def test_metadata_hostname_or_os_hostname(self, make_registry, route53):
        identity = StubIdentity(hostname="ip-10-0-0-5.ec2.internal", local_hostname="node-1")
        reg = make_registry(identity=identity)
        route53.records[(TXT, "TXT", "legacy")] = {
            "Name": TXT,
            "Type": "TXT",
            "SetIdentifier": "legacy",
            "Weight": 1,
            "TTL": 30,
            "ResourceRecords": [
                {"Value": '"node-1:abc:9000|abc|legacy"'},
                {"Value": '"other-host:abc:9001|abc|legacy"'},
            ],
        }
        reg.register(_web())
        found = sorted((s.name, s.port) for s in reg.services())
        assert found == [("legacy", 9000), ("web", 8080)]

    def test_skips_malformed_records(self, make_registry, route53):
        reg = make_registry()
        route53.records[(TXT, "TXT", "junk")] = {
            "Name": TXT,
            "Type": "TXT",
            "SetIdentifier": "junk",
            "Weight": 1,
            "TTL": 45,
            "ResourceRecords": [
                {"Value": '"node-1:8080|x|junk"'},
                {"Value": '"node-1:abc:notaport|x|junk"'},
                {"Value": '"node-1:abc123:7000"'},
            ],
        }
        services = reg.services()
        assert len(services) == 1
        assert services[0].port == 7000
        assert services[0].name == "abc123"
        assert services[0].ttl == 45

    def test_store_error_propagates(self, make_registry):
        reg = make_registry()
        reg.store.list_record_sets = MagicMock(side_effect=RecordStoreError("boom"))
        with pytest.raises(RecordStoreError):
            reg.services()


# --- refresh ---

class TestRefresh:
    def test_noop(self, make_registry, route53):
        reg = make_registry()
        assert reg.refresh(_web()) is None
        assert route53.changes == []
