"""Shared fixtures: an in-memory Route 53 client and a fixed identity."""

from __future__ import annotations

import copy
from typing import Any
from unittest.mock import patch

import pytest
from botocore.exceptions import ClientError

from dnsreg.aws.registry import Route53Registry
from dnsreg.base.config import RegistryConfig
from dnsreg.base.identity import IdentityResolver


def _client_error(code: str, msg: str = "error") -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": msg},
            "ResponseMetadata": {"HTTPStatusCode": 400, "RequestId": "req-123"},
        },
        "op",
    )


class FakeRoute53:
    """Minimal stand-in for the boto3 Route 53 client.

    Record sets are kept sorted by (name, type, identifier) and listed from
    a start position onwards like the real API.
    """

    def __init__(self, zones: dict[str, str] | None = None) -> None:
        self.zones = zones if zones is not None else {"Z1": "example.com."}
        self.records: dict[tuple[str, str, str], dict[str, Any]] = {}
        self.changes: list[dict[str, Any]] = []

    def get_hosted_zone(self, Id: str) -> dict[str, Any]:
        if Id not in self.zones:
            raise _client_error("NoSuchHostedZone")
        return {"HostedZone": {"Id": f"/hostedzone/{Id}", "Name": self.zones[Id]}}

    def list_resource_record_sets(self, HostedZoneId: str, **kwargs: Any) -> dict[str, Any]:
        if HostedZoneId not in self.zones:
            raise _client_error("NoSuchHostedZone")
        start = (
            kwargs.get("StartRecordName", "").lower(),
            kwargs.get("StartRecordType", ""),
            kwargs.get("StartRecordIdentifier", ""),
        )
        max_items = int(kwargs.get("MaxItems", "300"))
        keys = [k for k in sorted(self.records) if k >= start]
        page = keys[:max_items]
        resp: dict[str, Any] = {
            "ResourceRecordSets": [copy.deepcopy(self.records[k]) for k in page],
            "IsTruncated": len(keys) > max_items,
            "MaxItems": str(max_items),
        }
        if resp["IsTruncated"]:
            name, rtype, ident = keys[max_items]
            resp["NextRecordName"] = name
            resp["NextRecordType"] = rtype
            resp["NextRecordIdentifier"] = ident
        return resp

    def change_resource_record_sets(self, HostedZoneId: str, ChangeBatch: dict[str, Any]) -> dict[str, Any]:
        if HostedZoneId not in self.zones:
            raise _client_error("NoSuchHostedZone")
        for change in ChangeBatch["Changes"]:
            rrs = copy.deepcopy(change["ResourceRecordSet"])
            rrs["Name"] = rrs["Name"].lower()
            key = (rrs["Name"], rrs["Type"], rrs.get("SetIdentifier", ""))
            if change["Action"] == "UPSERT":
                if not rrs["ResourceRecords"]:
                    raise _client_error("InvalidChangeBatch", "empty record set")
                self.records[key] = rrs
            elif change["Action"] == "DELETE":
                if self.records.get(key) != rrs:
                    raise _client_error("InvalidChangeBatch", "record set not found")
                del self.records[key]
            self.changes.append(copy.deepcopy(change))
        return {"ChangeInfo": {"Id": "/change/C1", "Status": "PENDING"}}

    def values(self, name: str, rtype: str, ident: str) -> list[str] | None:
        rrs = self.records.get((name, rtype, ident))
        if rrs is None:
            return None
        return [rr["Value"] for rr in rrs["ResourceRecords"]]


class StubIdentity(IdentityResolver):
    """Identity resolver answering with fixed values."""

    def __init__(
        self,
        hostname: str = "node-1",
        local_hostname: str | None = None,
        local_ipv4: str = "10.0.0.5",
        public_ipv4: str = "54.1.2.3",
    ) -> None:
        super().__init__()
        self._fixed_hostname = hostname
        self._fixed_local = local_hostname or hostname
        self._local_ipv4 = local_ipv4
        self._public_ipv4 = public_ipv4

    def hostname(self) -> str:
        return self._fixed_hostname

    def local_hostname(self) -> str:
        return self._fixed_local

    def local_ipv4(self) -> str:
        return self._local_ipv4

    def public_ipv4(self) -> str:
        return self._public_ipv4


@pytest.fixture
def route53():
    return FakeRoute53()


@pytest.fixture
def make_registry(route53):
    """Build pinged registries sharing one fake Route 53 zone."""
    patcher = patch("dnsreg.aws.record_store.boto3")
    mock_boto = patcher.start()
    mock_boto.client.return_value = route53

    def _make(identity: IdentityResolver | None = None, **config: Any) -> Route53Registry:
        cfg = RegistryConfig(zone_id="Z1", **config)
        reg = Route53Registry(cfg, identity=identity or StubIdentity())
        reg.ping()
        return reg

    yield _make
    patcher.stop()
