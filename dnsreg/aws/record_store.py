"""AWS Route 53 implementation of the record store blueprint."""

from __future__ import annotations

from typing import Any, NoReturn

import boto3
from botocore.exceptions import ClientError

from dnsreg.base.config import AWSConfig
from dnsreg.base.exceptions import (
    InvalidChangeBatchError,
    RecordStoreError,
    ZoneNotFoundError,
)
from dnsreg.base.logger import reg_logger
from dnsreg.base.record_store import ChangeAction, RecordStoreBlueprint
from dnsreg.base.records import RecordKey, RecordSet, RecordType

_ERROR_MAP: dict[str, type[RecordStoreError]] = {
    "NoSuchHostedZone": ZoneNotFoundError,
    "InvalidChangeBatch": InvalidChangeBatchError,
}


def _handle(e: ClientError, msg: str, zone_id: str, operation: str) -> NoReturn:
    error = e.response.get("Error", {})
    meta = e.response.get("ResponseMetadata", {})
    code = error.get("Code")
    exc = (_ERROR_MAP.get(code or "") or RecordStoreError)(
        msg,
        code=code,
        message=error.get("Message"),
        status_code=meta.get("HTTPStatusCode"),
        request_id=meta.get("RequestId"),
    )
    reg_logger.remote_error(exc, zone=zone_id, operation=operation)
    raise exc from e


def _from_api(rrs: dict[str, Any]) -> RecordSet:
    return RecordSet(
        key=RecordKey(
            name=rrs["Name"],
            record_type=RecordType(rrs["Type"]),
            identifier=rrs.get("SetIdentifier", ""),
        ),
        values=[rr["Value"] for rr in rrs.get("ResourceRecords", [])],
        ttl=rrs.get("TTL", 0),
        weight=rrs.get("Weight", 0),
    )


def _to_api(record_set: RecordSet) -> dict[str, Any]:
    return {
        "Name": record_set.key.name,
        "Type": record_set.key.record_type.value,
        "SetIdentifier": record_set.key.identifier,
        "Weight": record_set.weight,
        "TTL": record_set.ttl,
        "ResourceRecords": [{"Value": v} for v in record_set.values],
    }


def _is_registry_type(rrs: dict[str, Any]) -> bool:
    return rrs.get("Type") in RecordType.__members__


class RecordStore(RecordStoreBlueprint):
    """AWS Route 53 record store.

    Attributes:
        client: boto3 Route 53 client.
    """

    def __init__(self, config: AWSConfig) -> None:
        """Initialize the Route 53 client.

        Args:
            config: AWS configuration object containing credentials and region.
                   Expected attributes:
                   - aws_access_key_id: AWS access key ID
                   - aws_secret_access_key: AWS secret access key
                   - region_name: AWS region name (e.g. 'us-east-1')
        """
        self.client = boto3.client(
            "route53",
            aws_access_key_id=config.aws_access_key_id,
            aws_secret_access_key=config.aws_secret_access_key,
            region_name=config.region_name,
        )

    def get_zone_name(self, zone_id: str) -> str:
        """Read the hosted zone's name.

        Raises:
            ZoneNotFoundError: If the zone does not exist.
        """
        try:
            resp = self.client.get_hosted_zone(Id=zone_id)
            return resp["HostedZone"]["Name"]  # type: ignore[no-any-return]
        except ClientError as e:
            _handle(e, f"Failed to get zone '{zone_id}'", zone_id, "get_zone_name")

    def get_record_set(self, zone_id: str, key: RecordKey) -> RecordSet | None:
        """Fetch the record set at *key* using a single-item listing.

        Route 53 lists from the start position onwards, so the first item is
        only returned when its name, type and identifier equal *key*.
        """
        try:
            resp = self.client.list_resource_record_sets(
                HostedZoneId=zone_id,
                StartRecordName=key.name,
                StartRecordType=key.record_type.value,
                StartRecordIdentifier=key.identifier,
                MaxItems="1",
            )
        except ClientError as e:
            _handle(e, f"Failed to read record '{key}' in zone '{zone_id}'", zone_id, "get_record_set")

        for rrs in resp.get("ResourceRecordSets", []):
            if not _is_registry_type(rrs):
                continue
            record_set = _from_api(rrs)
            if record_set.matches(key):
                return record_set
        return None

    def list_record_sets(
        self, zone_id: str, name: str, record_type: RecordType
    ) -> list[RecordSet]:
        """List all weighted record sets at *name* / *record_type*.

        Follows ``NextRecord*`` markers until the listing moves past *name*.
        """
        name = name.lower()
        params: dict[str, Any] = {
            "HostedZoneId": zone_id,
            "StartRecordName": name,
            "StartRecordType": record_type.value,
        }
        found: list[RecordSet] = []
        while True:
            try:
                resp = self.client.list_resource_record_sets(**params)
            except ClientError as e:
                _handle(e, f"Failed to list records '{name}' in zone '{zone_id}'", zone_id, "list_record_sets")

            for rrs in resp.get("ResourceRecordSets", []):
                if rrs.get("Name") != name or rrs.get("Type") != record_type.value:
                    return found
                found.append(_from_api(rrs))

            if not resp.get("IsTruncated"):
                return found
            params["StartRecordName"] = resp["NextRecordName"]
            params["StartRecordType"] = resp["NextRecordType"]
            if "NextRecordIdentifier" in resp:
                params["StartRecordIdentifier"] = resp["NextRecordIdentifier"]
            else:
                params.pop("StartRecordIdentifier", None)

    def change(self, zone_id: str, action: ChangeAction, record_set: RecordSet) -> None:
        """Apply a Route 53 change batch holding one change.

        Raises:
            InvalidChangeBatchError: If Route 53 rejects the change.
            RecordStoreError: On any other Route 53 API failure.
        """
        try:
            self.client.change_resource_record_sets(
                HostedZoneId=zone_id,
                ChangeBatch={
                    "Comment": f"Updated recordset for {record_set.key.name}",
                    "Changes": [
                        {
                            "Action": action,
                            "ResourceRecordSet": _to_api(record_set),
                        }
                    ],
                },
            )
        except ClientError as e:
            _handle(
                e,
                f"Failed to {action.lower()} record '{record_set.key}' in zone '{zone_id}'",
                zone_id,
                "change",
            )
