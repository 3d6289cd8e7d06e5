"""Encoding of the payloads carried in TXT and SRV records.

TXT payloads pack a service identity into a single string::

    "<host>:<suffix>:<port>|<service id>|<service name>"

Route 53 stores TXT values wrapped in literal double quotes, so the codec
adds one pair when encoding and strips one pair when decoding.
"""

from __future__ import annotations

from typing import NamedTuple

from dnsreg.base.exceptions import RecordDecodeError
from dnsreg.base.service import Service

SRV_PRIORITY = 1
SRV_WEIGHT = 1


class PointerText(NamedTuple):
    """Decoded TXT payload."""

    identity: str
    host: str
    suffix: str
    port: int
    service_id: str | None
    name: str | None


class ServiceRecord(NamedTuple):
    """Decoded SRV payload."""

    priority: int
    weight: int
    port: int
    target: str


def quote(value: str) -> str:
    return f'"{value}"'


def unquote(raw: str) -> str:
    """Strip exactly one leading and one trailing double quote."""
    if raw.startswith('"'):
        raw = raw[1:]
    if raw.endswith('"'):
        raw = raw[:-1]
    return raw


def instance_suffix(service: Service) -> str:
    """Short unique token for *service* on its host.

    IDs shaped ``host:container:port`` yield the container part; anything
    else is used whole with separator characters replaced.
    """
    parts = service.id.split(":")
    if len(parts) == 3 and parts[1]:
        return parts[1]
    return service.id.replace(":", "-").replace("|", "-")


def encode_pointer_text(service: Service, host: str) -> str:
    """Encode the discovery payload for *service* running on *host*."""
    identity = f"{host}:{instance_suffix(service)}:{service.port}"
    service_id = service.id.replace("|", "-")
    return quote(f"{identity}|{service_id}|{service.name}")


def decode_pointer_text(raw: str) -> PointerText:
    """Decode a TXT payload written by :func:`encode_pointer_text`.

    Values with fewer than three ``|`` fields are the older shape where the
    whole string is the identity key; service id and name are then ``None``.

    Raises:
        RecordDecodeError: If the identity key does not have exactly three
            ``:`` fields, the port is not an integer, or the payload has
            more than three ``|`` fields.
    """
    text = unquote(raw)
    fields = text.split("|")
    if len(fields) > 3:
        raise RecordDecodeError(f"too many fields in {text!r}")
    if len(fields) == 3:
        identity, service_id, name = fields
    else:
        identity, service_id, name = text, None, None

    parts = identity.split(":")
    if len(parts) != 3:
        raise RecordDecodeError(f"malformed identity key: {identity!r}")
    host, suffix, port_text = parts
    try:
        port = int(port_text, 10)
    except ValueError:
        raise RecordDecodeError(f"unparseable port in {identity!r}") from None
    if not 0 <= port <= 65535:
        raise RecordDecodeError(f"port out of range in {identity!r}")
    return PointerText(identity, host, suffix, port, service_id, name)


def encode_service_record(port: int, target: str) -> str:
    return f"{SRV_PRIORITY} {SRV_WEIGHT} {port} {target}"


def decode_service_record(raw: str) -> ServiceRecord:
    """Decode a ``priority weight port target`` SRV value.

    Raises:
        RecordDecodeError: If the value does not have four integer-led fields.
    """
    parts = raw.split(" ")
    if len(parts) != 4:
        raise RecordDecodeError(f"malformed SRV record: {raw!r}")
    try:
        priority, weight, port = (int(p, 10) for p in parts[:3])
    except ValueError:
        raise RecordDecodeError(f"unparseable SRV record: {raw!r}") from None
    return ServiceRecord(priority, weight, port, parts[3])
