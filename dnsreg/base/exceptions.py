"""
dnsreg exception hierarchy.

Every failure raised by the registry inherits from :class:`DNSRegError`.
Record store errors carry whatever structured detail the remote exposes
(code, message, HTTP status, request id) for diagnostics.
"""

from __future__ import annotations


# ── Base ──────────────────────────────────────────────────────────────
class DNSRegError(Exception):
    """Root exception for all dnsreg errors."""


# ── Configuration ─────────────────────────────────────────────────────
class ConfigurationError(DNSRegError):
    """Registry is misconfigured or used before :meth:`ping`."""


# ── Identity ──────────────────────────────────────────────────────────
class IdentityResolutionError(DNSRegError):
    """Hostname or IPv4 address of this node could not be resolved."""


# ── Record store ──────────────────────────────────────────────────────
class RecordStoreError(DNSRegError):
    """A list, change or zone call against the record store failed.

    Attributes:
        code: Service error code (e.g. ``Throttling``), if known.
        message: Service error message, if known.
        status_code: HTTP status of the failed request, if known.
        request_id: Remote request identifier, if known.
    """

    def __init__(
        self,
        msg: str,
        *,
        code: str | None = None,
        message: str | None = None,
        status_code: int | None = None,
        request_id: str | None = None,
    ) -> None:
        super().__init__(msg)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.request_id = request_id


class ZoneNotFoundError(RecordStoreError):
    """Hosted zone not found."""


class InvalidChangeBatchError(RecordStoreError):
    """The record store rejected a change batch."""


# ── Codec ─────────────────────────────────────────────────────────────
class RecordDecodeError(DNSRegError):
    """Record payload is malformed and must be skipped."""
