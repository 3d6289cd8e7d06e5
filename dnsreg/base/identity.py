"""Hostname and IPv4 resolution for the registering node.

Two strategies are supported: a metadata service lookup (any callable
``key -> value``, see :func:`dnsreg.aws.metadata.ec2_meta`) and the local
OS. A failing metadata lookup falls back to the OS.
"""

from __future__ import annotations

import ipaddress
import socket
import threading
from typing import Callable

import psutil

from dnsreg.base.exceptions import IdentityResolutionError
from dnsreg.base.logger import reg_logger

MetadataFetcher = Callable[[str], str]


def local_hostname() -> str:
    """Return the OS hostname.

    Raises:
        IdentityResolutionError: If the OS reports no hostname.
    """
    try:
        hostname = socket.gethostname()
    except OSError as e:
        raise IdentityResolutionError("Can't get host name") from e
    if not hostname:
        raise IdentityResolutionError("Can't get host name")
    return hostname


def external_ipv4() -> str:
    """Return the first routable IPv4 address of an up interface.

    Raises:
        IdentityResolutionError: If no such address exists.
    """
    stats = psutil.net_if_stats()
    for iface, addrs in psutil.net_if_addrs().items():
        st = stats.get(iface)
        if st is None or not st.isup:
            continue
        for addr in addrs:
            if addr.family != socket.AF_INET:
                continue
            ip = ipaddress.ip_address(addr.address)
            if ip.is_loopback or ip.is_link_local:
                continue
            return addr.address
    raise IdentityResolutionError("are you connected to the network?")


class IdentityResolver:
    """Resolves this node's hostname and addresses.

    The hostname is memoized on first use; addresses are resolved on
    every call.

    Attributes:
        metadata: Metadata lookup, or ``None`` to use the OS only.
    """

    def __init__(self, metadata: MetadataFetcher | None = None) -> None:
        self.metadata = metadata
        self._hostname: str | None = None
        self._lock = threading.Lock()

    def _lookup(self, key: str, fallback: Callable[[], str]) -> str:
        if self.metadata is not None:
            try:
                return self.metadata(key)
            except IdentityResolutionError as e:
                reg_logger.warning(
                    f"Unable to determine {key} from metadata ({e}), using local lookup",
                    operation="resolve_identity",
                )
        return fallback()

    def hostname(self) -> str:
        """Registry hostname: metadata ``hostname`` or the OS hostname."""
        with self._lock:
            if self._hostname is None:
                self._hostname = self._lookup("hostname", local_hostname)
            return self._hostname

    def local_hostname(self) -> str:
        """OS hostname, resolved fresh."""
        return local_hostname()

    def local_ipv4(self) -> str:
        return self._lookup("local-ipv4", external_ipv4)

    def public_ipv4(self) -> str:
        return self._lookup("public-ipv4", external_ipv4)
