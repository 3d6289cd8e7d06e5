"""Registry factory.

Provides :func:`registry_factory`, the single entry-point for creating a
registry adapter from a connection URI.  The URI scheme selects the
adapter; every adapter implements :class:`~dnsreg.base.RegistryBlueprint`.
"""

from typing import Any
from urllib.parse import urlparse

from dnsreg.base import RegistryBlueprint
from dnsreg.base.exceptions import ConfigurationError
from dnsreg.aws.factory import SCHEME_REGISTRY as AWS_SCHEMES


# Factory registry: URI scheme -> adapter class
_FACTORY_REGISTRY: dict[str, type] = {
    **AWS_SCHEMES,
}


def supported_schemes() -> list[str]:
    return sorted(_FACTORY_REGISTRY)


def registry_factory(uri: str, **overrides: Any) -> RegistryBlueprint:
    """
    Create a registry adapter for a connection URI.
    Args:
        uri: Connection URI (e.g. 'route53://Z123?recordPerHost=true').
        **overrides: Extra config fields (e.g. ``aws`` credentials, ``ttl``).
    Returns:
        An instance of the adapter registered for the URI scheme.
    Raises:
        ConfigurationError: If the scheme is not supported or the URI is
            missing its zone.
    """
    scheme = urlparse(uri).scheme
    if scheme not in _FACTORY_REGISTRY:
        raise ConfigurationError(f"Unsupported registry scheme: {scheme!r}")

    adapter_class = _FACTORY_REGISTRY[scheme]
    return adapter_class.from_uri(uri, **overrides)  # type: ignore[no-any-return]
