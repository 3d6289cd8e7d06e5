"""AWS registry factory.

Maps URI schemes to their AWS registry implementations.
``SCHEME_REGISTRY`` is consumed by :func:`dnsreg.factory.registry_factory`.
"""

from dnsreg.aws.registry import Route53Registry


# Scheme registry for AWS
SCHEME_REGISTRY: dict[str, type] = {
    "route53": Route53Registry,
}
