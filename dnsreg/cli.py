"""dnsreg CLI — operate a registry from the command line.

Usage examples::

    dnsreg route53://Z123 ping
    dnsreg "route53://Z123?recordPerHost=true" register --id web-1:abc:8080 --name web --port 8080
    dnsreg route53://Z123 services
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, get_args

from dnsreg.base.supported_services import existing_operations


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``dnsreg`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="dnsreg",
        description="DNS-backed service registry",
    )
    parser.add_argument(
        "uri",
        help="Registry URI (e.g. route53://Z123?recordPerHost=true)",
    )
    parser.add_argument(
        "operation",
        choices=get_args(existing_operations),
        help="Operation to perform",
    )
    parser.add_argument("--id", dest="service_id", help="Service instance ID")
    parser.add_argument("--name", help="Service name")
    parser.add_argument("--port", type=int, help="Service port")
    parser.add_argument("--ttl", type=int, default=None, help="Service TTL")
    parser.add_argument(
        "--attr", "-a",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Service attribute (e.g. localarecord=true); repeatable",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="{}",
        help='JSON config overrides (e.g. \'{"aws":{"region_name":"us-east-1"}}\')',
    )
    return parser


def _service_from_args(ns: argparse.Namespace) -> Any:
    from dnsreg.base.service import Service

    attrs: dict[str, str] = {}
    for item in ns.attr:
        key, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"attribute must be KEY=VALUE: {item!r}")
        attrs[key] = value
    fields: dict[str, Any] = {
        "id": ns.service_id or f"{ns.name}:{ns.port}",
        "name": ns.name,
        "port": ns.port,
        "attrs": attrs,
    }
    if ns.ttl is not None:
        fields["ttl"] = ns.ttl
    return Service(**fields)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parses arguments, creates a registry via the factory, pings it and
    invokes the requested operation.  Results are printed as JSON.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)

    if ns.operation in ("register", "deregister", "refresh") and (
        ns.name is None or ns.port is None
    ):
        parser.error(f"{ns.operation} requires --name and --port")

    try:
        overrides: dict[str, Any] = json.loads(ns.config)
    except json.JSONDecodeError as e:
        print(f"Invalid --config JSON: {e}", file=sys.stderr)
        sys.exit(1)

    # Lazy-import to avoid loading boto3 for --help
    from dnsreg.base.exceptions import DNSRegError
    from dnsreg.factory import registry_factory

    try:
        registry = registry_factory(ns.uri, **overrides)
        registry.ping()
        if ns.operation == "ping":
            result: Any = None
        elif ns.operation == "services":
            result = [s.model_dump() for s in registry.services()]
        else:
            service = _service_from_args(ns)
            outcome = getattr(registry, ns.operation)(service)
            result = None if outcome is None else {
                "service": outcome.service.model_dump(),
                "warnings": [str(w) for w in outcome.warnings],
            }
    except (DNSRegError, ValueError) as e:
        print(f"Operation failed: {e}", file=sys.stderr)
        sys.exit(1)

    if result is None:
        print("OK")
    else:
        print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
