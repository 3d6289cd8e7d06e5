"""
Pydantic configuration models for the registry.

Validates the connection URI and AWS credentials at construction time
instead of silently passing bad values to the record store client.
"""

from __future__ import annotations

import os
from typing import Any
from urllib.parse import parse_qs, urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from dnsreg.base.exceptions import ConfigurationError

# Query parameter names accepted in the connection URI
EC2_METADATA_KEY = "useEC2MetadataForHostname"
DNS_PREFIX_KEY = "dnsPrefix"
RECORD_PER_HOST_KEY = "recordPerHost"

DEFAULT_TTL = 30

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}


def parse_bool(value: Any) -> bool:
    """Parse a boolean option, treating anything unrecognised as ``False``.

    Accepts the classic ``1/t/true`` and ``0/f/false`` spellings.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip() in _TRUE


class AWSConfig(BaseModel):
    """Credentials for the Route 53 client.

    Credentials are resolved in order:
    1. Explicit values passed in the config dict.
    2. Environment variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, AWS_DEFAULT_REGION).
    3. If neither is set, fields are left as None so boto3 can fall back to its
       own credential chain (instance profile, ~/.aws/credentials, etc.).
    """

    model_config = ConfigDict(extra="forbid")

    aws_access_key_id: str | None = Field(default=None, description="AWS access key ID")
    aws_secret_access_key: str | None = Field(default=None, description="AWS secret access key")
    region_name: str | None = Field(default=None, description="AWS region (e.g. 'us-east-1')")

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing credentials."""
        env_map = {
            "aws_access_key_id": "AWS_ACCESS_KEY_ID",
            "aws_secret_access_key": "AWS_SECRET_ACCESS_KEY",
            "region_name": "AWS_DEFAULT_REGION",
        }
        for field, env_var in env_map.items():
            if not values.get(field):
                values[field] = os.environ.get(env_var)
        return values


class RegistryConfig(BaseModel):
    """Configuration of one registry instance.

    Attributes:
        zone_id: Hosted zone the registry operates on.
        use_ec2_metadata: Resolve hostname and addresses through the EC2
            metadata service instead of the OS.
        dns_prefix: Label prepended to the zone name to form the suffix.
        record_per_host: Scope A and SRV record sets to this host's
            hostname rather than the service name.
        ttl: TTL written on every record set.
        metadata_timeout: Timeout in seconds for metadata lookups.
        aws: Credentials for the record store client.
    """

    model_config = ConfigDict(extra="forbid")

    zone_id: str = Field(description="Hosted zone ID")
    use_ec2_metadata: bool = False
    dns_prefix: str = ""
    record_per_host: bool = False
    ttl: int = Field(default=DEFAULT_TTL, gt=0)
    metadata_timeout: float = Field(default=2.0, gt=0)
    aws: AWSConfig = Field(default_factory=AWSConfig)

    @field_validator("use_ec2_metadata", "record_per_host", mode="before")
    @classmethod
    def lenient_bool(cls, value: Any) -> bool:
        return parse_bool(value)

    @field_validator("zone_id")
    @classmethod
    def zone_required(cls, value: str) -> str:
        if not value:
            raise ValueError("must provide zoneId. e.g. route53://zoneId")
        return value

    @classmethod
    def from_uri(cls, uri: str, **overrides: Any) -> RegistryConfig:
        """Build a config from a ``route53://<zone id>?option=value`` URI.

        Args:
            uri: Connection URI.
            **overrides: Extra fields (e.g. ``aws``, ``ttl``) merged on top.

        Raises:
            ConfigurationError: If the zone id is missing.
        """
        parsed = urlparse(uri)
        query = {k: v[0] for k, v in parse_qs(parsed.query).items()}
        zone_id = parsed.netloc
        if not zone_id:
            raise ConfigurationError("must provide zoneId. e.g. route53://zoneId")
        values: dict[str, Any] = {
            "zone_id": zone_id,
            "use_ec2_metadata": query.get(EC2_METADATA_KEY),
            "dns_prefix": query.get(DNS_PREFIX_KEY, ""),
            "record_per_host": query.get(RECORD_PER_HOST_KEY),
        }
        values.update(overrides)
        return cls(**values)


# Map URI schemes to their config models for dynamic validation
CONFIG_REGISTRY: dict[str, type[RegistryConfig]] = {
    "route53": RegistryConfig,
}


def validate_config(scheme: str, uri: str, **overrides: Any) -> RegistryConfig:
    """Validate and return a typed config model for the given URI scheme.

    Args:
        scheme: The registry scheme (e.g. 'route53').
        uri: Connection URI.
        **overrides: Extra config fields.

    Returns:
        A validated config model.

    Raises:
        ConfigurationError: If the scheme is unknown or the zone is missing.
        pydantic.ValidationError: If the config is invalid.
    """
    model = CONFIG_REGISTRY.get(scheme)
    if model is None:
        raise ConfigurationError(f"No config model registered for scheme: {scheme}")
    return model.from_uri(uri, **overrides)


__all__ = [
    "AWSConfig",
    "RegistryConfig",
    "CONFIG_REGISTRY",
    "DEFAULT_TTL",
    "parse_bool",
    "validate_config",
]
