"""AWS provider implementations."""

from .record_store import RecordStore
from .registry import Route53Registry
