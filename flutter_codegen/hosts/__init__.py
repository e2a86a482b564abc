"""Backend hosts: where model schemas and routes are read from."""

from .interface import Host, HostModel, HostRoute, Router, SchemaReflector
from .manifest import ManifestError, ManifestHost

__all__ = [
    "Host",
    "HostModel",
    "HostRoute",
    "ManifestError",
    "ManifestHost",
    "Router",
    "SchemaReflector",
]
