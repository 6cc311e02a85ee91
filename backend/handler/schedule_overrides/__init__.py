"""Date-keyed schedule overrides served from a Lambda proxy handler."""

from .api import OverridesApi, handler
from .settings import Settings, load_settings
from .store import BlobStore, DynamoBlobStore, InMemoryBlobStore

__all__ = [
    "BlobStore",
    "DynamoBlobStore",
    "InMemoryBlobStore",
    "OverridesApi",
    "Settings",
    "handler",
    "load_settings",
]
