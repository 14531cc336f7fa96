"""Services package."""

from hometrack.services.storage import (
    ChildCollection,
    ConfigurationError,
    HomeStorage,
    InMemoryHomeStorage,
    NotFoundError,
    StorageConnectionError,
    StorageError,
    SupabaseClient,
    SupabaseHomeStorage,
    UnconfiguredHomeStorage,
)

__all__ = [
    "ChildCollection",
    "ConfigurationError",
    "HomeStorage",
    "InMemoryHomeStorage",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    "SupabaseClient",
    "SupabaseHomeStorage",
    "UnconfiguredHomeStorage",
]
