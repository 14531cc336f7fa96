"""
Storage Services Package

Provides the abstract storage interface and its three implementations:
Supabase (real data), in-memory (guest/demo) and an unconfigured stub.
"""

from hometrack.services.storage.interface import (
    ChildCollection,
    ConfigurationError,
    HomeStorage,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)
from hometrack.services.storage.memory import GUEST_HOME_ID, InMemoryHomeStorage
from hometrack.services.storage.supabase_storage import (
    SupabaseClient,
    SupabaseHomeStorage,
)
from hometrack.services.storage.unconfigured import (
    SETUP_INCOMPLETE,
    UnconfiguredHomeStorage,
)

__all__ = [
    # Interface
    "ChildCollection",
    "HomeStorage",
    # Exceptions
    "ConfigurationError",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "GUEST_HOME_ID",
    "InMemoryHomeStorage",
    "SETUP_INCOMPLETE",
    "SupabaseClient",
    "SupabaseHomeStorage",
    "UnconfiguredHomeStorage",
]
