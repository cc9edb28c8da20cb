# nextpint_backend/app/services/data_stores/__init__.py
"""
Unified export surface for the local data stores.

Routers and services import the store modules from here, e.g.:
    from nextpint_backend.app.services.data_stores import beers, sessions
    beers.add_imported_beer({...})
    sessions.get_active_session()

Every store persists through kv_store (one JSON document per storage key
under DATA_DIR/storage).
"""

from __future__ import annotations

# ---- Low-level IO helpers ----
from .io_utils import atomic_write, read_json, dump_json  # noqa: F401

# ---- Key-value adapter ----
from . import kv_store  # noqa: F401
from .kv_store import STORAGE_KEYS, StorageError  # noqa: F401

# ---- Domain stores ----
from . import beers, sessions, profiles, app_settings  # noqa: F401

# ---- Backup/restore over all of the above ----
from . import backup  # noqa: F401

__all__ = [
    # io_utils
    "atomic_write", "read_json", "dump_json",
    # storage
    "kv_store", "STORAGE_KEYS", "StorageError",
    # stores
    "beers", "sessions", "profiles", "app_settings", "backup",
]
