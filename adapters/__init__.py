"""User store adapters: one per backing database, sharing one async CRUD contract."""

from adapters.base import AdapterError, BackendUnavailable, NotFound, StoreError, User, UserStore
from adapters.factory import build_stores, get_store

__all__ = [
    "AdapterError",
    "BackendUnavailable",
    "NotFound",
    "StoreError",
    "User",
    "UserStore",
    "build_stores",
    "get_store",
]
