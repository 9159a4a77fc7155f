"""
Submodule for all storage logic.
Backed by pluggable slot backends (direct file paths, TinyDB catalog).
"""

from .address import StorageAddress, HIDDEN_ADDRESS_LEGACY, HIDDEN_ADDRESS_MODERN, GENERIC_ADDRESS
from .base_storage import StorageBackend
from .catalog import CatalogBackend, CatalogService
from .direct_path import DirectPathBackend

__all__ = [
    "StorageAddress",
    "HIDDEN_ADDRESS_LEGACY",
    "HIDDEN_ADDRESS_MODERN",
    "GENERIC_ADDRESS",
    "StorageBackend",
    "CatalogBackend",
    "CatalogService",
    "DirectPathBackend",
]
