"""Maps a capability tier to the ordered storage candidates to try."""
from typing import List, Tuple

from .storage.address import (
    StorageAddress,
    HIDDEN_ADDRESS_LEGACY,
    HIDDEN_ADDRESS_MODERN,
    GENERIC_ADDRESS,
)
from .storage.base_storage import StorageBackend
from .tiers import CapabilityTier

DIRECT_PATH = "direct_path"
CATALOG = "catalog"

# Hidden dedicated slots come first; the shared Documents slot is kept as a
# fallback for hosts that refuse the dedicated directory.
POLICY_TABLE = {
    CapabilityTier.LEGACY: (
        (DIRECT_PATH, HIDDEN_ADDRESS_LEGACY),
    ),
    CapabilityTier.MODERN: (
        (CATALOG, HIDDEN_ADDRESS_MODERN),
        (CATALOG, GENERIC_ADDRESS),
    ),
}


class BackendSelector:
    """Resolves the policy table against concrete backend instances."""

    def __init__(self, direct_backend: StorageBackend, catalog_backend: StorageBackend):
        self.backends = {
            DIRECT_PATH: direct_backend,
            CATALOG: catalog_backend,
        }

    def ordered_backends(self, tier: CapabilityTier) -> List[Tuple[StorageBackend, StorageAddress]]:
        """Candidates for `tier`, highest priority first. Performs no I/O."""
        try:
            policy = POLICY_TABLE[CapabilityTier(tier)]
        except (KeyError, ValueError):
            raise ValueError(f"No storage policy for tier: {tier!r}")
        return [(self.backends[kind], address) for kind, address in policy]
