"""
syskit – keeps a single text payload in shared storage so it outlives the
application that wrote it. The storage backend is picked from the host's
capability tier, with fallback locations tried in priority order.
"""

__version__ = "0.1.0"

from .coordinator import PersistenceCoordinator
from .errors import InvalidInput, SyskitError
from .tiers import CapabilityTier

# Optional convenience for callers that do not manage a coordinator. Code that
# needs other backends, probes or settings builds a PersistenceCoordinator
# directly and never touches this default.
_default_coordinator = None


def get_coordinator() -> PersistenceCoordinator:
    """Coordinator built from the default configuration on first use."""
    global _default_coordinator
    if _default_coordinator is None:
        _default_coordinator = PersistenceCoordinator.from_config()
    return _default_coordinator


def save(text: str) -> bool:
    """`PersistenceCoordinator.save` on the default coordinator."""
    return get_coordinator().save(text)


def load():
    """`PersistenceCoordinator.load` on the default coordinator."""
    return get_coordinator().load()


__all__ = [
    "PersistenceCoordinator",
    "CapabilityTier",
    "InvalidInput",
    "SyskitError",
    "get_coordinator",
    "save",
    "load",
]
