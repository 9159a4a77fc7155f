"""
Persistence coordinator: the public save/load entry point.

The coordinator encodes the payload, asks the selector for the candidates of
the detected tier and walks them in order. Backend and decode failures are
recovered locally by moving to the next candidate; callers only learn whether
persistence succeeded.
"""
import logging
from typing import Callable, Optional, Dict, Any

from . import codec
from .errors import AllBackendsExhausted, DecodeError, InvalidInput
from .selector import BackendSelector
from .storage.catalog import CatalogBackend, CatalogService
from .storage.direct_path import DirectPathBackend
from .tiers import ApiLevelProbe, CapabilityTier
from .utils.config import load_settings

logger = logging.getLogger(__name__)


class PersistenceCoordinator:
    def __init__(self, tier_probe: Callable[[], CapabilityTier], selector: BackendSelector):
        self.tier = CapabilityTier(tier_probe())
        self.selector = selector
        logger.debug(f"Persistence coordinator ready for {self.tier.name} tier")

    @classmethod
    def from_config(cls, config_path: Optional[str] = None) -> "PersistenceCoordinator":
        """Build a coordinator with the default probe and backends."""
        settings = load_settings(config_path)
        catalog = CatalogService(settings.catalog_dir)
        selector = BackendSelector(
            direct_backend=DirectPathBackend(settings.storage_root_dir),
            catalog_backend=CatalogBackend(catalog, replace_existing=settings.replace_existing),
        )
        return cls(ApiLevelProbe(settings.api_level), selector)

    def candidates(self):
        return self.selector.ordered_backends(self.tier)

    def _write_chain(self, encoded: str):
        attempted = []
        for backend, address in self.candidates():
            if backend.write(address, encoded):
                logger.debug(f"Saved payload via {backend.name} at {address}")
                return backend, address
            logger.warning(f"Save via {backend.name} at {address} failed, trying next location")
            attempted.append(f"{backend.name}:{address}")
        raise AllBackendsExhausted(attempted)

    def save(self, text: str) -> bool:
        """
        Persist `text`, returning True if some location accepted it.

        Raises:
            InvalidInput: if `text` is None or not a string.
        """
        if not isinstance(text, str):
            raise InvalidInput(f"Cannot save payload of type {type(text).__name__}")

        encoded = codec.encode(text)
        try:
            self._write_chain(encoded)
        except AllBackendsExhausted as e:
            logger.error(str(e))
            return False
        return True

    def load(self) -> Optional[str]:
        """Return the first decodable payload in priority order, or None."""
        for backend, address in self.candidates():
            encoded = backend.read(address)
            if encoded is None:
                continue
            try:
                text = codec.decode(encoded)
            except DecodeError as e:
                logger.warning(f"Ignoring undecodable content at {address}: {e}")
                continue
            logger.debug(f"Loaded payload via {backend.name} at {address}")
            return text

        logger.info("No stored payload found")
        return None

    def describe(self) -> Dict[str, Any]:
        """Detected tier and candidate locations, for diagnostics."""
        return {
            "tier": self.tier.name,
            "candidates": [
                {"backend": backend.name, "address": str(address), **backend.describe(address)}
                for backend, address in self.candidates()
            ],
        }
