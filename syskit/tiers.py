"""Host capability tiers and the probe that detects them."""
import logging
from enum import IntEnum

logger = logging.getLogger(__name__)

# First API level that withdraws direct access to shared storage paths.
MEDIATED_ACCESS_API_LEVEL = 30


class CapabilityTier(IntEnum):
    """Storage access model permitted by the host, ordered by release."""
    LEGACY = 1
    MODERN = 2

    @classmethod
    def from_api_level(cls, api_level: int) -> "CapabilityTier":
        if api_level >= MEDIATED_ACCESS_API_LEVEL:
            return cls.MODERN
        return cls.LEGACY


class ApiLevelProbe:
    """
    Default tier probe: classifies a configured host API level.

    The probe is evaluated once by the coordinator; the resulting tier is
    fixed for the coordinator's lifetime.
    """

    def __init__(self, api_level: int):
        self.api_level = int(api_level)

    def __call__(self) -> CapabilityTier:
        tier = CapabilityTier.from_api_level(self.api_level)
        logger.debug(f"API level {self.api_level} detected as {tier.name} tier")
        return tier

    def __repr__(self):
        return f"<ApiLevelProbe api_level={self.api_level}>"
