"""Three-point construction cost estimate per key and for the whole hotel."""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


BASE_COST_PER_TIER: Dict[str, float] = {
    "standard": 125000,
    "upscale": 165000,
    "luxury": 220000,
}
DEFAULT_TIER = "standard"

LOW_FACTOR = 0.9
HIGH_FACTOR = 1.15

# Used only for the project KPI total
PUBLIC_AREA_COST_PER_SQFT = 200


@dataclass(frozen=True)
class CostEstimate:
    low: float
    mid: float
    high: float
    total_rooms: int
    brand_tier: str
    regional_multiplier: float

    @property
    def total_low(self) -> float:
        return self.low * self.total_rooms

    @property
    def total_mid(self) -> float:
        return self.mid * self.total_rooms

    @property
    def total_high(self) -> float:
        return self.high * self.total_rooms

    def to_dict(self) -> dict:
        return {
            "low": self.low,
            "mid": self.mid,
            "high": self.high,
            "totalLow": self.total_low,
            "totalMid": self.total_mid,
            "totalHigh": self.total_high,
            "totalRooms": self.total_rooms,
            "brandTier": self.brand_tier,
            "regionalMultiplier": self.regional_multiplier,
        }


def base_cost_for_tier(brand_tier: Optional[str]) -> float:
    """Base cost per key; unknown tiers price as standard."""
    return BASE_COST_PER_TIER.get(brand_tier or DEFAULT_TIER, BASE_COST_PER_TIER[DEFAULT_TIER])


def cost_range(base_cost: float, regional_multiplier: float) -> Tuple[float, float, float]:
    """(low, mid, high) per key. Values are not rounded."""
    low = base_cost * LOW_FACTOR * regional_multiplier
    mid = base_cost * regional_multiplier
    high = base_cost * HIGH_FACTOR * regional_multiplier
    return low, mid, high


def estimate_cost(
    total_rooms: int,
    brand_tier: str,
    regional_multiplier: float,
) -> CostEstimate:
    """
    Estimate cost per key for a brand tier and region.

    The tier and multiplier are used as given; callers validate them.
    """
    low, mid, high = cost_range(base_cost_for_tier(brand_tier), regional_multiplier)
    return CostEstimate(
        low=low,
        mid=mid,
        high=high,
        total_rooms=total_rooms,
        brand_tier=brand_tier,
        regional_multiplier=regional_multiplier,
    )
