from typing import Optional

from pydantic import BaseModel

from cranksmith.core.enums import ComparisonMethod, SpeedUnit


class SetupMetrics(BaseModel):
    """Performance metrics for one setup. Numeric fields are full precision."""

    method: ComparisonMethod
    speed_unit: SpeedUnit
    high_ratio: float
    low_ratio: float
    high_speed: float
    low_speed: float
    total_weight: float  # grams
    gear_range_percent: float
    high_gear_inches: Optional[float] = None
    low_gear_inches: Optional[float] = None
    warnings: list[str] = []

    def display(self) -> dict[str, str]:
        """Presentation strings: speeds 1 dp, ratios 2 dp, range and weight 0 dp."""
        return {
            "high_speed": f"{self.high_speed:.1f}",
            "low_speed": f"{self.low_speed:.1f}",
            "high_ratio": f"{self.high_ratio:.2f}",
            "low_ratio": f"{self.low_ratio:.2f}",
            "gear_range": f"{self.gear_range_percent:.0f}",
            "total_weight": f"{self.total_weight:.0f}",
        }


class ComparisonDelta(BaseModel):
    """Proposed minus current, computed on full-precision values."""

    speed_change: float
    weight_change: float
    range_change: float
    speed_unit: SpeedUnit
    climbing_improvement: Optional[float] = None  # full comparison only


class SetupComparison(BaseModel):
    current: SetupMetrics
    proposed: SetupMetrics
    comparison: ComparisonDelta


class DerailleurCapacityReport(BaseModel):
    """Result of the standalone derailleur capacity check."""

    capacity: int  # teeth
    max_cog: int
    warnings: list[str]


class GearTableEntry(BaseModel):
    chainring: int
    cog: int
    ratio: float
    gear_inches: float
    speed: float
    speed_unit: SpeedUnit


class SetupCompleteness(BaseModel):
    is_complete: bool
    missing: list[str]
    completion: float  # percent of required fields present
