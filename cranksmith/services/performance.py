"""Performance metrics for drivetrain setups and current-vs-proposed comparisons.

Two metric families exist and give different numbers for the same setup:

* quick_metrics: crankset + cassette weight only, gear range from the full
  high/low ratio spread, wheel circumference with a 700c fallback.
* full_comparison_metrics: adds a fixed chain + derailleur overhead
  (489 g), gear range from the cassette alone, strict wheel-size lookup.

Both report speeds at the fixed 90 RPM cadence.
"""

import logging
from typing import Any

from cranksmith.core.enums import ComparisonMethod, SpeedUnit
from cranksmith.core.exceptions import IncompleteSetup, InvalidComponentData
from cranksmith.core.logging import log_calculation
from cranksmith.models.component import Component, Setup
from cranksmith.models.metrics import (
    ComparisonDelta,
    DerailleurCapacityReport,
    GearTableEntry,
    SetupComparison,
    SetupCompleteness,
    SetupMetrics,
)
from cranksmith.utils.gear_math import (
    CADENCE_RPM,
    DEFAULT_CASSETTE_RANGE,
    DRIVETRAIN_OVERHEAD_GRAMS,
    circumference_with_fallback,
    gear_inches,
    gear_ratio,
    range_percent,
    speed_at_cadence,
    wheel_circumference_mm,
)

logger = logging.getLogger(__name__)

# Standalone derailleur check thresholds
LARGE_COG_TEETH = 34
STANDARD_CAPACITY_TEETH = 37
EXTREME_RATIO_THRESHOLD = 0.8

REQUIRED_SETUP_FIELDS = ("wheel", "tire", "crankset", "cassette")


def _as_setup(setup: Setup | dict[str, Any]) -> Setup:
    if isinstance(setup, Setup):
        return setup
    return Setup.model_validate(setup or {})


def _as_component(component: Component | dict[str, Any] | None) -> Component | None:
    if component is None or isinstance(component, Component):
        return component
    return Component.model_validate(component)


def _require_teeth(component: Component | None, kind: str, side: str = "") -> list[int]:
    if component is None or not component.has_teeth:
        error = InvalidComponentData(kind, side)
        logger.warning("%s", error)
        raise error
    return list(component.teeth or [])


# =============================================================================
# Standalone derailleur check
# =============================================================================


def check_derailleur_compatibility(
    crankset: Component | dict[str, Any] | None,
    cassette: Component | dict[str, Any] | None,
) -> DerailleurCapacityReport:
    """Quick derailleur capacity check used by the full comparison.

    Capacity = (largest - smallest chainring) + (largest - smallest cog).

    Raises:
        InvalidComponentData: If either component has no tooth data. Callers
            must supply valid teeth; the CompatibilityChecker is the lenient
            alternative.
    """
    chainrings = _require_teeth(_as_component(crankset), "crankset")
    cogs = _require_teeth(_as_component(cassette), "cassette")

    max_cog, min_cog = max(cogs), min(cogs)
    max_ring, min_ring = max(chainrings), min(chainrings)
    capacity = (max_ring - min_ring) + (max_cog - min_cog)

    warnings = []
    if max_cog > LARGE_COG_TEETH:
        warnings.append(f"Large cassette ({max_cog}T) may require long-cage derailleur")
    if capacity > STANDARD_CAPACITY_TEETH:
        warnings.append(f"Total capacity ({capacity}T) exceeds standard derailleur limits")
    if min_ring / max_cog < EXTREME_RATIO_THRESHOLD:
        warnings.append("Extreme gear ratios may cause chain line issues")

    return DerailleurCapacityReport(capacity=capacity, max_cog=max_cog, warnings=warnings)


# =============================================================================
# Metric families
# =============================================================================


def quick_metrics(
    setup: Setup | dict[str, Any], speed_unit: SpeedUnit | str = SpeedUnit.KMH
) -> SetupMetrics:
    """Metrics without drivetrain overhead; range from the high/low ratio spread.

    Raises:
        IncompleteSetup: If crankset, cassette or wheel size is missing.
        InvalidComponentData: If the crankset has no tooth data.
    """
    setup = _as_setup(setup)
    unit = SpeedUnit.from_string(speed_unit)

    missing = [
        name
        for name, value in (
            ("crankset", setup.crankset),
            ("cassette", setup.cassette),
            ("wheel", setup.wheel),
        )
        if not value
    ]
    if missing:
        logger.warning("quick_metrics called with incomplete setup: %s", missing)
        raise IncompleteSetup(missing)

    chainrings = _require_teeth(setup.crankset, "crankset")
    cogs = list(setup.cassette.teeth or DEFAULT_CASSETTE_RANGE)  # type: ignore[union-attr]

    high_ratio = gear_ratio(max(chainrings), min(cogs))
    low_ratio = gear_ratio(min(chainrings), max(cogs))
    circumference = circumference_with_fallback(setup.wheel, setup.tire)

    metrics = SetupMetrics(
        method=ComparisonMethod.QUICK,
        speed_unit=unit,
        high_ratio=high_ratio,
        low_ratio=low_ratio,
        high_speed=speed_at_cadence(high_ratio, circumference, CADENCE_RPM, unit),
        low_speed=speed_at_cadence(low_ratio, circumference, CADENCE_RPM, unit),
        total_weight=setup.crankset.weight + setup.cassette.weight,  # type: ignore[union-attr]
        gear_range_percent=range_percent(high_ratio, low_ratio),
    )
    log_calculation(
        "quick_metrics",
        high_ratio=f"{high_ratio:.3f}",
        low_ratio=f"{low_ratio:.3f}",
        circumference_mm=f"{circumference:.1f}",
    )
    return metrics


def full_comparison_metrics(
    setup: Setup | dict[str, Any],
    speed_unit: SpeedUnit | str = SpeedUnit.KMH,
    side: str = "",
) -> SetupMetrics:
    """Metrics with the fixed 489 g chain + derailleur overhead; range from the cassette.

    Raises:
        IncompleteSetup: If wheel size or tire width is missing.
        InvalidComponentData: If crankset or cassette has no tooth data.
        InvalidWheelSize: If the wheel size is not a known size.
    """
    setup = _as_setup(setup)
    unit = SpeedUnit.from_string(speed_unit)

    chainrings = _require_teeth(setup.crankset, "crankset", side)
    cogs = _require_teeth(setup.cassette, "cassette", side)
    missing = [name for name in ("wheel", "tire") if getattr(setup, name) is None]
    if missing:
        logger.warning("full_comparison_metrics called with incomplete setup: %s", missing)
        raise IncompleteSetup(missing)

    circumference = wheel_circumference_mm(setup.wheel, setup.tire)  # type: ignore[arg-type]
    high_ratio = gear_ratio(max(chainrings), min(cogs))
    low_ratio = gear_ratio(min(chainrings), max(cogs))
    weight = setup.crankset.weight + setup.cassette.weight + DRIVETRAIN_OVERHEAD_GRAMS  # type: ignore[union-attr]

    metrics = SetupMetrics(
        method=ComparisonMethod.FULL,
        speed_unit=unit,
        high_ratio=high_ratio,
        low_ratio=low_ratio,
        high_speed=speed_at_cadence(high_ratio, circumference, CADENCE_RPM, unit),
        low_speed=speed_at_cadence(low_ratio, circumference, CADENCE_RPM, unit),
        total_weight=weight,
        gear_range_percent=range_percent(max(cogs), min(cogs)),
        high_gear_inches=gear_inches(high_ratio, setup.wheel, setup.tire),  # type: ignore[arg-type]
        low_gear_inches=gear_inches(low_ratio, setup.wheel, setup.tire),  # type: ignore[arg-type]
        warnings=check_derailleur_compatibility(setup.crankset, setup.cassette).warnings,
    )
    log_calculation(
        "full_comparison_metrics",
        high_ratio=f"{high_ratio:.3f}",
        low_ratio=f"{low_ratio:.3f}",
        weight_g=weight,
    )
    return metrics


# =============================================================================
# Comparisons
# =============================================================================


def compare_setups(
    current: Setup | dict[str, Any],
    proposed: Setup | dict[str, Any],
    speed_unit: SpeedUnit | str = SpeedUnit.KMH,
) -> SetupComparison:
    """Compare two setups using quick_metrics. Deltas are proposed - current."""
    unit = SpeedUnit.from_string(speed_unit)
    current_metrics = quick_metrics(current, unit)
    proposed_metrics = quick_metrics(proposed, unit)
    return SetupComparison(
        current=current_metrics,
        proposed=proposed_metrics,
        comparison=ComparisonDelta(
            speed_change=proposed_metrics.high_speed - current_metrics.high_speed,
            weight_change=proposed_metrics.total_weight - current_metrics.total_weight,
            range_change=proposed_metrics.gear_range_percent
            - current_metrics.gear_range_percent,
            speed_unit=unit,
        ),
    )


def compare_setups_full(
    current: Setup | dict[str, Any],
    proposed: Setup | dict[str, Any],
    speed_unit: SpeedUnit | str = SpeedUnit.KMH,
) -> SetupComparison:
    """Compare two setups using full_comparison_metrics.

    Also reports climbing_improvement (current low ratio - proposed low ratio);
    positive means the proposed setup climbs more easily.
    """
    unit = SpeedUnit.from_string(speed_unit)
    current_metrics = full_comparison_metrics(current, unit, side="current")
    proposed_metrics = full_comparison_metrics(proposed, unit, side="proposed")
    return SetupComparison(
        current=current_metrics,
        proposed=proposed_metrics,
        comparison=ComparisonDelta(
            speed_change=proposed_metrics.high_speed - current_metrics.high_speed,
            weight_change=proposed_metrics.total_weight - current_metrics.total_weight,
            range_change=proposed_metrics.gear_range_percent
            - current_metrics.gear_range_percent,
            speed_unit=unit,
            climbing_improvement=current_metrics.low_ratio - proposed_metrics.low_ratio,
        ),
    )


# =============================================================================
# Gear table and completeness
# =============================================================================


def gear_table(
    setup: Setup | dict[str, Any], speed_unit: SpeedUnit | str = SpeedUnit.KMH
) -> list[GearTableEntry]:
    """Every chainring × cog combination with ratio, gear inches and speed at 90 RPM."""
    setup = _as_setup(setup)
    unit = SpeedUnit.from_string(speed_unit)

    chainrings = _require_teeth(setup.crankset, "crankset")
    cogs = _require_teeth(setup.cassette, "cassette")
    if setup.wheel is None or setup.tire is None:
        raise IncompleteSetup([n for n in ("wheel", "tire") if getattr(setup, n) is None])

    circumference = wheel_circumference_mm(setup.wheel, setup.tire)
    entries = []
    for chainring in chainrings:
        for cog in cogs:
            ratio = gear_ratio(chainring, cog)
            entries.append(
                GearTableEntry(
                    chainring=chainring,
                    cog=cog,
                    ratio=ratio,
                    gear_inches=gear_inches(ratio, setup.wheel, setup.tire),
                    speed=speed_at_cadence(ratio, circumference, CADENCE_RPM, unit),
                    speed_unit=unit,
                )
            )
    return entries


def validate_setup_complete(setup: Setup | dict[str, Any]) -> SetupCompleteness:
    """Report which required fields are missing and the percentage completed."""
    setup = _as_setup(setup)
    missing = setup.missing_fields()
    total = len(REQUIRED_SETUP_FIELDS)
    return SetupCompleteness(
        is_complete=not missing,
        missing=missing,
        completion=(total - len(missing)) / total * 100,
    )
