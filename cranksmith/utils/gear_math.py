"""Gear ratio, wheel and speed calculations.

This module is the single source of truth for all drivetrain math.

## Core Formulas

### Wheel Circumference
    total_diameter_mm = rim_diameter_mm + (2 × tire_width_mm)
    circumference_mm = π × total_diameter_mm

### Gear Ratio
    gear_ratio = chainring_teeth / cog_teeth

### Speed at Cadence
    distance_per_minute_mm = gear_ratio × circumference_mm × cadence_rpm
    speed_kmh = distance_per_minute_mm × 60 × 1e-6
    speed_mph = speed_kmh × 0.621371

### Gear Inches
    gear_inches = gear_ratio × (total_diameter_mm / 25.4)

Rim diameters are ISO bead seat diameters (ETRTO).
"""

import math

from cranksmith.core.enums import SpeedUnit, WheelSize
from cranksmith.core.exceptions import InvalidWheelSize
from cranksmith.utils.converters import safe_float

# =============================================================================
# CONSTANTS
# =============================================================================

CADENCE_RPM = 90
MM_TO_KM = 1e-6
KMH_TO_MPH = 0.621371
MM_PER_INCH = 25.4

# Fixed drivetrain overhead added by the full comparison
CHAIN_WEIGHT_GRAMS = 257
DERAILLEUR_WEIGHT_GRAMS = 232
DRIVETRAIN_OVERHEAD_GRAMS = CHAIN_WEIGHT_GRAMS + DERAILLEUR_WEIGHT_GRAMS

# Defaults used only by the lenient (fallback) path
DEFAULT_TIRE_WIDTH_MM = 25.0
DEFAULT_CASSETTE_RANGE: tuple[int, int] = (11, 28)
FALLBACK_RIM_DIAMETER_MM = 622

# ISO bead seat diameter (mm) by wheel-size identifier
WHEEL_SIZES: dict[str, int] = {
    WheelSize.ROAD_700C.value: 622,
    WheelSize.ROAD_650B.value: 584,
    WheelSize.MTB_26.value: 559,
    WheelSize.MTB_27_5.value: 584,
    WheelSize.MTB_29.value: 622,
}


# =============================================================================
# CORE CALCULATION FUNCTIONS
# =============================================================================


def rim_diameter_mm(wheel_size: str) -> int:
    """Look up the nominal rim diameter for a wheel size.

    Raises:
        InvalidWheelSize: If the wheel size is not in WHEEL_SIZES.
    """
    diameter = WHEEL_SIZES.get(wheel_size)  # type: ignore[arg-type]
    if diameter is None:
        raise InvalidWheelSize(wheel_size)
    return diameter


def wheel_circumference_mm(wheel_size: str, tire_width_mm: float | str) -> float:
    """Calculate wheel circumference in mm, failing on unknown wheel sizes.

    Formula: circumference_mm = π × (rim_diameter + 2 × tire_width)

    Args:
        wheel_size: Wheel-size identifier (e.g., '700c')
        tire_width_mm: Tire width in mm, as number or numeric string

    Returns:
        Rolling circumference in millimeters

    Raises:
        InvalidWheelSize: If the wheel size is unknown.

    Example:
        >>> round(wheel_circumference_mm("700c", "25"), 2)
        2111.15
    """
    total_diameter = rim_diameter_mm(wheel_size) + (2 * float(tire_width_mm))
    return math.pi * total_diameter


def circumference_with_fallback(
    wheel_size: str | None, tire_width_mm: float | str | None
) -> float:
    """Calculate wheel circumference in mm, defaulting instead of failing.

    Unknown wheel sizes use a 622mm (700c) rim and missing or non-numeric
    tire widths use 25mm.
    """
    diameter = WHEEL_SIZES.get(wheel_size or "", FALLBACK_RIM_DIAMETER_MM)
    tire = safe_float(tire_width_mm, default=None) or DEFAULT_TIRE_WIDTH_MM
    return math.pi * (diameter + 2 * tire)


def gear_ratio(chainring_teeth: float, cog_teeth: float) -> float:
    """Calculate the gear ratio (wheel revolutions per crank revolution)."""
    return chainring_teeth / cog_teeth


def speed_at_cadence(
    ratio: float,
    circumference_mm: float,
    cadence_rpm: float = CADENCE_RPM,
    unit: SpeedUnit | str = SpeedUnit.KMH,
) -> float:
    """Calculate road speed for a gear at a given cadence.

    Args:
        ratio: Gear ratio (chainring / cog)
        circumference_mm: Wheel circumference in millimeters
        cadence_rpm: Pedalling cadence, 90 RPM throughout the calculator
        unit: KMH or MPH

    Returns:
        Speed in the requested unit, full precision

    Example:
        >>> round(speed_at_cadence(2.0, 2100), 2)
        22.68
    """
    distance_per_minute = ratio * circumference_mm * cadence_rpm
    speed_kmh = distance_per_minute * MM_TO_KM * 60
    if SpeedUnit.from_string(unit) is SpeedUnit.MPH:
        return speed_kmh * KMH_TO_MPH
    return speed_kmh


def display_speed(
    ratio: float,
    circumference_mm: float,
    unit: SpeedUnit | str = SpeedUnit.KMH,
) -> str:
    """Speed at the fixed 90 RPM cadence, formatted to one decimal place."""
    return f"{speed_at_cadence(ratio, circumference_mm, CADENCE_RPM, unit):.1f}"


def gear_inches(ratio: float, wheel_size: str, tire_width_mm: float | str) -> float:
    """Calculate gear inches (equivalent direct-drive wheel diameter).

    Formula: gear_inches = ratio × ((rim_diameter + 2 × tire_width) / 25.4)

    Example:
        >>> round(gear_inches(2.0, "700c", "25"), 1)
        52.9
    """
    wheel_diameter_mm = rim_diameter_mm(wheel_size) + (2 * float(tire_width_mm))
    return ratio * (wheel_diameter_mm / MM_PER_INCH)


def range_percent(high: float, low: float) -> float:
    """Spread between two ratios (or cog sizes) as a percentage: (high / low - 1) × 100."""
    return ((high / low) - 1) * 100
