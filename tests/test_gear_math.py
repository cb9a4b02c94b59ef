"""Tests for the drivetrain formulas and lenient converters."""

import math

import pytest

from cranksmith.core.enums import SpeedUnit
from cranksmith.core.exceptions import InvalidWheelSize
from cranksmith.utils.converters import parse_speed_count, round_half_up, safe_float
from cranksmith.utils.gear_math import (
    DRIVETRAIN_OVERHEAD_GRAMS,
    circumference_with_fallback,
    display_speed,
    gear_inches,
    gear_ratio,
    range_percent,
    speed_at_cadence,
    wheel_circumference_mm,
)

# ---------------------------------------------------------------------------
# Wheel circumference
# ---------------------------------------------------------------------------


class TestWheelCircumference:
    def test_700c_25mm(self):
        assert wheel_circumference_mm("700c", 25) == pytest.approx(2111.15, abs=0.01)

    def test_accepts_numeric_string_tire(self):
        assert wheel_circumference_mm("700c", "25") == wheel_circumference_mm("700c", 25)

    def test_650b_and_275_share_a_rim(self):
        assert wheel_circumference_mm("650b", 40) == wheel_circumference_mm("27.5-inch", 40)
        assert wheel_circumference_mm("650b", 40) == pytest.approx(math.pi * 664)

    def test_unknown_wheel_size_raises(self):
        with pytest.raises(InvalidWheelSize) as exc:
            wheel_circumference_mm("36-inch", 25)
        assert exc.value.wheel_size == "36-inch"
        assert str(exc.value) == "Invalid wheel size: 36-inch"

    def test_invalid_wheel_size_is_a_value_error(self):
        with pytest.raises(ValueError):
            wheel_circumference_mm("", 25)


class TestCircumferenceWithFallback:
    def test_known_size_matches_strict(self):
        assert circumference_with_fallback("29-inch", 2.35) == pytest.approx(
            wheel_circumference_mm("29-inch", 2.35)
        )

    def test_unknown_size_uses_700c_rim(self):
        assert circumference_with_fallback("36-inch", 25) == pytest.approx(math.pi * 672)

    def test_missing_tire_uses_25mm(self):
        assert circumference_with_fallback("700c", None) == pytest.approx(math.pi * 672)
        assert circumference_with_fallback("700c", "wide") == pytest.approx(math.pi * 672)

    def test_everything_missing(self):
        assert circumference_with_fallback(None, None) == pytest.approx(math.pi * 672)


# ---------------------------------------------------------------------------
# Ratios, speed and gear inches
# ---------------------------------------------------------------------------


class TestGearRatio:
    def test_exact_ratio(self):
        assert gear_ratio(50, 10) == 5.0

    def test_compact_climbing_gear(self):
        assert gear_ratio(34, 28) == pytest.approx(1.214, abs=0.001)


class TestSpeedAtCadence:
    def test_kmh(self):
        assert speed_at_cadence(2.0, 2100) == pytest.approx(22.68)

    def test_mph_is_kmh_times_factor(self):
        kmh = speed_at_cadence(2.0, 2100, unit=SpeedUnit.KMH)
        mph = speed_at_cadence(2.0, 2100, unit=SpeedUnit.MPH)
        assert mph == pytest.approx(kmh * 0.621371)
        assert round(mph, 1) == 14.1

    def test_unit_accepts_strings(self):
        assert speed_at_cadence(2.0, 2100, unit="mph") == speed_at_cadence(
            2.0, 2100, unit=SpeedUnit.MPH
        )

    def test_display_speed_is_one_decimal(self):
        assert display_speed(2.0, 2100) == "22.7"
        assert display_speed(2.0, 2100, SpeedUnit.MPH) == "14.1"

    def test_same_input_same_output(self):
        assert speed_at_cadence(4.5, 2111.15) == speed_at_cadence(4.5, 2111.15)


class TestGearInches:
    def test_700c_25mm(self):
        assert gear_inches(2.0, "700c", "25") == pytest.approx(52.9, abs=0.05)

    def test_linear_in_ratio(self):
        single = gear_inches(1.7, "650b", 47)
        assert gear_inches(3.4, "650b", 47) == pytest.approx(2 * single)

    def test_unknown_wheel_size_raises(self):
        with pytest.raises(InvalidWheelSize):
            gear_inches(2.0, "bmx", 25)


class TestRangeAndConstants:
    def test_range_percent(self):
        assert range_percent(28, 11) == pytest.approx(154.545, abs=0.001)

    def test_drivetrain_overhead(self):
        assert DRIVETRAIN_OVERHEAD_GRAMS == 489


# ---------------------------------------------------------------------------
# Converters
# ---------------------------------------------------------------------------


class TestConverters:
    def test_safe_float(self):
        assert safe_float("25") == 25.0
        assert safe_float(None) == 0.0
        assert safe_float("") == 0.0
        assert safe_float("wide", default=None) is None
        assert safe_float(float("nan"), default=None) is None
        assert safe_float(True, default=None) is None

    def test_parse_speed_count(self):
        assert parse_speed_count("11-speed") == 11
        assert parse_speed_count("Shimano 12-speed Di2") == 12
        assert parse_speed_count("single speed") == 0
        assert parse_speed_count(None) == 0
        assert parse_speed_count(11) == 0  # type: ignore[arg-type]

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(12.5) == 13
        assert round_half_up(33.33) == 33
        assert round_half_up(1.25, 1) == pytest.approx(1.3)
