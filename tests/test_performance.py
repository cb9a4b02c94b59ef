"""Tests for the performance metrics calculator."""

import math

import pytest

from cranksmith.core.enums import ComparisonMethod, SpeedUnit
from cranksmith.core.exceptions import (
    IncompleteSetup,
    InvalidComponentData,
    InvalidWheelSize,
)
from cranksmith.services.performance import (
    check_derailleur_compatibility,
    compare_setups,
    compare_setups_full,
    full_comparison_metrics,
    gear_table,
    quick_metrics,
    validate_setup_complete,
)

ROAD_COGS_11_28 = [11, 12, 13, 14, 15, 17, 19, 21, 23, 25, 28]
ROAD_COGS_11_34 = [11, 13, 15, 17, 19, 21, 23, 25, 27, 30, 34]
CIRCUMFERENCE_700C_25 = math.pi * 672


def _kmh(ratio: float, circumference: float = CIRCUMFERENCE_700C_25) -> float:
    return ratio * circumference * 90 * 60 / 1_000_000


def _road_setup(cogs=None, cassette_weight=284, **overrides):
    setup = {
        "wheel": "700c",
        "tire": "25",
        "crankset": {
            "id": "shimano-105-r7000-50-34",
            "model": "Shimano 105 R7000",
            "teeth": [50, 34],
            "speeds": "11-speed",
            "weight": 743,
        },
        "cassette": {
            "id": "shimano-105-r7000-11-28",
            "model": "Shimano 105 R7000",
            "teeth": cogs or ROAD_COGS_11_28,
            "speeds": "11-speed",
            "weight": cassette_weight,
        },
    }
    setup.update(overrides)
    return setup


# ---------------------------------------------------------------------------
# Standalone derailleur check
# ---------------------------------------------------------------------------


class TestCheckDerailleurCompatibility:
    def test_capacity(self):
        report = check_derailleur_compatibility(
            {"chainrings": [50, 34]}, {"cogs": [11, 12, 13, 14, 15, 17, 19, 21, 24, 27, 30]}
        )
        assert report.capacity == 35
        assert report.max_cog == 30
        assert report.warnings == []

    def test_single_chainring(self):
        report = check_derailleur_compatibility(
            {"chainrings": [32]}, {"cogs": [10, 12, 14, 16, 18, 21, 24, 28, 32, 36, 42, 50]}
        )
        assert report.capacity == 40

    def test_all_warnings(self):
        report = check_derailleur_compatibility({"teeth": [50, 34]}, {"teeth": [10, 52]})
        assert report.warnings == [
            "Large cassette (52T) may require long-cage derailleur",
            "Total capacity (58T) exceeds standard derailleur limits",
            "Extreme gear ratios may cause chain line issues",
        ]

    def test_missing_chainrings_raises(self):
        with pytest.raises(InvalidComponentData):
            check_derailleur_compatibility({}, {"cogs": [11, 30]})

    def test_missing_cogs_raises(self):
        with pytest.raises(InvalidComponentData):
            check_derailleur_compatibility({"chainrings": [50, 34]}, {})

    def test_none_component_raises(self):
        with pytest.raises(InvalidComponentData):
            check_derailleur_compatibility(None, {"cogs": [11, 30]})


# ---------------------------------------------------------------------------
# Quick metrics
# ---------------------------------------------------------------------------


class TestQuickMetrics:
    def test_road_setup(self):
        metrics = quick_metrics(_road_setup())
        assert metrics.method is ComparisonMethod.QUICK
        assert metrics.high_ratio == pytest.approx(50 / 11)
        assert metrics.low_ratio == pytest.approx(34 / 28)
        assert metrics.high_speed == pytest.approx(_kmh(50 / 11))
        assert metrics.low_speed == pytest.approx(_kmh(34 / 28))
        assert metrics.total_weight == 743 + 284
        assert metrics.gear_range_percent == pytest.approx(((50 / 11) / (34 / 28) - 1) * 100)

    def test_mph(self):
        kmh = quick_metrics(_road_setup(), SpeedUnit.KMH)
        mph = quick_metrics(_road_setup(), "mph")
        assert mph.speed_unit is SpeedUnit.MPH
        assert mph.high_speed == pytest.approx(kmh.high_speed * 0.621371)

    def test_unknown_wheel_falls_back_to_700c(self):
        metrics = quick_metrics(_road_setup(wheel="36-inch"))
        assert metrics.high_speed == pytest.approx(_kmh(50 / 11))

    def test_missing_tire_falls_back_to_25mm(self):
        metrics = quick_metrics(_road_setup(tire=None))
        assert metrics.high_speed == pytest.approx(_kmh(50 / 11))

    def test_cassette_without_teeth_uses_default_range(self):
        setup = _road_setup()
        setup["cassette"] = {"model": "Unknown", "weight": 300}
        metrics = quick_metrics(setup)
        assert metrics.high_ratio == pytest.approx(50 / 11)
        assert metrics.low_ratio == pytest.approx(34 / 28)

    def test_missing_wheel_raises(self):
        with pytest.raises(IncompleteSetup) as exc:
            quick_metrics(_road_setup(wheel=None))
        assert exc.value.missing == ["wheel"]

    def test_missing_components_raise(self):
        with pytest.raises(IncompleteSetup) as exc:
            quick_metrics({"wheel": "700c", "tire": 25})
        assert exc.value.missing == ["crankset", "cassette"]

    def test_zero_chainring_raises_component_error(self):
        setup = _road_setup()
        setup["crankset"] = {"model": "Mystery", "teeth": [0, 34]}
        with pytest.raises(InvalidComponentData):
            quick_metrics(setup)

    def test_crankset_without_teeth_raises(self):
        setup = _road_setup()
        setup["crankset"] = {"model": "Mystery", "teeth": []}
        with pytest.raises(InvalidComponentData):
            quick_metrics(setup)

    def test_display_strings(self):
        display = quick_metrics(_road_setup()).display()
        assert display["high_ratio"] == "4.55"
        assert display["low_ratio"] == "1.21"
        assert display["total_weight"] == "1027"
        assert display["high_speed"] == f"{_kmh(50 / 11):.1f}"


# ---------------------------------------------------------------------------
# Full comparison metrics
# ---------------------------------------------------------------------------


class TestFullComparisonMetrics:
    def test_adds_drivetrain_overhead(self):
        metrics = full_comparison_metrics(_road_setup())
        assert metrics.method is ComparisonMethod.FULL
        assert metrics.total_weight == 743 + 284 + 489

    def test_range_from_cassette(self):
        metrics = full_comparison_metrics(_road_setup())
        assert metrics.gear_range_percent == pytest.approx((28 / 11 - 1) * 100)

    def test_families_differ_for_same_setup(self):
        quick = quick_metrics(_road_setup())
        full = full_comparison_metrics(_road_setup())
        assert quick.high_speed == pytest.approx(full.high_speed)
        assert quick.total_weight != full.total_weight
        assert quick.gear_range_percent != pytest.approx(full.gear_range_percent)

    def test_gear_inches(self):
        metrics = full_comparison_metrics(_road_setup())
        assert metrics.high_gear_inches == pytest.approx(50 / 11 * 672 / 25.4)
        assert metrics.low_gear_inches == pytest.approx(34 / 28 * 672 / 25.4)

    def test_derailleur_warnings_reported(self):
        metrics = full_comparison_metrics(_road_setup(cogs=[11, 36]))
        assert "Large cassette (36T) may require long-cage derailleur" in metrics.warnings

    def test_zero_cog_raises_component_error(self):
        with pytest.raises(InvalidComponentData):
            full_comparison_metrics(_road_setup(cogs=[0, 28]))

    def test_unknown_wheel_raises(self):
        with pytest.raises(InvalidWheelSize):
            full_comparison_metrics(_road_setup(wheel="36-inch"))

    def test_missing_tire_raises(self):
        with pytest.raises(IncompleteSetup) as exc:
            full_comparison_metrics(_road_setup(tire=None))
        assert exc.value.missing == ["tire"]

    def test_empty_teeth_raise(self):
        setup = _road_setup()
        setup["cassette"] = {"teeth": []}
        with pytest.raises(InvalidComponentData):
            full_comparison_metrics(setup)


# ---------------------------------------------------------------------------
# Comparisons
# ---------------------------------------------------------------------------


class TestCompareSetups:
    def test_self_comparison_has_no_change(self):
        result = compare_setups(_road_setup(), _road_setup(), SpeedUnit.KMH)
        assert result.comparison.speed_change == 0
        assert result.comparison.weight_change == 0
        assert result.comparison.range_change == 0
        assert result.comparison.climbing_improvement is None

    def test_deltas_are_proposed_minus_current(self):
        current = _road_setup()
        proposed = _road_setup(cogs=ROAD_COGS_11_34, cassette_weight=300)
        result = compare_setups(current, proposed, SpeedUnit.KMH)
        assert result.comparison.weight_change == 16
        assert result.comparison.speed_change == pytest.approx(0)
        assert result.comparison.range_change > 0

    def test_speed_unit_carried_through(self):
        result = compare_setups(_road_setup(), _road_setup(), "mph")
        assert result.comparison.speed_unit is SpeedUnit.MPH
        assert result.current.speed_unit is SpeedUnit.MPH

    def test_incomplete_setup_raises(self):
        with pytest.raises(IncompleteSetup):
            compare_setups(_road_setup(), {}, SpeedUnit.KMH)


class TestCompareSetupsFull:
    def test_self_comparison_has_no_change(self):
        result = compare_setups_full(_road_setup(), _road_setup())
        assert result.comparison.speed_change == 0
        assert result.comparison.weight_change == 0
        assert result.comparison.climbing_improvement == 0

    def test_climbing_improvement(self):
        current = _road_setup()
        proposed = _road_setup(cogs=ROAD_COGS_11_34)
        result = compare_setups_full(current, proposed)
        assert result.comparison.climbing_improvement == pytest.approx(34 / 28 - 34 / 34)

    def test_error_names_the_side(self):
        proposed = _road_setup()
        proposed["crankset"] = {"teeth": []}
        with pytest.raises(InvalidComponentData) as exc:
            compare_setups_full(_road_setup(), proposed)
        assert str(exc.value) == "Invalid proposed crankset data"


# ---------------------------------------------------------------------------
# Gear table and completeness
# ---------------------------------------------------------------------------


class TestGearTable:
    def test_every_combination(self):
        table = gear_table(_road_setup())
        assert len(table) == 2 * len(ROAD_COGS_11_28)
        assert (table[0].chainring, table[0].cog) == (50, 11)
        assert (table[-1].chainring, table[-1].cog) == (34, 28)

    def test_entry_values(self):
        entry = gear_table(_road_setup(), SpeedUnit.KMH)[0]
        assert entry.ratio == pytest.approx(50 / 11)
        assert entry.speed == pytest.approx(_kmh(50 / 11))
        assert entry.gear_inches == pytest.approx(50 / 11 * 672 / 25.4)

    def test_strict_wheel_size(self):
        with pytest.raises(InvalidWheelSize):
            gear_table(_road_setup(wheel="36-inch"))


class TestValidateSetupComplete:
    def test_complete(self):
        result = validate_setup_complete(_road_setup())
        assert result.is_complete
        assert result.missing == []
        assert result.completion == 100

    def test_empty(self):
        result = validate_setup_complete({})
        assert not result.is_complete
        assert result.missing == ["wheel", "tire", "crankset", "cassette"]
        assert result.completion == 0

    def test_partial(self):
        result = validate_setup_complete({"wheel": "700c", "tire": "25"})
        assert result.completion == 50
