"""Drivetrain compatibility checking with rider-facing explanations.

The checker is lenient: missing tooth or speed data makes individual checks
no-ops instead of raising, and a setup without a crankset or cassette is
reported as compatible ("nothing to check yet"). A status of ``error`` means
the parts do not work together, not that the software failed.
"""

import logging
from itertools import product
from typing import Any, NamedTuple

from cranksmith.core.enums import (
    BikeType,
    CageType,
    CompatibilityStatus,
    InstallComplexity,
)
from cranksmith.core.logging import log_calculation
from cranksmith.models.compatibility import (
    BikeTypeRecommendations,
    CompatibilityResult,
    CompatibilitySummary,
    GearOverlap,
    GearRatioAnalysis,
    InstallationAssessment,
    RatioAnalysis,
)
from cranksmith.models.component import Setup
from cranksmith.utils.converters import parse_speed_count, round_half_up

logger = logging.getLogger(__name__)


class CageLimit(NamedTuple):
    max_capacity: int  # teeth
    max_cog: int  # teeth


class ChainLineStandard(NamedTuple):
    ideal: float  # mm from frame centre
    tolerance: float  # mm


# Cage tiers are listed shortest first; the first tier that fits is the one
# recommended, so the order matters.
DERAILLEUR_LIMITS: dict[BikeType, tuple[tuple[CageType, CageLimit], ...]] = {
    BikeType.ROAD: (
        (CageType.SHORT, CageLimit(max_capacity=29, max_cog=32)),
        (CageType.MEDIUM, CageLimit(max_capacity=35, max_cog=36)),
        (CageType.LONG, CageLimit(max_capacity=41, max_cog=42)),
    ),
    BikeType.GRAVEL: (
        (CageType.MEDIUM, CageLimit(max_capacity=35, max_cog=42)),
        (CageType.LONG, CageLimit(max_capacity=41, max_cog=50)),
    ),
    BikeType.MTB: (
        (CageType.MEDIUM, CageLimit(max_capacity=35, max_cog=46)),
        (CageType.LONG, CageLimit(max_capacity=41, max_cog=52)),
        (CageType.EXTRA_LONG, CageLimit(max_capacity=47, max_cog=52)),
    ),
}

CHAIN_LINE_STANDARDS: dict[BikeType, ChainLineStandard] = {
    BikeType.ROAD: ChainLineStandard(ideal=43.5, tolerance=2.5),
    BikeType.GRAVEL: ChainLineStandard(ideal=45, tolerance=3),
    BikeType.MTB: ChainLineStandard(ideal=52, tolerance=4),
}

# Bike-type specific large cassette thresholds (teeth)
ROAD_LARGE_COG = 36
GRAVEL_LARGE_COG = 50

# Chain line: cross-chained ratios outside these bounds run at poor angles
BIG_BIG_MIN_RATIO = 1.5
SMALL_SMALL_MAX_RATIO = 3.5
ONE_BY_WIDE_RANGE = 5

CHAIN_LENGTH_LARGE_COG = 46
OUTDATED_SPEED_COUNT = 10

OVERLAP_RATIO_TOLERANCE = 0.1
OVERLAP_WARNING_PERCENT = 30

STATUS_TITLES: dict[str, str] = {
    CompatibilityStatus.COMPATIBLE.value: "✅ Components Compatible",
    CompatibilityStatus.WARNING.value: "⚠️ Compatible with Considerations",
    CompatibilityStatus.ERROR.value: "❌ Compatibility Issues",
    CompatibilityStatus.INCOMPLETE.value: "📝 Incomplete Setup",
}

SUMMARY_ACTION_LIMIT = 3


def _resolve_bike_type(bike_type: BikeType | str) -> BikeType:
    resolved = BikeType.from_string(bike_type)
    if resolved is None:
        logger.warning("Unknown bike type: %s", bike_type)
        raise ValueError(
            f"Bike type must be one of: {', '.join(b.value for b in BikeType)}"
        )
    return resolved


def _status_key(status: Any) -> str:
    return str(getattr(status, "value", status) or "")


def _first_present(data: dict[str, Any], *keys: str) -> list[str]:
    """Value of the first key that is present and not None, as a list."""
    for key in keys:
        if data.get(key) is not None:
            return list(data[key])
    return []


class CompatibilityChecker:
    """Evaluates a setup for derailleur capacity, speeds, chain line and chain length.

    Holds only configuration; every method is a pure function of its
    arguments, so one instance can be shared freely.
    """

    def __init__(
        self,
        derailleur_limits: dict[BikeType, tuple[tuple[CageType, CageLimit], ...]] | None = None,
        chain_line_standards: dict[BikeType, ChainLineStandard] | None = None,
    ):
        self.derailleur_limits = derailleur_limits or DERAILLEUR_LIMITS
        self.chain_line_standards = chain_line_standards or CHAIN_LINE_STANDARDS

    # ------------------------------------------------------------------
    # Full check
    # ------------------------------------------------------------------

    def check_compatibility(
        self, setup: Setup | dict[str, Any], bike_type: BikeType | str
    ) -> CompatibilityResult:
        """Run every sub-check and derive the overall status.

        Status precedence: any critical issue -> error, else any minor
        warning -> warning, else compatible.
        """
        setup = self._as_setup(setup)
        result = CompatibilityResult()

        if setup.crankset is None or setup.cassette is None:
            return result
        bike_type = _resolve_bike_type(bike_type)

        self.check_derailleur_capacity(setup, bike_type, result)
        self.check_chain_length(setup, result)
        self.check_speed_compatibility(setup, result)
        self.check_chain_line(setup, bike_type, result)

        if result.critical_issues:
            result.status = CompatibilityStatus.ERROR
        elif result.minor_warnings:
            result.status = CompatibilityStatus.WARNING

        log_calculation(
            "check_compatibility",
            bike_type=bike_type.value,
            status=result.status.value,
            critical=len(result.critical_issues),
            warnings=len(result.minor_warnings),
        )
        return result

    # ------------------------------------------------------------------
    # Sub-checks (mutate the shared result)
    # ------------------------------------------------------------------

    def check_derailleur_capacity(
        self, setup: Setup, bike_type: BikeType | str, result: CompatibilityResult
    ) -> None:
        crankset, cassette = setup.crankset, setup.cassette
        if not (crankset and crankset.has_teeth and cassette and cassette.has_teeth):
            return

        bike_type = _resolve_bike_type(bike_type)
        max_cog = cassette.max_teeth
        total_capacity = (crankset.max_teeth - crankset.min_teeth) + (
            max_cog - cassette.min_teeth
        )

        recommended_cage = next(
            (
                cage
                for cage, limit in self.derailleur_limits[bike_type]
                if total_capacity <= limit.max_capacity and max_cog <= limit.max_cog
            ),
            None,
        )

        if recommended_cage is None:
            result.critical_issues.append(
                f"Total capacity ({total_capacity}T) exceeds {bike_type.value} derailleur limits"
            )
            result.action_items.append(
                f"Consider smaller cassette range or different crankset for {bike_type.value} setup"
            )
            result.checks.derailleur_capacity = False
        elif recommended_cage in (CageType.LONG, CageType.EXTRA_LONG):
            result.minor_warnings.append(
                f"{recommended_cage.label} derailleur recommended for this range"
            )

        if bike_type is BikeType.ROAD and max_cog > ROAD_LARGE_COG:
            result.minor_warnings.append(
                "Large cassette may require GRX or MTB derailleur for road bikes"
            )
        elif bike_type is BikeType.GRAVEL and max_cog > GRAVEL_LARGE_COG:
            result.minor_warnings.append(
                "Very large cassette - ensure derailleur can handle range"
            )

    def check_speed_compatibility(self, setup: Setup, result: CompatibilityResult) -> None:
        """Compare the speed counts parsed from both speeds labels.

        A mismatch is a critical issue and also clears
        ``checks.speed_compatibility`` so the flag agrees with the issue list.
        A missing or unparseable label is only a warning and leaves the flag set.
        """
        crankset, cassette = setup.crankset, setup.cassette
        if crankset is None or cassette is None:
            return

        crankset_speed = self.extract_speed_count(crankset.speeds)
        cassette_speed = self.extract_speed_count(cassette.speeds)

        if crankset_speed == 0 or cassette_speed == 0:
            result.minor_warnings.append(
                "Speed compatibility cannot be determined - missing speed information"
            )
            result.action_items.append("Verify component speeds match (e.g., both 11-speed)")
            return

        if crankset_speed != cassette_speed:
            result.critical_issues.append(
                f"Speed mismatch: {crankset_speed}-speed crankset with {cassette_speed}-speed cassette"
            )
            result.action_items.append(
                f"Use matching {cassette_speed}-speed crankset or {crankset_speed}-speed cassette"
            )
            result.checks.speed_compatibility = False
            if abs(crankset_speed - cassette_speed) == 1:
                result.action_items.append(
                    "Components may work with chain and derailleur adjustments "
                    "(not recommended for optimal performance)"
                )
            return

        result.action_items.append(f"{crankset_speed}-speed components are perfectly matched")
        if crankset_speed < OUTDATED_SPEED_COUNT:
            result.minor_warnings.append(
                "Older drivetrain technology - consider 11-12 speed upgrade"
            )
            result.action_items.append(
                "Modern 11-12 speed drivetrains offer better performance and availability"
            )

    def check_chain_line(
        self, setup: Setup, bike_type: BikeType | str, result: CompatibilityResult
    ) -> None:
        crankset, cassette = setup.crankset, setup.cassette
        if not (crankset and crankset.has_teeth and cassette and cassette.has_teeth):
            return

        rings = crankset.teeth or []
        if len(rings) > 1:
            big_big = crankset.max_teeth / cassette.max_teeth
            small_small = crankset.min_teeth / cassette.min_teeth
            if big_big < BIG_BIG_MIN_RATIO or small_small > SMALL_SMALL_MAX_RATIO:
                result.minor_warnings.append("Some gear combinations may cause poor chain line")
                result.action_items.append(
                    "Avoid big ring + big cassette and small ring + small cassette combinations"
                )
        elif len(rings) == 1:
            if cassette.max_teeth / cassette.min_teeth > ONE_BY_WIDE_RANGE:
                result.minor_warnings.append(
                    "Wide range cassette with 1x may have chain line issues at extremes"
                )
                result.action_items.append(
                    "Consider narrow-wide chainring and clutch derailleur for chain retention"
                )
            result.action_items.append("1x drivetrain offers excellent chain line in middle gears")

    def check_chain_length(self, setup: Setup, result: CompatibilityResult) -> None:
        crankset, cassette = setup.crankset, setup.cassette
        if not (crankset and crankset.has_teeth and cassette and cassette.has_teeth):
            return

        if len(crankset.teeth or []) > 1 and cassette.max_teeth > CHAIN_LENGTH_LARGE_COG:
            result.minor_warnings.append("Wide range setup may require longer chain")
            result.action_items.append("Check chain length when installing")

    # ------------------------------------------------------------------
    # Gear ratio analysis
    # ------------------------------------------------------------------

    def analyze_gear_ratios(
        self, setup: Setup | dict[str, Any], bike_type: BikeType | str
    ) -> GearRatioAnalysis:
        setup = self._as_setup(setup)
        crankset, cassette = setup.crankset, setup.cassette
        if not (crankset and crankset.has_teeth and cassette and cassette.has_teeth):
            return GearRatioAnalysis()

        rings = list(crankset.teeth or [])
        cogs = list(cassette.teeth or [])
        ratios = [ring / cog for ring, cog in product(rings, cogs)]
        min_ratio, max_ratio = min(ratios), max(ratios)
        ratio_spread = max_ratio / min_ratio

        result = GearRatioAnalysis(
            analysis=RatioAnalysis(
                min_ratio=min_ratio,
                max_ratio=max_ratio,
                ratio_spread=ratio_spread,
                total_gears=len(ratios),
            )
        )

        advice = self.get_bike_type_recommendations(bike_type, min_ratio, max_ratio, ratio_spread)
        result.warnings.extend(advice.warnings)
        result.recommendations.extend(advice.suggestions)

        if len(rings) == 2:
            overlap = self.analyze_gear_overlap(rings, cogs)
            if overlap.percentage > OVERLAP_WARNING_PERCENT:
                result.warnings.append(f"{overlap.percentage}% gear overlap between chainrings")
                result.recommendations.append("Consider 1x drivetrain for simpler shifting")

        return result

    def get_bike_type_recommendations(
        self,
        bike_type: BikeType | str,
        min_ratio: float,
        max_ratio: float,
        ratio_spread: float,
    ) -> BikeTypeRecommendations:
        bike_type = _resolve_bike_type(bike_type)
        advice = BikeTypeRecommendations()

        if bike_type is BikeType.ROAD:
            if min_ratio > 1.5:
                advice.warnings.append("May struggle on steep climbs (consider lower gearing)")
                advice.suggestions.append(
                    "Add larger cassette or compact crankset for better climbing"
                )
            if max_ratio < 3.5:
                advice.warnings.append("Limited top speed potential")
                advice.suggestions.append("Consider larger chainrings for higher top speed")
            if ratio_spread > 4.5:
                advice.suggestions.append("Excellent gear range for varied terrain")

        elif bike_type is BikeType.GRAVEL:
            if min_ratio > 1.2:
                advice.warnings.append("May need easier gears for loose/steep gravel climbs")
                advice.suggestions.append("Consider wider range cassette (11-42T or larger)")
            if ratio_spread < 3.5:
                advice.warnings.append("Limited gear range for adventure riding")
                advice.suggestions.append(
                    "Gravel benefits from wide gear range for varied terrain"
                )
            advice.suggestions.append("Setup well-suited for mixed terrain adventure riding")

        elif bike_type is BikeType.MTB:
            if min_ratio > 1.0:
                advice.warnings.append("May need easier gears for technical climbs")
                advice.suggestions.append(
                    "Consider larger cassette (10-50T+) for steep technical terrain"
                )
            if max_ratio > 3.0:
                advice.suggestions.append("Good top-end for XC racing and fire roads")
            advice.suggestions.append("Mountain bike gearing optimized for trail efficiency")

        return advice

    def analyze_gear_overlap(self, chainrings: list[int], cogs: list[int]) -> GearOverlap:
        """Find small-ring gears that duplicate a big-ring gear within 0.1 ratio.

        percentage = overlaps / (cogs × 2) × 100, rounded half up.
        """
        if len(chainrings) != 2:
            return GearOverlap()

        small_ring, big_ring = sorted(chainrings)
        overlaps = []
        for cog in cogs:
            small_ratio = small_ring / cog
            for other_cog in cogs:
                if cog == other_cog:
                    continue
                if abs(small_ratio - big_ring / other_cog) < OVERLAP_RATIO_TOLERANCE:
                    overlaps.append(f"{small_ring}×{cog} ≈ {big_ring}×{other_cog}")

        percentage = int(round_half_up(len(overlaps) / (len(cogs) * 2) * 100))
        return GearOverlap(percentage=percentage, overlaps=overlaps)

    # ------------------------------------------------------------------
    # Installation
    # ------------------------------------------------------------------

    def assess_installation_complexity(
        self, setup: Setup | dict[str, Any]
    ) -> InstallationAssessment:
        setup = self._as_setup(setup)
        crankset, cassette = setup.crankset, setup.cassette
        crank_model = crankset.model if crankset else ""
        cassette_model = cassette.model if cassette else ""
        speed_labels = [c.speeds or "" for c in (crankset, cassette) if c is not None]

        factors = []
        recommendations = []
        tools = []

        if any("Di2" in label for label in speed_labels):
            factors.append("electronic")
            recommendations.append("Electronic shifting requires cable routing and battery setup")
            tools.append("Di2 specific tools and software")

        if "BB30" in crank_model or "PF30" in crank_model:
            factors.append("press-fit-bb")
            recommendations.append("Press-fit bottom bracket may require professional installation")
            tools.append("Bottom bracket press/removal tools")

        if "XDR" in cassette_model or "XD" in cassette_model:
            factors.append("xd-driver")
            recommendations.append("XD/XDR cassette requires compatible freehub body")
            tools.append("XD cassette tool")

        if not factors:
            complexity = InstallComplexity.BASIC
            estimated_time = "30-60 minutes"
            recommendations.append("Standard installation - suitable for home mechanics")
            tools.extend(["Basic bike tools", "Chain whip", "Cassette tool"])
        elif len(factors) <= 2:
            complexity = InstallComplexity.MODERATE
            estimated_time = "1-2 hours"
            recommendations.append("Moderate complexity - some special tools required")
        else:
            complexity = InstallComplexity.ADVANCED
            estimated_time = "2-3 hours"
            recommendations.append("Complex installation - consider professional help")

        recommendations.append(
            "Professional installation recommended for optimal performance and safety"
        )

        return InstallationAssessment(
            complexity=complexity,
            recommendations=recommendations,
            required_tools=tools,
            estimated_time=estimated_time,
        )

    # ------------------------------------------------------------------
    # Helpers and summaries
    # ------------------------------------------------------------------

    @staticmethod
    def extract_speed_count(speed_label: str | None) -> int:
        return parse_speed_count(speed_label)

    def generate_compatibility_summary(
        self, result: CompatibilityResult | dict[str, Any]
    ) -> CompatibilitySummary:
        """Digest a result for display.

        Accepts a CompatibilityResult, a dict in the same shape (snake_case
        or camelCase), or the legacy overall/issues/warnings/recommendations
        shape.
        """
        if isinstance(result, CompatibilityResult):
            data: dict[str, Any] = result.model_dump()
        else:
            data = dict(result or {})

        status = _status_key(
            data.get("status") or data.get("overall") or CompatibilityStatus.COMPATIBLE
        )
        critical_issues = _first_present(data, "critical_issues", "criticalIssues", "issues")
        minor_warnings = _first_present(data, "minor_warnings", "minorWarnings", "warnings")
        action_items = _first_present(data, "action_items", "actionItems", "recommendations")

        return CompatibilitySummary(
            status=status,
            title=self.get_status_title(status),
            message=self.get_status_message(status, critical_issues, minor_warnings),
            action_items=action_items[:SUMMARY_ACTION_LIMIT],
            critical_issues=critical_issues,
            minor_warnings=minor_warnings,
        )

    @staticmethod
    def get_status_title(status: CompatibilityStatus | str) -> str:
        return STATUS_TITLES.get(_status_key(status), "Unknown Status")

    @staticmethod
    def get_status_message(
        status: CompatibilityStatus | str,
        issues: list[str] | None = None,
        warnings: list[str] | None = None,
    ) -> str:
        issues = issues or []
        warnings = warnings or []
        key = _status_key(status)

        if key == CompatibilityStatus.COMPATIBLE.value:
            return "All components work together perfectly. Ready to ride!"
        if key == CompatibilityStatus.WARNING.value:
            plural = "s" if len(warnings) > 1 else ""
            return f"Components are compatible but consider {len(warnings)} optimization{plural}."
        if key == CompatibilityStatus.ERROR.value:
            noun = "issue" if len(issues) == 1 else "issues"
            verb = "prevents" if len(issues) == 1 else "prevent"
            return f"{len(issues)} critical {noun} {verb} this combination from working."
        if key == CompatibilityStatus.INCOMPLETE.value:
            return "Add all components to check compatibility."
        return "Compatibility status unknown."

    @staticmethod
    def _as_setup(setup: Setup | dict[str, Any] | None) -> Setup:
        if isinstance(setup, Setup):
            return setup
        return Setup.model_validate(setup or {})


default_checker = CompatibilityChecker()


def check_compatibility(
    setup: Setup | dict[str, Any], bike_type: BikeType | str
) -> CompatibilityResult:
    """Run the shared checker; see CompatibilityChecker.check_compatibility."""
    return default_checker.check_compatibility(setup, bike_type)
