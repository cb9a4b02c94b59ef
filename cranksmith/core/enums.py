"""Enums for drivetrain-related constants."""

from enum import Enum


class BikeType(str, Enum):
    """Bike categories; selects derailleur limits and chain-line standard."""

    ROAD = "road"
    GRAVEL = "gravel"
    MTB = "mtb"

    @classmethod
    def from_string(cls, value: "str | BikeType | None") -> "BikeType | None":
        """Convert string to enum, returning None if invalid."""
        if not value:
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class WheelSize(str, Enum):
    """Wheel-size identifiers offered by the calculator."""

    ROAD_700C = "700c"
    ROAD_650B = "650b"
    MTB_26 = "26-inch"
    MTB_27_5 = "27.5-inch"
    MTB_29 = "29-inch"


class SpeedUnit(str, Enum):
    """Units for reporting speed."""

    KMH = "KMH"
    MPH = "MPH"

    @classmethod
    def from_string(cls, value: "str | SpeedUnit | None") -> "SpeedUnit":
        """Convert string to enum, handling common variations. Defaults to KMH."""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.KMH
        mappings = {
            "kmh": cls.KMH,
            "km/h": cls.KMH,
            "kph": cls.KMH,
            "mph": cls.MPH,
        }
        return mappings.get(value.strip().lower(), cls.KMH)


class CompatibilityStatus(str, Enum):
    """Overall outcome of a compatibility check."""

    COMPATIBLE = "compatible"
    WARNING = "warning"
    ERROR = "error"
    INCOMPLETE = "incomplete"


class CageType(str, Enum):
    """Rear derailleur cage lengths."""

    SHORT = "shortCage"
    MEDIUM = "mediumCage"
    LONG = "longCage"
    EXTRA_LONG = "extraLongCage"

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'long-cage'."""
        return self.value.replace("Cage", "-cage")


class InstallComplexity(str, Enum):
    """Installation complexity tiers."""

    BASIC = "basic"
    MODERATE = "moderate"
    ADVANCED = "advanced"


class ComparisonMethod(str, Enum):
    """Which metrics family a setup comparison uses."""

    QUICK = "quick"
    FULL = "full"
