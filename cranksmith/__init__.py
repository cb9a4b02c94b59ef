"""CrankSmith drivetrain performance and compatibility calculator."""

from cranksmith.core.enums import BikeType, CompatibilityStatus, SpeedUnit
from cranksmith.core.exceptions import (
    DrivetrainError,
    IncompleteSetup,
    InvalidComponentData,
    InvalidWheelSize,
)
from cranksmith.models.component import Component, Setup
from cranksmith.services.compatibility import CompatibilityChecker, check_compatibility
from cranksmith.services.performance import (
    compare_setups,
    compare_setups_full,
    full_comparison_metrics,
    quick_metrics,
)

__version__ = "1.0.0"

__all__ = [
    "BikeType",
    "CompatibilityChecker",
    "CompatibilityStatus",
    "Component",
    "DrivetrainError",
    "IncompleteSetup",
    "InvalidComponentData",
    "InvalidWheelSize",
    "Setup",
    "SpeedUnit",
    "check_compatibility",
    "compare_setups",
    "compare_setups_full",
    "full_comparison_metrics",
    "quick_metrics",
]
