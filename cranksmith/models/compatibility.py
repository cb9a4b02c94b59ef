from pydantic import BaseModel, Field

from cranksmith.core.enums import CompatibilityStatus, InstallComplexity


class CompatibilityChecks(BaseModel):
    derailleur_capacity: bool = True
    chain_length: bool = True
    speed_compatibility: bool = True
    chain_line: bool = True


class CompatibilityResult(BaseModel):
    """Outcome of CompatibilityChecker.check_compatibility.

    Built fresh per check; status is derived once all sub-checks have run.
    """

    status: CompatibilityStatus = CompatibilityStatus.COMPATIBLE
    critical_issues: list[str] = []
    minor_warnings: list[str] = []
    action_items: list[str] = []
    checks: CompatibilityChecks = Field(default_factory=CompatibilityChecks)


class BikeTypeRecommendations(BaseModel):
    warnings: list[str] = []
    suggestions: list[str] = []


class RatioAnalysis(BaseModel):
    min_ratio: float
    max_ratio: float
    ratio_spread: float
    total_gears: int


class GearRatioAnalysis(BaseModel):
    warnings: list[str] = []
    recommendations: list[str] = []
    analysis: RatioAnalysis | None = None  # None when tooth data is missing


class GearOverlap(BaseModel):
    percentage: int = 0
    overlaps: list[str] = []


class InstallationAssessment(BaseModel):
    complexity: InstallComplexity
    recommendations: list[str]
    required_tools: list[str]
    estimated_time: str


class CompatibilitySummary(BaseModel):
    """UI-facing digest of a compatibility result."""

    status: str
    title: str
    message: str
    action_items: list[str]
    critical_issues: list[str]
    minor_warnings: list[str]
