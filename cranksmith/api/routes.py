"""FastAPI route definitions for the CrankSmith calculator API."""

from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel, Field
from slowapi import Limiter
from slowapi.util import get_remote_address

from cranksmith.config import get_settings
from cranksmith.core.bike_config import BIKE_CONFIG
from cranksmith.core.enums import BikeType, ComparisonMethod
from cranksmith.core.exceptions import DrivetrainError
from cranksmith.core.logging import log_error
from cranksmith.models.compatibility import (
    CompatibilityResult,
    CompatibilitySummary,
    GearRatioAnalysis,
    InstallationAssessment,
)
from cranksmith.models.component import Setup
from cranksmith.models.metrics import GearTableEntry, SetupComparison
from cranksmith.services.compatibility import default_checker
from cranksmith.services.performance import compare_setups, compare_setups_full, gear_table
from cranksmith.services.validation import ValidationResult, validate_setup

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


def _rate_limit() -> str:
    return get_settings().rate_limit


def _bike_type(value: Optional[str]) -> BikeType:
    """Resolve a request bike type, falling back to the configured default."""
    if not value:
        return get_settings().default_bike_type
    resolved = BikeType.from_string(value)
    if resolved is None:
        valid = ", ".join(b.value for b in BikeType)
        raise HTTPException(status_code=400, detail=f"Bike type must be one of: {valid}")
    return resolved


def _calculation_failed(exc: DrivetrainError) -> HTTPException:
    log_error("Performance calculation failed", exc=exc)
    return HTTPException(
        status_code=422,
        detail=f"Unable to calculate performance: {exc}. Please check your components.",
    )


# ---------------------------------------------------------------------------
# Request / Response Models
# ---------------------------------------------------------------------------


class CompareRequest(BaseModel):
    current: Setup
    proposed: Setup
    speed_unit: Optional[str] = None
    method: ComparisonMethod = ComparisonMethod.QUICK


class SetupRequest(BaseModel):
    setup: Setup = Field(default_factory=Setup)
    bike_type: Optional[str] = None


class GearTableRequest(BaseModel):
    setup: Setup
    speed_unit: Optional[str] = None


class ValidateRequest(BaseModel):
    # Raw payload: validation reports problems instead of rejecting the request
    setup: dict[str, Any] = Field(default_factory=dict)
    bike_type: Optional[str] = None


class CompatibilityResponse(BaseModel):
    result: CompatibilityResult
    summary: CompatibilitySummary


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/bike-types")
async def list_bike_types() -> dict[str, Any]:
    """Offered wheel sizes, tire widths and default parts per bike type."""
    return {bike_type.value: config for bike_type, config in BIKE_CONFIG.items()}


@router.post("/compare", response_model=SetupComparison)
@limiter.limit(_rate_limit)
async def compare(request: Request, body: CompareRequest):
    """Compare current and proposed setups; deltas are proposed minus current."""
    speed_unit = body.speed_unit or get_settings().default_speed_unit
    calculate = (
        compare_setups_full if body.method is ComparisonMethod.FULL else compare_setups
    )
    try:
        return calculate(body.current, body.proposed, speed_unit)
    except DrivetrainError as e:
        raise _calculation_failed(e) from e


@router.post("/compatibility", response_model=CompatibilityResponse)
@limiter.limit(_rate_limit)
async def compatibility(request: Request, body: SetupRequest):
    result = default_checker.check_compatibility(body.setup, _bike_type(body.bike_type))
    return CompatibilityResponse(
        result=result,
        summary=default_checker.generate_compatibility_summary(result),
    )


@router.post("/gear-analysis", response_model=GearRatioAnalysis)
@limiter.limit(_rate_limit)
async def gear_analysis(request: Request, body: SetupRequest):
    return default_checker.analyze_gear_ratios(body.setup, _bike_type(body.bike_type))


@router.post("/installation", response_model=InstallationAssessment)
@limiter.limit(_rate_limit)
async def installation(request: Request, body: SetupRequest):
    return default_checker.assess_installation_complexity(body.setup)


@router.post("/gear-table", response_model=list[GearTableEntry])
@limiter.limit(_rate_limit)
async def gear_table_endpoint(request: Request, body: GearTableRequest):
    speed_unit = body.speed_unit or get_settings().default_speed_unit
    try:
        return gear_table(body.setup, speed_unit)
    except DrivetrainError as e:
        raise _calculation_failed(e) from e


@router.post("/validate", response_model=ValidationResult)
@limiter.limit(_rate_limit)
async def validate(request: Request, body: ValidateRequest):
    bike_type = body.bike_type or get_settings().default_bike_type.value
    return validate_setup(body.setup, bike_type)
