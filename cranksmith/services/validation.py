"""Validation of user selections against the bike-type configuration."""

from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from cranksmith.core.bike_config import BIKE_CONFIG, get_bike_config
from cranksmith.core.enums import BikeType
from cranksmith.models.component import Component

COMPONENT_REQUIRED_FIELDS = ("id", "model", "weight")
COMPONENT_WEIGHT_RANGE = (1, 10000)  # grams


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[str] = []
    sanitized: Optional[Any] = None


def _invalid(*errors: str) -> ValidationResult:
    return ValidationResult(is_valid=False, errors=list(errors))


def validate_numeric(
    value: Any,
    *,
    field: str = "value",
    minimum: float | None = None,
    maximum: float | None = None,
    integer: bool = False,
    positive: bool = False,
    required: bool = False,
) -> ValidationResult:
    """Validate a numeric input, returning the parsed number as ``sanitized``.

    Empty values are valid unless ``required``; checks stop at the first failure.
    """
    if value is None or value == "":
        if required:
            return _invalid(f"{field} is required")
        return ValidationResult(is_valid=True)

    try:
        number = float(value)
    except (TypeError, ValueError):
        return _invalid(f"{field} must be a valid number")
    if number != number:  # NaN
        return _invalid(f"{field} must be a valid number")

    if integer and not number.is_integer():
        return _invalid(f"{field} must be a whole number")
    if positive and number <= 0:
        return _invalid(f"{field} must be positive")
    if minimum is not None and number < minimum:
        return _invalid(f"{field} must be at least {minimum}")
    if maximum is not None and number > maximum:
        return _invalid(f"{field} must be no more than {maximum}")

    return ValidationResult(is_valid=True, sanitized=number)


def validate_bike_type(bike_type: Any) -> ValidationResult:
    if not bike_type or not isinstance(bike_type, str):
        return _invalid("Bike type is required")

    resolved = BikeType.from_string(bike_type)
    if resolved is None or resolved not in BIKE_CONFIG:
        valid = ", ".join(b.value for b in BIKE_CONFIG)
        return _invalid(f"Bike type must be one of: {valid}")

    return ValidationResult(is_valid=True, sanitized=resolved)


def validate_component(component: Any, kind: str = "component") -> ValidationResult:
    """Validate a catalog component. A missing component is valid (optional)."""
    if not component:
        return ValidationResult(is_valid=True)

    if isinstance(component, Component):
        data = component.model_dump()
    elif isinstance(component, dict):
        data = component
    else:
        return _invalid(f"{kind} must be a valid component object")

    missing = [f for f in COMPONENT_REQUIRED_FIELDS if not data.get(f)]
    if missing:
        return _invalid(f"{kind} is missing required fields: {', '.join(missing)}")

    low, high = COMPONENT_WEIGHT_RANGE
    weight = validate_numeric(
        data["weight"], field=f"{kind} weight", minimum=low, maximum=high, positive=True
    )
    if not weight.is_valid:
        return _invalid(*weight.errors)

    try:
        sanitized = Component.model_validate(data)
    except ValidationError as e:
        return _invalid(
            *(
                f"{kind} {'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
        )
    raw_teeth = next(
        (data[k] for k in ("teeth", "chainrings", "cogs") if data.get(k) is not None), None
    )
    if raw_teeth is not None and not sanitized.has_teeth:
        return _invalid(f"{kind} teeth must be a list of positive whole numbers")

    return ValidationResult(is_valid=True, sanitized=sanitized)


def validate_setup(setup: Any, bike_type: Any) -> ValidationResult:
    """Validate wheel, tire and components of a setup for a bike type.

    Collects every field error rather than stopping at the first one; an
    invalid bike type stops validation immediately.
    """
    if not isinstance(setup, dict):
        if hasattr(setup, "model_dump"):
            setup = setup.model_dump()
        else:
            return _invalid("Setup must be a valid object")

    bike_check = validate_bike_type(
        getattr(bike_type, "value", bike_type)
    )
    if not bike_check.is_valid:
        return bike_check
    config = get_bike_config(bike_check.sanitized)

    errors: list[str] = []
    sanitized: dict[str, Any] = {}

    wheel = setup.get("wheel")
    if wheel:
        if wheel not in config["wheel_sizes"]:
            errors.append(f"Wheel size must be one of: {', '.join(config['wheel_sizes'])}")
        else:
            sanitized["wheel"] = wheel

    tire = setup.get("tire")
    if tire:
        tire_check = validate_numeric(tire, field="tire width", positive=True)
        if not tire_check.is_valid:
            errors.extend(tire_check.errors)
        elif tire_check.sanitized not in config["tire_widths"]:
            widths = ", ".join(str(w) for w in config["tire_widths"])
            errors.append(f"Tire width must be one of: {widths}")
        else:
            sanitized["tire"] = tire_check.sanitized

    for kind in ("crankset", "cassette"):
        check = validate_component(setup.get(kind), kind)
        if not check.is_valid:
            errors.extend(check.errors)
        else:
            sanitized[kind] = check.sanitized

    if errors:
        return ValidationResult(is_valid=False, errors=errors)
    return ValidationResult(is_valid=True, sanitized=sanitized)
