from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from cranksmith.core.enums import BikeType
from cranksmith.utils.converters import parse_speed_count, safe_float


class Component(BaseModel):
    """A crankset or cassette as supplied by the component catalog."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    model: str = ""
    variant: str = ""
    teeth: Optional[list[int]] = None
    speeds: Optional[str] = None
    weight: float = Field(default=0.0, ge=0)  # grams
    bike_type: Optional[BikeType] = None
    price: Optional[float] = None

    @model_validator(mode="before")
    @classmethod
    def populate_teeth_from_legacy(cls, data: Any) -> Any:
        """Accept legacy chainrings/cogs field names and store them as teeth."""
        if isinstance(data, dict):
            data = dict(data)
            for legacy in ("chainrings", "cogs"):
                if data.get(legacy) is not None and data.get("teeth") is None:
                    data["teeth"] = data[legacy]
                data.pop(legacy, None)
            if "bikeType" in data and "bike_type" not in data:
                data["bike_type"] = data.pop("bikeType")
        return data

    @field_validator("teeth", mode="before")
    @classmethod
    def drop_malformed_teeth(cls, value: Any) -> Any:
        # Anything that is not a sequence of positive tooth counts is treated as absent
        if not isinstance(value, (list, tuple)):
            return None
        if any(isinstance(t, bool) or not isinstance(t, int) or t <= 0 for t in value):
            return None
        return list(value)

    @field_validator("weight", mode="before")
    @classmethod
    def default_missing_weight(cls, value: Any) -> Any:
        return safe_float(value, default=0.0)

    @property
    def has_teeth(self) -> bool:
        return bool(self.teeth)

    @property
    def max_teeth(self) -> int:
        return max(self.teeth or [])

    @property
    def min_teeth(self) -> int:
        return min(self.teeth or [])

    @property
    def speed_count(self) -> int:
        """Speed count parsed from the speeds label, 0 when unknown."""
        return parse_speed_count(self.speeds)


class Setup(BaseModel):
    """A drivetrain pairing: crankset, cassette, wheel size and tire width."""

    crankset: Optional[Component] = None
    cassette: Optional[Component] = None
    wheel: Optional[str] = None
    tire: Optional[float] = None  # mm (inches for MTB-style widths)

    @field_validator("crankset", "cassette", mode="before")
    @classmethod
    def drop_empty_component(cls, value: Any) -> Any:
        if value is None or value == {} or value == "":
            return None
        if not isinstance(value, (dict, Component)):
            return None
        return value

    @field_validator("wheel", mode="before")
    @classmethod
    def normalize_wheel(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(getattr(value, "value", value)).strip()
        return text or None

    @field_validator("tire", mode="before")
    @classmethod
    def parse_tire_width(cls, value: Any) -> Optional[float]:
        return safe_float(value, default=None)

    @property
    def is_complete(self) -> bool:
        """True when wheel, tire, crankset and cassette (with teeth) are all present."""
        return (
            bool(self.wheel)
            and self.tire is not None
            and self.crankset is not None
            and self.crankset.has_teeth
            and self.cassette is not None
            and self.cassette.has_teeth
        )

    def missing_fields(self) -> list[str]:
        """Names of required fields that are absent, in wheel/tire/crankset/cassette order."""
        missing = []
        if not self.wheel:
            missing.append("wheel")
        if self.tire is None:
            missing.append("tire")
        if self.crankset is None or not self.crankset.has_teeth:
            missing.append("crankset")
        if self.cassette is None or not self.cassette.has_teeth:
            missing.append("cassette")
        return missing
