"""Errors raised by the strict calculation path."""


class DrivetrainError(ValueError):
    """Base class for calculation failures caused by invalid input."""


class InvalidWheelSize(DrivetrainError):
    def __init__(self, wheel_size: object):
        self.wheel_size = wheel_size
        super().__init__(f"Invalid wheel size: {wheel_size}")


class IncompleteSetup(DrivetrainError):
    """A setup lacks one or more fields required for calculation."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            f"Missing required components for calculation: {', '.join(missing)}"
        )


class InvalidComponentData(DrivetrainError):
    """A component has no usable tooth data."""

    def __init__(self, kind: str, side: str = ""):
        self.kind = kind
        self.side = side
        label = f"{side} {kind}".strip()
        super().__init__(f"Invalid {label} data")
