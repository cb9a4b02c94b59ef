"""Per-bike-type configuration: offered wheel sizes, tire widths, default parts."""

from typing import Any

from cranksmith.core.enums import BikeType

# Tire widths are millimetres for road/gravel and inches for MTB-style tires
# (values below 3 are inch widths, matching the component catalog).
BIKE_CONFIG: dict[BikeType, dict[str, Any]] = {
    BikeType.ROAD: {
        "name": "Road Bike",
        "description": "Optimized for speed and efficiency on paved roads",
        "wheel_sizes": ["700c"],
        "tire_widths": [23, 25, 28, 32, 35, 38],
        "default_setup": {
            "wheel": "700c",
            "tire": "25",
            "crankset": "shimano-105-r7000-50-34",
            "cassette": "shimano-105-r7000-11-28",
        },
    },
    BikeType.GRAVEL: {
        "name": "Gravel Bike",
        "description": "Versatile design for mixed terrain and adventure riding",
        "wheel_sizes": ["700c", "650b"],
        "tire_widths": [32, 35, 38, 40, 42, 45, 47, 50, 2.0, 2.1, 2.2, 2.25, 2.35],
        "default_setup": {
            "wheel": "700c",
            "tire": "40",
            "crankset": "shimano-grx-rx600-46-30",
            "cassette": "shimano-grx-rx600-11-42",
        },
    },
    BikeType.MTB: {
        "name": "Mountain Bike",
        "description": "Built for off-road trails and technical terrain",
        "wheel_sizes": ["26-inch", "27.5-inch", "29-inch"],
        "tire_widths": [2.1, 2.25, 2.35, 2.4, 2.5, 2.6],
        "default_setup": {
            "wheel": "29-inch",
            "tire": "2.35",
            "crankset": "sram-gx-eagle",
            "cassette": "sram-gx-eagle-10-52",
        },
    },
}


def get_bike_config(bike_type: BikeType | str) -> dict[str, Any]:
    """Return the configuration for a bike type.

    Raises:
        ValueError: If the bike type is not configured.
    """
    resolved = BikeType.from_string(bike_type)
    if resolved is None:
        raise ValueError(
            f"Bike type must be one of: {', '.join(b.value for b in BIKE_CONFIG)}"
        )
    return BIKE_CONFIG[resolved]
