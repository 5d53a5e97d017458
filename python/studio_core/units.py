"""Unit conversion factors and the studio room profiles used across the core."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

SPEED_OF_SOUND_FT_S = 1130
SPEED_OF_SOUND_M_S = 343

CONVERSIONS: dict[str, float] = {
    "feet_to_meters": 0.3048,
    "meters_to_feet": 3.28084,
    "square_feet_to_meters": 0.092903,
    "square_meters_to_feet": 10.7639,
    "cubic_feet_to_meters": 0.0283168,
    "cubic_meters_to_feet": 35.3147,
}


def feet_to_meters(value_ft: float) -> float:
    return float(value_ft) * CONVERSIONS["feet_to_meters"]


def meters_to_feet(value_m: float) -> float:
    return float(value_m) * CONVERSIONS["meters_to_feet"]


@dataclass(frozen=True, slots=True)
class RoomProfile:
    """Rectangular room description in feet.

    ``volume_ft3`` and ``surface_area_ft2`` are the measured values from the
    site survey rather than the product of the bounding dimensions, which
    ignore soffits and door recesses.
    """

    name: str
    length_ft: float
    width_ft: float
    height_ft: float
    volume_ft3: float
    surface_area_ft2: float

    @property
    def dimensions_ft(self) -> tuple[float, float, float]:
        return (self.length_ft, self.width_ft, self.height_ft)

    @property
    def dimensions_m(self) -> tuple[float, float, float]:
        return (
            feet_to_meters(self.length_ft),
            feet_to_meters(self.width_ft),
            feet_to_meters(self.height_ft),
        )

    @property
    def volume_m3(self) -> float:
        return self.volume_ft3 * CONVERSIONS["cubic_feet_to_meters"]

    @property
    def surface_area_m2(self) -> float:
        return self.surface_area_ft2 * CONVERSIONS["square_feet_to_meters"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "length_ft": self.length_ft,
            "width_ft": self.width_ft,
            "height_ft": self.height_ft,
            "volume_ft3": self.volume_ft3,
            "surface_area_ft2": self.surface_area_ft2,
            "volume_m3": self.volume_m3,
            "surface_area_m2": self.surface_area_m2,
        }


STUDIO_8 = RoomProfile(
    name="Studio 8",
    length_ft=12.3,
    width_ft=10.6,
    height_ft=8.2,
    volume_ft3=1068.46,
    surface_area_ft2=588.5,
)

ROOM_PROFILES: dict[str, RoomProfile] = {STUDIO_8.name: STUDIO_8}


__all__ = [
    "CONVERSIONS",
    "SPEED_OF_SOUND_FT_S",
    "SPEED_OF_SOUND_M_S",
    "RoomProfile",
    "STUDIO_8",
    "ROOM_PROFILES",
    "feet_to_meters",
    "meters_to_feet",
]
