"""Low-order resonant modes of a rectangular room."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Literal

from ..units import SPEED_OF_SOUND_FT_S, RoomProfile
from ._utils import is_usable_dimension, round_half_up

logger = logging.getLogger(__name__)

ModeType = Literal["axial", "tangential", "oblique"]

MAX_MODE_FREQUENCY_HZ = 500.0
AXIAL_HARMONICS: tuple[int, ...] = (1, 2, 3)

# (n_length, n_width, n_height, label); the low-order pairs that dominate a
# small room's bass response.
TANGENTIAL_MODES: tuple[tuple[int, int, int, str], ...] = (
    (1, 1, 0, "1L-1W"),
    (1, 0, 1, "1L-1H"),
    (0, 1, 1, "1W-1H"),
    (2, 1, 0, "2L-1W"),
    (1, 2, 0, "1L-2W"),
)


@dataclass(frozen=True, slots=True)
class RoomMode:
    """A single room resonance, frequency rounded to 0.1 Hz."""

    frequency: float
    type: ModeType
    axis: str
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "frequency": self.frequency,
            "type": self.type,
            "axis": self.axis,
            "label": self.label,
        }


def compute_room_modes(
    length_ft: float,
    width_ft: float,
    height_ft: float,
    *,
    speed_of_sound: float = SPEED_OF_SOUND_FT_S,
    max_frequency_hz: float = MAX_MODE_FREQUENCY_HZ,
) -> list[RoomMode]:
    """Return axial and selected tangential modes up to ``max_frequency_hz``.

    Axial modes cover the first three harmonics of each dimension; tangential
    modes are limited to :data:`TANGENTIAL_MODES`. Oblique modes are not
    computed. Frequencies are rounded before the limit is applied and the
    result is sorted by frequency, ties keeping computation order.
    """

    dimensions = {"L": float(length_ft), "W": float(width_ft), "H": float(height_ft)}
    unusable = [name for name, value in dimensions.items() if not is_usable_dimension(value)]
    if unusable:
        logger.warning("Skipping modes for non-positive room dimensions: %s", ", ".join(unusable))

    half_c = speed_of_sound / 2.0
    modes: list[RoomMode] = []

    for key, axis in (("L", "Length"), ("W", "Width"), ("H", "Height")):
        dimension = dimensions[key]
        if key in unusable:
            continue
        for n in AXIAL_HARMONICS:
            frequency = round_half_up(half_c * (n / dimension), 1)
            if frequency <= max_frequency_hz:
                modes.append(RoomMode(frequency, "axial", axis, f"{n}{key}"))

    for n_l, n_w, n_h, label in TANGENTIAL_MODES:
        indices = {"L": n_l, "W": n_w, "H": n_h}
        if any(indices[key] and key in unusable for key in indices):
            continue
        total = sum(
            (index / dimensions[key]) ** 2 for key, index in indices.items() if index
        )
        frequency = round_half_up(half_c * math.sqrt(total), 1)
        if frequency <= max_frequency_hz:
            modes.append(RoomMode(frequency, "tangential", label, label))

    return sorted(modes, key=lambda mode: mode.frequency)


def room_modes_for(profile: RoomProfile, **kwargs: Any) -> list[RoomMode]:
    return compute_room_modes(profile.length_ft, profile.width_ft, profile.height_ft, **kwargs)


__all__ = [
    "ModeType",
    "RoomMode",
    "MAX_MODE_FREQUENCY_HZ",
    "AXIAL_HARMONICS",
    "TANGENTIAL_MODES",
    "compute_room_modes",
    "room_modes_for",
]
