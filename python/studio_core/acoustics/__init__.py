"""Room calculators fed by the position catalog and room profiles."""

from .heatmap import HEATMAP_BANDS_HZ, HeatmapCell, build_degradation_heatmap
from .modes import RoomMode, compute_room_modes, room_modes_for
from .response import (
    THIRD_OCTAVE_FREQUENCIES_HZ,
    FrequencyPoint,
    points_to_rows,
    synthesize_frequency_response,
)

__all__ = [
    "RoomMode",
    "compute_room_modes",
    "room_modes_for",
    "FrequencyPoint",
    "THIRD_OCTAVE_FREQUENCIES_HZ",
    "synthesize_frequency_response",
    "points_to_rows",
    "HeatmapCell",
    "HEATMAP_BANDS_HZ",
    "build_degradation_heatmap",
]
