"""Position x octave-band STI degradation grid."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..positions import PositionCatalog

HEATMAP_BANDS_HZ: tuple[int, ...] = (63, 125, 250, 500, 1000, 2000, 4000, 8000)

CORNER_LOW_BAND_FACTOR = 1.4
REFERENCE_MID_BAND_FACTOR = 0.5
CEILING_HIGH_BAND_FACTOR = 1.2
CEILING_POSITION = "Ceiling"


@dataclass(frozen=True, slots=True)
class HeatmapCell:
    position: str
    frequency: int
    degradation: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "frequency": self.frequency,
            "degradation": self.degradation,
        }


def build_degradation_heatmap(catalog: PositionCatalog) -> list[HeatmapCell]:
    """Scale each position's degradation per band and cap it at 1.

    Corners pick up extra low-band loss from modal build-up, the reference
    seat is cleaner through the speech band and the ceiling position loses
    more above 2 kHz.
    """

    cells: list[HeatmapCell] = []
    for name, position in catalog.items():
        for band in HEATMAP_BANDS_HZ:
            degradation = position.degradation
            if band < 250 and "Corner" in name:
                degradation *= CORNER_LOW_BAND_FACTOR
            if 500 <= band <= 2000 and catalog.is_reference(name):
                degradation *= REFERENCE_MID_BAND_FACTOR
            if band > 2000 and name == CEILING_POSITION:
                degradation *= CEILING_HIGH_BAND_FACTOR
            cells.append(HeatmapCell(name, band, min(degradation, 1.0)))
    return cells


__all__ = ["HEATMAP_BANDS_HZ", "HeatmapCell", "build_degradation_heatmap"]
