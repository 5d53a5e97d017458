"""Synthetic per-position SPL curves for the frequency explorer."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from random import Random
from typing import Any

from ..positions import PositionCatalog
from ._utils import round_half_up

THIRD_OCTAVE_FREQUENCIES_HZ: tuple[float, ...] = (
    20, 25, 31.5, 40, 50, 63, 80, 100, 125, 160, 200, 250, 315, 400, 500, 630, 800,
    1000, 1250, 1600, 2000, 2500, 3150, 4000, 5000, 6300, 8000, 10000, 12500, 16000, 20000,
)

BASE_SPL_DB = 85.0
ROOM_GAIN_DB = 8.0
MODAL_VARIANCE_DB = 6.0
CLARITY_PENALTY_DB = 5.0
JITTER_DB = 1.0

_DEFAULT_RNG = Random()


@dataclass(slots=True)
class FrequencyPoint:
    """SPL at one grid frequency, keyed by catalog position name."""

    frequency: float
    levels: dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"frequency": self.frequency}
        payload.update(self.levels)
        return payload


def synthesize_frequency_response(
    catalog: PositionCatalog,
    *,
    rng: Random | None = None,
    frequencies_hz: tuple[float, ...] = THIRD_OCTAVE_FREQUENCIES_HZ,
) -> list[FrequencyPoint]:
    """Build a plausible SPL curve for every catalog position.

    Each point carries a uniform ±1 dB jitter drawn from ``rng`` (a shared
    process-wide generator by default), so repeated calls differ unless a
    seeded generator is supplied.
    """

    generator = rng if rng is not None else _DEFAULT_RNG
    points: list[FrequencyPoint] = []
    for freq in frequencies_hz:
        point = FrequencyPoint(frequency=freq)
        for name, position in catalog.items():
            spl = BASE_SPL_DB + shaped_offset_db(freq, position.degradation)
            spl += (generator.random() - 0.5) * 2.0 * JITTER_DB
            point.levels[name] = round_half_up(spl, 2)
        points.append(point)
    return points


def shaped_offset_db(freq: float, degradation: float) -> float:
    """Deterministic part of the synthetic response relative to the 85 dB base."""

    offset = 0.0
    if freq < 200:
        offset += ROOM_GAIN_DB * (1.0 + degradation * 2.0) * math.exp(-(freq / 80.0))
    if freq < 500:
        offset += MODAL_VARIANCE_DB * (1.0 + degradation) * math.sin((freq / 50.0) * math.pi)
    if 500 <= freq <= 2000:
        offset -= degradation * CLARITY_PENALTY_DB
    if freq > 4000:
        offset += -0.001 * (freq - 4000) * (1.0 + degradation * 0.5)
    return offset


def points_to_rows(points: list[FrequencyPoint]) -> list[Mapping[str, Any]]:
    return [point.to_dict() for point in points]


__all__ = [
    "THIRD_OCTAVE_FREQUENCIES_HZ",
    "FrequencyPoint",
    "synthesize_frequency_response",
    "shaped_offset_db",
    "points_to_rows",
]
