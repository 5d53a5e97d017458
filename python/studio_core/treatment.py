"""Acoustic panel treatment planning and Sabine RT60 prediction."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from .units import RoomProfile

SABINE_IMPERIAL = 0.049  # s/ft, RT60 = 0.049 * V[ft^3] / A[sabins]
RT60_TARGET_S = 0.3  # ITU-R BS.1116 control-room target

PANEL_KINDS: tuple[str, ...] = ("2_inch", "3_inch", "5_5_inch", "11_inch")
DEFAULT_PANEL_COUNTS: dict[str, int] = {"2_inch": 3, "3_inch": 6, "5_5_inch": 12, "11_inch": 4}


@dataclass(frozen=True, slots=True)
class PanelSpec:
    """Broadband absorber panel."""

    face_area_ft2: float
    """Exposed face area of one panel (square feet)."""

    unit_cost: float
    """Price per panel (USD)."""

    absorption: Mapping[int, float]
    """Sabine absorption coefficient per octave band centre (Hz)."""


PANEL_SPECS: dict[str, PanelSpec] = {
    "2_inch": PanelSpec(
        face_area_ft2=8.0,
        unit_cost=60.0,
        absorption={125: 0.15, 250: 0.55, 500: 0.95, 1000: 1.0, 2000: 1.0, 4000: 0.98, 8000: 0.95},
    ),
    "3_inch": PanelSpec(
        face_area_ft2=8.0,
        unit_cost=75.0,
        absorption={125: 0.3, 250: 0.85, 500: 1.0, 1000: 1.0, 2000: 1.0, 4000: 0.98, 8000: 0.95},
    ),
    "5_5_inch": PanelSpec(
        face_area_ft2=8.0,
        unit_cost=110.0,
        absorption={125: 0.65, 250: 1.0, 500: 1.0, 1000: 1.0, 2000: 0.99, 4000: 0.97, 8000: 0.95},
    ),
    "11_inch": PanelSpec(
        face_area_ft2=8.0,
        unit_cost=180.0,
        absorption={125: 0.95, 250: 1.0, 500: 1.0, 1000: 1.0, 2000: 0.99, 4000: 0.97, 8000: 0.95},
    ),
}


@dataclass(frozen=True, slots=True)
class PanelConfig:
    """Panel counts keyed by thickness."""

    counts: Mapping[str, int] = field(default_factory=lambda: dict(DEFAULT_PANEL_COUNTS))

    def __post_init__(self) -> None:
        unknown = set(self.counts) - set(PANEL_KINDS)
        if unknown:
            raise ValueError(f"Unknown panel kinds: {', '.join(sorted(unknown))}")
        normalised = {kind: max(int(self.counts.get(kind, 0)), 0) for kind in PANEL_KINDS}
        object.__setattr__(self, "counts", normalised)

    @classmethod
    def defaults(cls) -> PanelConfig:
        return cls()

    def with_count(self, kind: str, count: int) -> PanelConfig:
        """Return a copy with ``kind`` set to ``count`` (negative counts clamp to 0)."""

        if kind not in PANEL_KINDS:
            raise ValueError(f"Unknown panel kind: {kind}")
        counts = dict(self.counts)
        counts[kind] = max(int(count), 0)
        return replace(self, counts=counts)

    def reset(self) -> PanelConfig:
        return PanelConfig.defaults()

    @property
    def total_panels(self) -> int:
        return sum(self.counts.values())

    @property
    def total_cost(self) -> float:
        return sum(PANEL_SPECS[kind].unit_cost * count for kind, count in self.counts.items())

    def added_absorption(self, band_hz: int) -> float:
        """Total panel absorption in sabins for one octave band."""

        total = 0.0
        for kind, count in self.counts.items():
            spec = PANEL_SPECS[kind]
            total += count * spec.face_area_ft2 * spec.absorption.get(band_hz, 0.0)
        return total

    def to_dict(self) -> dict[str, Any]:
        return {
            "counts": dict(self.counts),
            "total_panels": self.total_panels,
            "total_cost": self.total_cost,
        }


@dataclass(slots=True)
class TreatmentSummary:
    """Before/after reverberation and intelligibility figures for a panel layout.

    ``predicted_sti`` scales the headroom left above ``current_sti`` by the
    fractional drop in average RT60, so it never falls below the measured
    value and never exceeds 1.
    """

    room: str
    panels: PanelConfig
    current_rt60: dict[int, float]
    predicted_rt60: dict[int, float]
    target_rt60_s: float = RT60_TARGET_S
    current_sti: float | None = None

    @property
    def bands_meeting_target(self) -> list[int]:
        return [band for band, value in self.predicted_rt60.items() if value <= self.target_rt60_s]

    @property
    def current_average_rt60(self) -> float | None:
        return average_rt60(self.current_rt60)

    @property
    def predicted_average_rt60(self) -> float | None:
        return average_rt60(self.predicted_rt60)

    @property
    def rt60_improvement_pct(self) -> float | None:
        before = self.current_average_rt60
        after = self.predicted_average_rt60
        if before is None or after is None:
            return None
        return (before - after) / before * 100.0

    @property
    def predicted_sti(self) -> float | None:
        current = self.current_sti
        if current is None or not math.isfinite(current) or not 0.0 < current <= 1.0:
            return None
        improvement = self.rt60_improvement_pct or 0.0
        fraction = min(max(improvement / 100.0, 0.0), 1.0)
        return min(current + (1.0 - current) * fraction, 1.0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "room": self.room,
            "panels": self.panels.to_dict(),
            "current_rt60": {str(band): value for band, value in self.current_rt60.items()},
            "predicted_rt60": {str(band): value for band, value in self.predicted_rt60.items()},
            "target_rt60_s": self.target_rt60_s,
            "bands_meeting_target": self.bands_meeting_target,
            "current_average_rt60": self.current_average_rt60,
            "predicted_average_rt60": self.predicted_average_rt60,
            "rt60_improvement_pct": self.rt60_improvement_pct,
            "current_sti": self.current_sti,
            "predicted_sti": self.predicted_sti,
        }


def average_rt60(rt60_by_freq: Mapping[int, float]) -> float | None:
    """Mean of the finite, positive band values, or ``None`` when there are none."""

    values = [value for value in rt60_by_freq.values() if math.isfinite(value) and value > 0.0]
    if not values:
        return None
    return sum(values) / len(values)


def predict_rt60(
    current_rt60_by_freq: Mapping[int, float],
    profile: RoomProfile,
    panels: PanelConfig,
) -> dict[int, float]:
    """Predict per-band RT60 after adding ``panels`` to ``profile``.

    The room's existing absorption is back-solved from the measured decay with
    the imperial Sabine equation and the panel absorption is added on top.
    Bands with a non-positive or non-finite RT60 are returned unchanged.
    """

    volume = profile.volume_ft3
    predicted: dict[int, float] = {}
    for band, rt60 in current_rt60_by_freq.items():
        if not math.isfinite(rt60) or rt60 <= 0.0 or volume <= 0.0:
            predicted[band] = rt60
            continue
        current_absorption = SABINE_IMPERIAL * volume / rt60
        new_absorption = current_absorption + panels.added_absorption(band)
        predicted[band] = SABINE_IMPERIAL * volume / new_absorption
    return predicted


def summarise_treatment(
    current_rt60_by_freq: Mapping[int, float],
    profile: RoomProfile,
    panels: PanelConfig | None = None,
    *,
    current_sti: float | None = None,
) -> TreatmentSummary:
    config = panels if panels is not None else PanelConfig()
    return TreatmentSummary(
        room=profile.name,
        panels=config,
        current_rt60=dict(current_rt60_by_freq),
        predicted_rt60=predict_rt60(current_rt60_by_freq, profile, config),
        current_sti=current_sti,
    )


__all__ = [
    "SABINE_IMPERIAL",
    "RT60_TARGET_S",
    "PANEL_KINDS",
    "DEFAULT_PANEL_COUNTS",
    "PANEL_SPECS",
    "PanelSpec",
    "PanelConfig",
    "TreatmentSummary",
    "average_rt60",
    "predict_rt60",
    "summarise_treatment",
]
