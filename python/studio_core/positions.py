"""Measurement position catalog and STI degradation grading."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

STUDIO_8_REFERENCE = "Host A (Reference)"

# (upper bound exclusive, label, colour) from best to worst.
_STI_GRADES: tuple[tuple[float, str, str], ...] = (
    (0.15, "Excellent", "#10b981"),
    (0.25, "Good", "#3b82f6"),
    (0.35, "Fair", "#f59e0b"),
)
_POOR_GRADE = ("Poor", "#ef4444")


@dataclass(frozen=True, slots=True)
class MeasurementPosition:
    """A microphone position in room coordinates (feet).

    ``x`` runs along the width, ``y`` along the depth and ``z`` is the height
    above the floor.
    """

    x: float
    y: float
    z: float
    sti: float
    degradation: float
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "z": self.z,
            "sti": self.sti,
            "degradation": self.degradation,
            "label": self.label,
        }


@dataclass(frozen=True, slots=True)
class PositionSpec:
    """Raw catalog entry before degradation is derived from the reference STI."""

    name: str
    x: float
    y: float
    z: float
    sti: float
    label: str


class PositionCatalog(Mapping[str, MeasurementPosition]):
    """Read-only, insertion-ordered mapping of position name to position data."""

    __slots__ = ("_positions", "_reference_name")

    def __init__(self, positions: Mapping[str, MeasurementPosition], reference_name: str) -> None:
        if reference_name not in positions:
            raise ValueError(f"Reference position {reference_name!r} is not in the catalog")
        reference = positions[reference_name]
        if reference.degradation != 0.0:
            raise ValueError("Reference position must have zero degradation")
        for name, position in positions.items():
            if position.degradation < 0.0:
                raise ValueError(f"Position {name!r} has negative degradation")
        self._positions = dict(positions)
        self._reference_name = reference_name

    @classmethod
    def from_sti(cls, entries: Iterable[PositionSpec], *, reference: str) -> PositionCatalog:
        """Build a catalog, deriving degradation as fractional STI loss from ``reference``."""

        specs = list(entries)
        by_name = {spec.name: spec for spec in specs}
        if len(by_name) != len(specs):
            raise ValueError("Position names must be unique")
        if reference not in by_name:
            raise ValueError(f"Reference position {reference!r} is not in the catalog")

        reference_sti = by_name[reference].sti
        positions: dict[str, MeasurementPosition] = {}
        for spec in specs:
            if not math.isfinite(spec.sti) or not 0.0 < spec.sti <= 1.0:
                raise ValueError(f"STI for {spec.name!r} must be within (0, 1]")
            if spec.sti > reference_sti:
                raise ValueError(
                    f"Position {spec.name!r} has STI {spec.sti} above the reference {reference_sti}"
                )
            degradation = 0.0 if spec.name == reference else (reference_sti - spec.sti) / reference_sti
            positions[spec.name] = MeasurementPosition(
                x=spec.x,
                y=spec.y,
                z=spec.z,
                sti=spec.sti,
                degradation=degradation,
                label=spec.label,
            )
        return cls(positions, reference)

    @property
    def reference_name(self) -> str:
        return self._reference_name

    @property
    def reference(self) -> MeasurementPosition:
        return self._positions[self._reference_name]

    def names(self) -> list[str]:
        return list(self._positions)

    def is_reference(self, name: str) -> bool:
        return name == self._reference_name

    def __getitem__(self, name: str) -> MeasurementPosition:
        return self._positions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def __repr__(self) -> str:
        return f"PositionCatalog(reference={self._reference_name!r}, positions={self.names()!r})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "reference": self._reference_name,
            "positions": {name: position.to_dict() for name, position in self._positions.items()},
        }


STUDIO_8_POSITIONS = PositionCatalog.from_sti(
    [
        PositionSpec(STUDIO_8_REFERENCE, x=1.0, y=0.33, z=4.0, sti=0.95, label="Host A"),
        PositionSpec("Host C (Talent)", x=11.0, y=5.3, z=4.0, sti=0.67, label="Host C"),
        PositionSpec("Mid Room", x=6.15, y=5.3, z=4.0, sti=0.71, label="Mid Room"),
        PositionSpec("NE Corner", x=11.0, y=0.5, z=4.0, sti=0.58, label="NE Corner"),
        PositionSpec("SE Corner", x=11.0, y=10.0, z=4.0, sti=0.62, label="SE Corner"),
        PositionSpec("Ceiling", x=6.15, y=5.3, z=7.5, sti=0.64, label="Ceiling"),
    ],
    reference=STUDIO_8_REFERENCE,
)


def _grade(degradation: float) -> tuple[str, str]:
    for upper, label, colour in _STI_GRADES:
        if degradation < upper:
            return label, colour
    return _POOR_GRADE


def sti_quality_label(degradation: float) -> str:
    """Return Excellent/Good/Fair/Poor for a fractional STI degradation."""

    return _grade(degradation)[0]


def sti_color(degradation: float) -> str:
    """Return the hex colour used to paint a position with the given degradation."""

    return _grade(degradation)[1]


__all__ = [
    "MeasurementPosition",
    "PositionSpec",
    "PositionCatalog",
    "STUDIO_8_POSITIONS",
    "STUDIO_8_REFERENCE",
    "sti_color",
    "sti_quality_label",
]
