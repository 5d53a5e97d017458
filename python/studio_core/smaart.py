"""Parser for Smaart-style room analysis text exports.

The exports mix report prose with tab-delimited tables. Two kinds of rows are
of interest:

* octave-band decay rows, ``<filter>\\t<band>Hz\\t<RT60>\\t<T20>\\t<T30>``, where
  only the band and the first decay column are used, and
* speech-intelligibility rows, ``STI\\t<v1>\\t<v2>...``, whose values line up
  with :data:`STI_REFERENCE_FREQUENCIES_HZ` by position.

Both detectors look at every line, so one row may feed both tables.
Everything else is ignored, and a row that does not parse is skipped.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, TextIO

logger = logging.getLogger(__name__)

STI_REFERENCE_FREQUENCIES_HZ: tuple[int, ...] = (125, 250, 500, 1000, 2000, 4000, 8000)

_NUMBER = r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?"
_RT60_ROW = re.compile(rf"^\s*\S+\s+(\d+(?:\.\d+)?)Hz\s+({_NUMBER})(?=\s|$)")
_STI_TOKEN = "STI"


@dataclass(frozen=True, slots=True)
class SmaartMeasurementBundle:
    """RT60 and STI figures extracted from one log export."""

    rt60_by_freq: dict[int, float] = field(default_factory=dict)
    sti_by_freq: dict[int, float] = field(default_factory=dict)
    average_sti: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "rt60_by_freq": {str(freq): value for freq, value in self.rt60_by_freq.items()},
            "sti_by_freq": {str(freq): value for freq, value in self.sti_by_freq.items()},
            "average_sti": self.average_sti,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> SmaartMeasurementBundle:
        return cls(
            rt60_by_freq={int(k): float(v) for k, v in (payload.get("rt60_by_freq") or {}).items()},
            sti_by_freq={int(k): float(v) for k, v in (payload.get("sti_by_freq") or {}).items()},
            average_sti=float(payload.get("average_sti", 0.0)),
        )


def parse_smaart_log(payload: str | TextIO) -> SmaartMeasurementBundle:
    """Extract per-band RT60 and STI values from a Smaart log export.

    When several ``STI`` rows are present the last one replaces the earlier
    results entirely, including ``average_sti``.
    """

    if isinstance(payload, str):
        text = payload
    else:
        text = payload.read()

    rt60: dict[int, float] = {}
    sti: dict[int, float] = {}
    average_sti = 0.0

    for line_number, line in enumerate(text.splitlines(), start=1):
        band = _match_rt60_row(line)
        if band is not None:
            freq, value = band
            rt60[freq] = value

        sti_values = _match_sti_row(line)
        if sti_values is None:
            continue
        if not sti_values:
            logger.debug("Line %d: STI row without numeric values ignored", line_number)
            continue
        if sti:
            logger.debug("Line %d: STI row replaces earlier STI results", line_number)
        sti = dict(zip(STI_REFERENCE_FREQUENCIES_HZ, sti_values))
        average_sti = sti_values[0]

    logger.debug("Parsed %d RT60 bands and %d STI bands", len(rt60), len(sti))
    return SmaartMeasurementBundle(rt60_by_freq=rt60, sti_by_freq=sti, average_sti=average_sti)


# --- helpers -----------------------------------------------------------------


def _match_rt60_row(line: str) -> tuple[int, float] | None:
    match = _RT60_ROW.match(line)
    if match is None:
        return None
    value = float(match.group(2))
    if not math.isfinite(value):
        return None
    return int(float(match.group(1))), value


def _match_sti_row(line: str) -> list[float] | None:
    tokens = line.split()
    if not tokens or tokens[0] != _STI_TOKEN:
        return None
    return _finite_values(tokens[1:])


def _finite_values(tokens: Sequence[str]) -> list[float]:
    values: list[float] = []
    for token in tokens:
        try:
            value = float(token)
        except ValueError:
            continue
        if math.isfinite(value):
            values.append(value)
    return values


__all__ = [
    "STI_REFERENCE_FREQUENCIES_HZ",
    "SmaartMeasurementBundle",
    "parse_smaart_log",
]
