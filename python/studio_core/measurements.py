"""Frequency-response CSV ingestion for the measurement dashboard."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, TextIO

logger = logging.getLogger(__name__)

# Header name -> record attribute. Matching is exact and case-sensitive.
CSV_COLUMN_FIELDS: dict[str, str] = {
    "Frequency_Hz": "frequency_hz",
    "Magnitude_dB": "magnitude_db",
    "Phase_deg": "phase_deg",
    "STI": "sti",
    "STI_Degradation_%": "sti_degradation_pct",
    "position": "position",
    "Color": "color",
}

_NUMERIC_FIELDS = frozenset(
    {"frequency_hz", "magnitude_db", "phase_deg", "sti", "sti_degradation_pct"}
)

# Attribute -> key used by ``to_dict``; the dashboard consumes these names.
RECORD_EXPORT_KEYS: tuple[tuple[str, str], ...] = (
    ("frequency_hz", "frequency"),
    ("magnitude_db", "magnitude"),
    ("phase_deg", "phase"),
    ("sti", "sti"),
    ("sti_degradation_pct", "stiDegradation"),
    ("position", "position"),
    ("color", "color"),
)


@dataclass(frozen=True, slots=True)
class FrequencyResponseRecord:
    """One row of a frequency-response export.

    ``None`` marks a column that was not present in the export; a column that
    was present but unparseable carries ``math.nan`` instead.
    """

    frequency_hz: float = math.nan
    magnitude_db: float | None = None
    phase_deg: float | None = None
    sti: float | None = None
    sti_degradation_pct: float | None = None
    position: str | None = None
    color: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for attribute, key in RECORD_EXPORT_KEYS:
            value = getattr(self, attribute)
            if value is None:
                continue
            payload[key] = value
        return payload


def parse_frequency_response_csv(payload: str | TextIO) -> list[FrequencyResponseRecord]:
    """Parse a comma-separated frequency-response export.

    The first non-blank line is the header. Column order is taken from the
    header, unknown columns are dropped and blank lines are skipped. Numeric
    cells that fail to parse become NaN; a row is never rejected. Quoted
    fields are not supported, so a comma always separates cells.
    """

    if isinstance(payload, str):
        text = payload
    else:
        text = payload.read()

    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return []

    header = [cell.strip() for cell in lines[0].split(",")]
    columns = _resolve_columns(header)
    ignored = [name for name in header if name not in CSV_COLUMN_FIELDS]
    if ignored:
        logger.debug("Ignoring unrecognised CSV columns: %s", ", ".join(ignored))

    records: list[FrequencyResponseRecord] = []
    for line_number, line in enumerate(lines[1:], start=2):
        cells = [cell.strip() for cell in line.split(",")]
        records.append(_build_record(columns, cells, line_number))

    logger.debug("Parsed %d frequency-response rows", len(records))
    return records


def records_to_rows(records: Iterable[FrequencyResponseRecord]) -> list[dict[str, Any]]:
    return [record.to_dict() for record in records]


# --- helpers -----------------------------------------------------------------


def _resolve_columns(header: Sequence[str]) -> list[tuple[int, str]]:
    columns: list[tuple[int, str]] = []
    for index, name in enumerate(header):
        field = CSV_COLUMN_FIELDS.get(name)
        if field is not None:
            columns.append((index, field))
    return columns


def _build_record(
    columns: Sequence[tuple[int, str]],
    cells: Sequence[str],
    line_number: int,
) -> FrequencyResponseRecord:
    values: dict[str, Any] = {}
    for index, field in columns:
        if index >= len(cells):
            logger.debug("Line %d is missing a value for %s", line_number, field)
            continue
        raw = cells[index]
        if field in _NUMERIC_FIELDS:
            values[field] = _parse_float(raw)
        else:
            values[field] = raw
    return FrequencyResponseRecord(**values)


def _parse_float(raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        return math.nan


__all__ = [
    "CSV_COLUMN_FIELDS",
    "RECORD_EXPORT_KEYS",
    "FrequencyResponseRecord",
    "parse_frequency_response_csv",
    "records_to_rows",
]
