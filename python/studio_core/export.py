"""CSV text and filenames for dashboard downloads."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any

logger = logging.getLogger(__name__)

CSV_MIME_TYPE = "text/csv;charset=utf-8;"


def json_safe(value: Any) -> Any:
    """Replace NaN and infinities with ``None`` so the value encodes as strict JSON."""

    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Mapping):
        return {key: json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    return value


def records_to_csv(rows: Sequence[Mapping[str, Any]]) -> str:
    """Render ``rows`` as CSV text using the first row's keys as the header.

    String values containing a comma are wrapped in double quotes; embedded
    quotes are not escaped.
    """

    if not rows:
        logger.warning("No data to export")
        return ""

    headers = list(rows[0].keys())
    lines = [",".join(headers)]
    for row in rows:
        lines.append(",".join(_format_cell(row.get(header)) for header in headers))
    return "\n".join(lines)


def generate_filename(prefix: str, extension: str, *, today: date | None = None) -> str:
    stamp = (today or date.today()).isoformat()
    return f"{prefix}_{stamp}.{extension}"


def _format_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, str):
        if "," in value:
            return f'"{value}"'
        return value
    return str(value)


__all__ = ["CSV_MIME_TYPE", "records_to_csv", "generate_filename", "json_safe"]
