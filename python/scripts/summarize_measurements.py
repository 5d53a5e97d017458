"""CLI for summarising studio measurement exports and room calculators."""

from __future__ import annotations

import argparse
import json
import logging
import math
import pathlib
import sys
from collections.abc import Mapping, Sequence
from random import Random
from typing import Any

SCRIPT_PATH = pathlib.Path(__file__).resolve()
PYTHON_ROOT = SCRIPT_PATH.parent.parent
PROJECT_ROOT = PYTHON_ROOT.parent

for candidate in (PROJECT_ROOT, PYTHON_ROOT):
    if str(candidate) not in sys.path:
        sys.path.insert(0, str(candidate))

from studio_core import (  # noqa: E402 - path adjusted above
    PANEL_KINDS,
    ROOM_PROFILES,
    STUDIO_8,
    STUDIO_8_POSITIONS,
    FrequencyResponseRecord,
    PanelConfig,
    SmaartMeasurementBundle,
    build_degradation_heatmap,
    json_safe,
    parse_frequency_response_csv,
    parse_smaart_log,
    points_to_rows,
    records_to_csv,
    records_to_rows,
    room_modes_for,
    summarise_treatment,
    synthesize_frequency_response,
)


def _parse_panels(raw: str) -> PanelConfig:
    """Parse ``2_inch=4,11_inch=2`` into a panel configuration over the defaults."""

    config = PanelConfig.defaults()
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        kind, sep, count = chunk.partition("=")
        if not sep:
            raise ValueError(f"Panel entry must look like kind=count: {chunk}")
        config = config.with_count(kind.strip(), int(count))
    return config


def _format_float(value: float | None, digits: int = 2) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return "-"
    return f"{value:.{digits}f}"


def _csv_summary(records: Sequence[FrequencyResponseRecord]) -> dict[str, Any]:
    frequencies = [r.frequency_hz for r in records if not math.isnan(r.frequency_hz)]
    positions = sorted({r.position for r in records if r.position})
    return {
        "rows": len(records),
        "positions": positions,
        "min_frequency_hz": min(frequencies) if frequencies else None,
        "max_frequency_hz": max(frequencies) if frequencies else None,
    }


def _read_measurement(path: pathlib.Path) -> str:
    """Read an export as UTF-8 (BOM stripped), falling back to latin-1."""

    data = path.read_bytes()
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def _write_csv(path: pathlib.Path | None, rows: Sequence[Mapping[str, Any]]) -> None:
    if path is None:
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(records_to_csv(rows), encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--csv", type=pathlib.Path, help="Path to a frequency-response CSV export")
    parser.add_argument("--smaart", type=pathlib.Path, help="Path to a Smaart room analysis log")
    parser.add_argument(
        "--room",
        choices=sorted(ROOM_PROFILES),
        default=STUDIO_8.name,
        help=f"Room profile used by the calculators (default: {STUDIO_8.name})",
    )
    parser.add_argument(
        "--panels",
        help=f"Panel counts for the treatment prediction, e.g. 2_inch=4 (kinds: {', '.join(PANEL_KINDS)})",
    )
    parser.add_argument("--seed", type=int, help="Seed for the synthetic frequency response")
    parser.add_argument("--json", action="store_true", help="Emit machine-readable summary to stdout")
    parser.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    parser.add_argument("--modes-output", type=pathlib.Path, help="Write room modes to a CSV file")
    parser.add_argument("--heatmap-output", type=pathlib.Path, help="Write the degradation heatmap to a CSV file")
    parser.add_argument(
        "--response-output",
        type=pathlib.Path,
        help="Write the synthetic per-position frequency response to a CSV file",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging from the parsers")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    for path in (args.csv, args.smaart):
        if path is not None and not path.exists():
            parser.error(f"Measurement file not found: {path}")

    panels = None
    if args.panels is not None:
        try:
            panels = _parse_panels(args.panels)
        except ValueError as exc:
            parser.error(str(exc))

    profile = ROOM_PROFILES[args.room]
    catalog = STUDIO_8_POSITIONS

    records: list[FrequencyResponseRecord] = []
    if args.csv is not None:
        records = parse_frequency_response_csv(_read_measurement(args.csv))

    bundle: SmaartMeasurementBundle | None = None
    if args.smaart is not None:
        bundle = parse_smaart_log(_read_measurement(args.smaart))

    modes = room_modes_for(profile)
    _write_csv(args.modes_output, [mode.to_dict() for mode in modes])
    _write_csv(args.heatmap_output, [cell.to_dict() for cell in build_degradation_heatmap(catalog)])
    if args.response_output is not None:
        rng = Random(args.seed) if args.seed is not None else None
        points = synthesize_frequency_response(catalog, rng=rng)
        _write_csv(args.response_output, points_to_rows(points))

    treatment = None
    if bundle is not None and bundle.rt60_by_freq:
        treatment = summarise_treatment(
            bundle.rt60_by_freq,
            profile,
            panels,
            current_sti=bundle.average_sti if bundle.average_sti > 0.0 else None,
        )

    if args.json:
        payload: dict[str, Any] = {
            "room": profile.to_dict(),
            "modes": [mode.to_dict() for mode in modes],
        }
        if args.csv is not None:
            payload["csv"] = {**_csv_summary(records), "records": records_to_rows(records)}
        if bundle is not None:
            payload["smaart"] = bundle.to_dict()
        if treatment is not None:
            payload["treatment"] = treatment.to_dict()
        print(json.dumps(json_safe(payload), indent=2 if args.pretty else None, allow_nan=False))
        return 0

    print(f"Room: {profile.name} ({profile.length_ft} x {profile.width_ft} x {profile.height_ft} ft)")
    print(f"Room modes below 500 Hz: {len(modes)}")
    if modes:
        lowest = modes[0]
        print(f"Lowest mode: {lowest.label} at {_format_float(lowest.frequency, 1)} Hz")
    if args.csv is not None:
        summary = _csv_summary(records)
        print(f"CSV rows: {summary['rows']}")
        print(f"Positions: {', '.join(summary['positions']) or '-'}")
        print(
            "Frequency range: "
            f"{_format_float(summary['min_frequency_hz'], 1)} Hz"
            f" -> {_format_float(summary['max_frequency_hz'], 1)} Hz"
        )
    if bundle is not None:
        print(f"RT60 bands: {len(bundle.rt60_by_freq)}")
        for band, value in bundle.rt60_by_freq.items():
            print(f"  {band} Hz: {_format_float(value)} s")
        print(f"Average STI: {_format_float(bundle.average_sti)}")
    if treatment is not None:
        print(
            f"Treatment: {treatment.panels.total_panels} panels, "
            f"${treatment.panels.total_cost:,.0f}"
        )
        for band, value in treatment.predicted_rt60.items():
            print(f"  {band} Hz: {_format_float(treatment.current_rt60[band])} s -> {_format_float(value)} s")
        print(
            "Average RT60: "
            f"{_format_float(treatment.current_average_rt60)} s -> {_format_float(treatment.predicted_average_rt60)} s"
            f" ({_format_float(treatment.rt60_improvement_pct, 0)}% improvement)"
        )
        if treatment.current_sti is not None:
            print(f"STI: {_format_float(treatment.current_sti)} -> {_format_float(treatment.predicted_sti)}")
        met = ", ".join(str(band) for band in treatment.bands_meeting_target) or "none"
        print(f"Bands at or below {treatment.target_rt60_s:g} s: {met}")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
