"""FastAPI gateway exposing measurement parsing and room calculators to the dashboard."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from random import Random
from typing import Any, cast

from fastapi import FastAPI, File, Form, HTTPException, Request, Response, UploadFile
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from pydantic import BaseModel, Field

from studio_core import (
    DEFAULT_PANEL_COUNTS,
    ROOM_PROFILES,
    STUDIO_8,
    STUDIO_8_POSITIONS,
    PanelConfig,
    PositionCatalog,
    RoomProfile,
    SmaartMeasurementBundle,
    build_degradation_heatmap,
    dashboard_json_schemas,
    json_safe,
    parse_frequency_response_csv,
    parse_smaart_log,
    points_to_rows,
    records_to_rows,
    room_modes_for,
    sti_color,
    sti_quality_label,
    summarise_treatment,
    synthesize_frequency_response,
)

from .store import VALID_KINDS, DatasetStore

LOG_LEVEL = os.environ.get("STUDIO_LOG_LEVEL", "INFO").upper()
DEFAULT_ROOM = os.environ.get("STUDIO_DEFAULT_ROOM", STUDIO_8.name)

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

ROOM_CATALOGS: dict[str, PositionCatalog] = {STUDIO_8.name: STUDIO_8_POSITIONS}

REQUEST_LATENCY = Histogram(
    "studio_gateway_request_latency_seconds",
    "Latency of gateway HTTP requests",
    ["endpoint", "method"],
)
REQUEST_COUNTER = Counter(
    "studio_gateway_requests_total",
    "Count of gateway HTTP requests",
    ["endpoint", "method", "status"],
)
PARSE_LATENCY = Histogram(
    "studio_gateway_parse_latency_seconds",
    "Time spent parsing uploaded measurement files",
    ["parser"],
)
DATASET_GAUGE = Gauge(
    "studio_gateway_datasets",
    "Number of stored datasets by kind",
    ["kind"],
)

_store = DatasetStore(os.environ.get("STUDIO_GATEWAY_DB_PATH"))


def _record_http_metrics(endpoint: str, method: str, status: str, elapsed_s: float) -> None:
    REQUEST_LATENCY.labels(endpoint=endpoint, method=method).observe(elapsed_s)
    REQUEST_COUNTER.labels(endpoint=endpoint, method=method, status=status).inc()


@contextmanager
def _observe_parse_duration(parser: str) -> Iterator[None]:
    start = time.perf_counter()
    try:
        yield
    finally:
        PARSE_LATENCY.labels(parser=parser).observe(time.perf_counter() - start)


def _update_dataset_metrics(store: DatasetStore) -> None:
    counts = store.kind_counts()
    for kind in VALID_KINDS:
        DATASET_GAUGE.labels(kind=kind).set(float(counts.get(kind, 0)))


def _decode_upload(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def _resolve_room(room: str | None) -> RoomProfile:
    name = room or DEFAULT_ROOM
    profile = ROOM_PROFILES.get(name)
    if profile is None:
        raise HTTPException(status_code=404, detail=f"Unknown room: {name}")
    return profile


def _resolve_catalog(room: str | None) -> PositionCatalog:
    profile = _resolve_room(room)
    catalog = ROOM_CATALOGS.get(profile.name)
    if catalog is None:
        raise HTTPException(status_code=404, detail=f"No measurement positions for room: {profile.name}")
    return catalog


def _csv_upload_payload(text: str) -> dict[str, Any]:
    with _observe_parse_duration("frequency_response_csv"):
        records = parse_frequency_response_csv(text)
    rows = records_to_rows(records)
    return {"count": len(rows), "records": json_safe(rows)}


def _smaart_upload_payload(text: str) -> dict[str, Any]:
    with _observe_parse_duration("smaart_log"):
        bundle = parse_smaart_log(text)
    return json_safe(bundle.to_dict())


def _positions_payload(catalog: PositionCatalog) -> dict[str, Any]:
    positions = []
    for name, position in catalog.items():
        entry = position.to_dict()
        entry.update(
            {
                "name": name,
                "quality": sti_quality_label(position.degradation),
                "color": sti_color(position.degradation),
            }
        )
        positions.append(entry)
    return {"reference": catalog.reference_name, "positions": positions}


def _latest_bundle(room: str) -> SmaartMeasurementBundle:
    records = _store.list_datasets(kind="smaart", room=room, limit=1)
    if not records:
        raise HTTPException(status_code=404, detail=f"No RT60 measurements stored for room: {room}")
    bundle = SmaartMeasurementBundle.from_dict(records[0].payload)
    if not bundle.rt60_by_freq:
        raise HTTPException(status_code=404, detail=f"Latest Smaart log for {room} has no RT60 bands")
    return bundle


def _treatment_payload(
    rt60_by_freq: Mapping[int, float],
    profile: RoomProfile,
    panel_counts: Mapping[str, int],
    current_sti: float | None = None,
) -> dict[str, Any]:
    try:
        panels = PanelConfig(dict(panel_counts))
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    summary = summarise_treatment(rt60_by_freq, profile, panels, current_sti=current_sti)
    return json_safe(summary.to_dict())


class TreatmentRequest(BaseModel):
    room: str | None = Field(None)
    panels: dict[str, int] = Field(default_factory=lambda: dict(DEFAULT_PANEL_COUNTS))
    rt60_by_freq: dict[int, float] | None = Field(None)
    current_sti: float | None = Field(None, gt=0.0, le=1.0)


app = FastAPI(title="Studio Acoustics Gateway", version="0.1.0")


@app.middleware("http")
async def _metrics_middleware(request: Request, call_next: Any) -> Response:
    start = time.perf_counter()
    status = "500"
    try:
        response = await call_next(request)
        status = str(response.status_code)
        return cast(Response, response)
    finally:
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        _record_http_metrics(endpoint, request.method, status, time.perf_counter() - start)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics")
async def metrics() -> Response:
    _update_dataset_metrics(_store)
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.post("/measurements/csv")
async def upload_frequency_response(
    file: UploadFile = File(...),
    room: str | None = Form(None),
) -> dict[str, Any]:
    profile = _resolve_room(room)
    data = await file.read()
    try:
        payload = _csv_upload_payload(_decode_upload(data))
    except Exception as exc:  # pragma: no cover - parser does not raise on content
        raise HTTPException(status_code=400, detail=f"Failed to parse CSV export: {exc}") from exc
    record = _store.create_dataset(profile.name, "csv", payload, filename=file.filename)
    logger.info("Stored CSV dataset %s for %s (%d rows)", record.id, profile.name, payload["count"])
    return {"dataset": record.summary(), **payload}


@app.post("/measurements/smaart")
async def upload_smaart_log(
    file: UploadFile = File(...),
    room: str | None = Form(None),
) -> dict[str, Any]:
    profile = _resolve_room(room)
    data = await file.read()
    try:
        payload = _smaart_upload_payload(_decode_upload(data))
    except Exception as exc:  # pragma: no cover - parser does not raise on content
        raise HTTPException(status_code=400, detail=f"Failed to parse Smaart log: {exc}") from exc
    record = _store.create_dataset(profile.name, "smaart", payload, filename=file.filename)
    logger.info(
        "Stored Smaart dataset %s for %s (%d RT60 bands)",
        record.id,
        profile.name,
        len(payload["rt60_by_freq"]),
    )
    return {"dataset": record.summary(), **payload}


@app.get("/datasets")
async def list_datasets(
    limit: int = 20,
    kind: str | None = None,
    room: str | None = None,
) -> dict[str, Any]:
    kind_filter = None
    if kind is not None:
        kind_filter = kind.lower()
        if kind_filter not in VALID_KINDS:
            raise HTTPException(status_code=400, detail="Invalid kind filter")
    records = _store.list_datasets(limit=limit, kind=kind_filter, room=room)
    return {"datasets": [record.summary() for record in records]}


@app.get("/datasets/stats")
async def dataset_stats() -> dict[str, Any]:
    counts = _store.kind_counts()
    return {"counts": counts, "total": sum(counts.values())}


@app.get("/datasets/{dataset_id}")
async def fetch_dataset(dataset_id: str) -> dict[str, Any]:
    record = _store.get_dataset(dataset_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Dataset not found")
    return record.to_dict()


@app.get("/positions")
async def positions(room: str | None = None) -> dict[str, Any]:
    return _positions_payload(_resolve_catalog(room))


@app.get("/room/modes")
async def room_modes(room: str | None = None) -> dict[str, Any]:
    profile = _resolve_room(room)
    return {
        "room": profile.to_dict(),
        "modes": [mode.to_dict() for mode in room_modes_for(profile)],
    }


@app.get("/frequency-response")
async def frequency_response(room: str | None = None, seed: int | None = None) -> dict[str, Any]:
    catalog = _resolve_catalog(room)
    rng = Random(seed) if seed is not None else None
    points = synthesize_frequency_response(catalog, rng=rng)
    return {"positions": catalog.names(), "points": points_to_rows(points)}


@app.get("/heatmap")
async def heatmap(room: str | None = None) -> dict[str, Any]:
    catalog = _resolve_catalog(room)
    return {"cells": [cell.to_dict() for cell in build_degradation_heatmap(catalog)]}


@app.post("/treatment/predict")
async def predict_treatment(payload: TreatmentRequest) -> dict[str, Any]:
    profile = _resolve_room(payload.room)
    current_sti = payload.current_sti
    if payload.rt60_by_freq is not None:
        rt60 = dict(payload.rt60_by_freq)
    else:
        bundle = _latest_bundle(profile.name)
        rt60 = dict(bundle.rt60_by_freq)
        if current_sti is None and bundle.average_sti > 0.0:
            current_sti = bundle.average_sti
    return _treatment_payload(rt60, profile, payload.panels, current_sti)


@app.get("/schemas")
async def list_schemas() -> dict[str, Any]:
    return {"schemas": dashboard_json_schemas()}


@app.get("/schemas/{family}")
async def fetch_schema(family: str) -> dict[str, Any]:
    catalog = dashboard_json_schemas()
    key = family.lower()
    schema = catalog.get(key)
    if schema is None:
        raise HTTPException(status_code=404, detail="Schema family not found")
    return {"family": key, "schema": schema}


__all__ = [
    "app",
    "TreatmentRequest",
    "ROOM_CATALOGS",
]
