"""JSON schema helpers describing the dashboard data contracts.

These helpers provide lightweight JSON Schema v2020-12 documents for the
parsed measurement records and calculator outputs so other services (the
FastAPI gateway, the dashboard UI, CLI tooling) can consume the same
structures without duplicating them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import MISSING, fields, is_dataclass
from types import UnionType
from typing import Any, Literal, Union, get_args, get_origin, get_type_hints

from .acoustics.heatmap import HeatmapCell
from .acoustics.modes import RoomMode
from .measurements import RECORD_EXPORT_KEYS, FrequencyResponseRecord
from .positions import MeasurementPosition
from .smaart import SmaartMeasurementBundle

SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"


def dataclass_schema(
    cls: type[Any],
    *,
    field_overrides: Mapping[str, Mapping[str, Any]] | None = None,
) -> dict[str, Any]:
    """Return a JSON schema describing the given dataclass."""

    if not is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass")

    overrides: Mapping[str, Mapping[str, Any]] | None = field_overrides or _DATACLASS_OVERRIDES.get(cls)
    type_hints = get_type_hints(cls)

    properties: dict[str, dict[str, Any]] = {}
    required: list[str] = []

    for field in fields(cls):
        field_type = type_hints.get(field.name, field.type)
        schema = _schema_for_type(field_type)
        properties[field.name] = schema
        if field.default is MISSING and field.default_factory is MISSING:
            required.append(field.name)

    schema_doc: dict[str, Any] = {
        "title": cls.__name__,
        "type": "object",
        "additionalProperties": False,
        "properties": properties,
        "required": required,
    }

    if overrides:
        for name, override in overrides.items():
            prop = properties.get(name)
            if not prop:
                continue
            _apply_override(prop, override)

    return schema_doc


def frequency_response_record_schema() -> dict[str, Any]:
    """Return the schema of one row produced by the CSV parser."""

    base = dataclass_schema(FrequencyResponseRecord)
    properties = {
        key: base["properties"][attribute] for attribute, key in RECORD_EXPORT_KEYS
    }
    return {
        "$schema": SCHEMA_DRAFT,
        "title": base["title"],
        "description": "Missing columns are omitted; unparseable numeric cells are NaN.",
        "type": "object",
        "additionalProperties": False,
        "properties": properties,
        "required": ["frequency"],
    }


def smaart_bundle_schema() -> dict[str, Any]:
    """Return the schema of the Smaart log parser output."""

    band_map = {
        "type": "object",
        "propertyNames": {"type": "string", "pattern": "^[0-9]+$"},
        "additionalProperties": {"type": "number"},
    }
    return {
        "$schema": SCHEMA_DRAFT,
        "title": SmaartMeasurementBundle.__name__,
        "type": "object",
        "additionalProperties": False,
        "required": ["rt60_by_freq", "sti_by_freq", "average_sti"],
        "properties": {
            "rt60_by_freq": {**band_map, "description": "RT60 (s) keyed by octave band centre (Hz)."},
            "sti_by_freq": {**band_map, "description": "STI keyed by reference band (Hz)."},
            "average_sti": {"type": "number", "minimum": 0.0},
        },
    }


def room_mode_schema() -> dict[str, Any]:
    schema = dataclass_schema(RoomMode)
    schema["$schema"] = SCHEMA_DRAFT
    return schema


def heatmap_cell_schema() -> dict[str, Any]:
    schema = dataclass_schema(HeatmapCell)
    schema["$schema"] = SCHEMA_DRAFT
    return schema


def measurement_position_schema() -> dict[str, Any]:
    schema = dataclass_schema(MeasurementPosition)
    schema["$schema"] = SCHEMA_DRAFT
    return schema


def dashboard_json_schemas() -> dict[str, dict[str, Any]]:
    """Return a catalog of dashboard schemas keyed by record family."""

    return {
        "frequency_response_record": frequency_response_record_schema(),
        "smaart_bundle": smaart_bundle_schema(),
        "room_mode": room_mode_schema(),
        "heatmap_cell": heatmap_cell_schema(),
        "measurement_position": measurement_position_schema(),
    }


def _schema_for_type(tp: Any) -> dict[str, Any]:
    origin = get_origin(tp)

    if origin is None:
        if tp in (float,):
            return {"type": "number"}
        if tp in (int,):
            return {"type": "integer"}
        if tp in (str,):
            return {"type": "string"}
        if tp in (bool,):
            return {"type": "boolean"}
        if tp is type(None):
            return {"type": "null"}
        if isinstance(tp, type) and is_dataclass(tp):
            return dataclass_schema(tp)
        return {}

    if origin is Literal:
        return {"enum": list(get_args(tp))}

    if origin in (list, Sequence, Iterable):
        args = get_args(tp)
        item_type = args[0] if args else Any
        item_schema = _schema_for_type(item_type)
        return {
            "type": "array",
            "items": item_schema or {},
        }

    if origin in (dict, Mapping):
        args = get_args(tp)
        key_schema = _schema_for_type(args[0]) if args else {"type": "string"}
        value_schema = _schema_for_type(args[1]) if len(args) > 1 else {}
        return {
            "type": "object",
            "propertyNames": key_schema or {"type": "string"},
            "additionalProperties": value_schema or {},
        }

    if origin is Union or origin is UnionType:
        options = [_schema_for_type(arg) for arg in get_args(tp)]
        # Collapse trivial unions like Union[T] back to T
        options = [opt for opt in options if opt]
        if not options:
            return {}
        if len(options) == 1:
            return options[0]
        return {"anyOf": options}

    return {}


def _apply_override(schema: dict[str, Any], override: Mapping[str, Any]) -> None:
    if "anyOf" in schema:
        for option in schema["anyOf"]:
            if option.get("type") == "null":
                continue
            option.update(override)
    else:
        schema.update(override)


_RECORD_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "sti": {"minimum": 0.0, "maximum": 1.0},
    "sti_degradation_pct": {"minimum": 0.0, "maximum": 100.0},
    "color": {"pattern": "^#[0-9a-fA-F]{3,8}$"},
}

_POSITION_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "sti": {"exclusiveMinimum": 0.0, "maximum": 1.0},
    "degradation": {"minimum": 0.0, "maximum": 1.0},
}

_MODE_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "frequency": {"exclusiveMinimum": 0.0, "maximum": 500.0},
}

_HEATMAP_FIELD_OVERRIDES: dict[str, dict[str, Any]] = {
    "degradation": {"minimum": 0.0, "maximum": 1.0},
}

_DATACLASS_OVERRIDES: dict[type[Any], dict[str, dict[str, Any]]] = {
    FrequencyResponseRecord: _RECORD_FIELD_OVERRIDES,
    MeasurementPosition: _POSITION_FIELD_OVERRIDES,
    RoomMode: _MODE_FIELD_OVERRIDES,
    HeatmapCell: _HEATMAP_FIELD_OVERRIDES,
}


__all__ = [
    "dataclass_schema",
    "frequency_response_record_schema",
    "smaart_bundle_schema",
    "room_mode_schema",
    "heatmap_cell_schema",
    "measurement_position_schema",
    "dashboard_json_schemas",
]
