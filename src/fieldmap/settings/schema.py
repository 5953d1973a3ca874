"""Schema helpers for the map console settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import (
    DEFAULT_API_BASE_URL,
    DEFAULT_API_TIMEOUT_MS,
    DEFAULT_DRAWING_COLOR,
    FETCH_DEBOUNCE_MS,
    INITIAL_POSITION,
    MAX_ZOOM,
    MIN_ZOOM,
)

_HEX_COLOR = "^#(?:[0-9a-fA-F]{3}){1,2}$"

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "fieldmap/settings.schema.json",
    "type": "object",
    "required": ["schema", "api", "drawing", "map"],
    "properties": {
        "schema": {"const": "fieldmap/settings@1"},
        "api": {
            "type": "object",
            "properties": {
                "base_url": {"type": "string", "minLength": 1},
                "timeout_ms": {"type": "integer", "minimum": 0},
            },
            "additionalProperties": True,
        },
        "drawing": {
            "type": "object",
            "properties": {
                "color": {"type": "string", "pattern": _HEX_COLOR},
                "category": {"type": ["string", "null"]},
            },
            "additionalProperties": True,
        },
        "map": {
            "type": "object",
            "properties": {
                "clustering_enabled": {"type": "boolean"},
                "fetch_debounce_ms": {"type": "integer", "minimum": 0},
                "initial_position": {
                    "type": "object",
                    "required": ["lat", "lng", "zoom"],
                    "properties": {
                        "lat": {"type": "number", "minimum": -90, "maximum": 90},
                        "lng": {"type": "number", "minimum": -180, "maximum": 180},
                        "zoom": {"type": "number", "minimum": MIN_ZOOM, "maximum": MAX_ZOOM},
                    },
                },
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "fieldmap/settings@1",
    "api": {
        "base_url": DEFAULT_API_BASE_URL,
        "timeout_ms": DEFAULT_API_TIMEOUT_MS,
    },
    "drawing": {
        "color": DEFAULT_DRAWING_COLOR,
        "category": None,
    },
    "map": {
        "clustering_enabled": True,
        "fetch_debounce_ms": FETCH_DEBOUNCE_MS,
        "initial_position": dict(INITIAL_POSITION),
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)


def _merge(target: dict[str, Any], source: dict[str, Any]) -> None:
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            _merge(target[key], value)
            continue
        target[key] = value


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        _merge(merged, deepcopy(data))
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
