"""Persistence helpers for constellation documents and editor settings."""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from canvas.view import MAX_ZOOM, MIN_ZOOM
from models.document import DEFAULT_NAME, SCHEMA_VERSION, Document
from models.settings import SETTINGS_VERSION, Settings
from models.version import get_app_version
from models.world import Time_Layer, clamp

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_NAME = "constellation.settings"
DOCUMENT_SUFFIX = ".json"

# key spellings accepted on load; the first of each pair is the one written
_LAYERS_KEYS = ("layers", "timeLayers")
_ACTIVE_KEYS = ("activeLayer", "currentLayer")
_LEGACY_NOTES_KEYS = ("sessionNotes", "notes")


class Parse_Error(ValueError):
    """A persisted document could not be decoded. Nothing was applied."""


def default_settings_path() -> Path:
    """Return the default per-user settings path."""
    return Path.home() / DEFAULT_SETTINGS_NAME


def _first(dic: Mapping[str, Any], keys: tuple[str, ...], default: Any = None) -> Any:
    for k in keys:
        if k in dic:
            return dic[k]
    return default


def _is_layered(dic: Mapping[str, Any]) -> bool:
    return any(k in dic for k in _LAYERS_KEYS)


def _lift_layers(dic: Mapping[str, Any]) -> tuple[dict[str, Any], str]:
    raw_layers = _first(dic, _LAYERS_KEYS)
    if raw_layers is None:
        raw_layers = {}
    if not isinstance(raw_layers, Mapping):
        raise Parse_Error("'layers' must be an object")
    layers = {t.value: raw_layers[t.value] for t in Time_Layer if t.value in raw_layers}
    active = _first(dic, _ACTIVE_KEYS, Time_Layer.present.value)
    if not isinstance(active, str) or active not in Time_Layer.__members__:
        logger.warning("unknown active layer %r, using present", active)
        active = Time_Layer.present.value
    return layers, active


def _lift_legacy(dic: Mapping[str, Any]) -> tuple[dict[str, Any], str]:
    present = {
        "members": dic.get("members") or [],
        "connections": dic.get("connections") or [],
        "notes": _first(dic, _LEGACY_NOTES_KEYS, "") or "",
    }
    return {Time_Layer.present.value: present}, Time_Layer.present.value


def _number(value: Any, default: float) -> float:
    """Finite number or `default`; JSON NaN/Infinity count as missing."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return default
    return float(value)


def _migrate(data: Mapping[str, Any]) -> dict[str, Any]:
    """Lift either accepted shape to the current Document layout."""
    if _is_layered(data):
        layers, active = _lift_layers(data)
    else:
        logger.info("loading legacy single-layer document")
        layers, active = _lift_legacy(data)

    pan = data.get("pan")
    if not isinstance(pan, Mapping):
        pan = {}

    return {
        "name": data.get("name") or DEFAULT_NAME,
        "layers": layers,
        "activeLayer": active,
        "pan": {"x": _number(pan.get("x"), 0.0), "y": _number(pan.get("y"), 0.0)},
        "zoom": clamp(_number(data.get("zoom"), 1.0), MIN_ZOOM, MAX_ZOOM),
    }


def parse_document(raw: str | bytes | Mapping[str, Any]) -> Document:
    """Decode a document from JSON text or an already-parsed mapping.

    Args;
        raw: JSON text/bytes, or a mapping.

    Returns;
        The decoded Document.

    Raises;
        Parse_Error: The input is not a valid document of either shape.
    """
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as xcp:
            raise Parse_Error(f"not valid JSON: {xcp}") from xcp
    if not isinstance(raw, Mapping):
        raise Parse_Error(f"expected a JSON object, got {type(raw).__name__}")
    try:
        return Document.model_validate(_migrate(raw))
    except ValidationError as xcp:
        raise Parse_Error(f"invalid document: {xcp.error_count()} error(s); {xcp.errors()[0]['msg']}") from xcp


def document_to_dict(doc: Document) -> dict[str, Any]:
    """Current-schema mapping; legacy shapes are never written."""
    payload = doc.model_dump(mode="json", by_alias=True)
    payload["version"] = SCHEMA_VERSION
    payload["appVersion"] = get_app_version()
    return payload


def document_to_json(doc: Document, *, indent: int | None = 2) -> str:
    return json.dumps(document_to_dict(doc), indent=indent, ensure_ascii=False)


def dict_to_settings(dic: dict[str, Any]) -> Settings:
    """Coerce a settings dictionary into Settings, migrating if needed."""
    v = int(dic.get("version", 0))
    if v != SETTINGS_VERSION:
        dic = _migrate_settings(dic, v)
    return Settings.model_validate(dic)


class IO:
    """Read/write documents and settings to disk."""

    @staticmethod
    def save_document(doc: Document, path: Path) -> None:
        """Write a document to disk at the given path."""
        path.write_text(document_to_json(doc), encoding="utf-8")
        logger.info("saved %s", path)

    @staticmethod
    def load_document(path: Path) -> Document:
        """Load a document from disk.

        Raises;
            Parse_Error: The file content is not a valid document.
            OSError: The file could not be read.
        """
        doc = parse_document(path.read_bytes())
        logger.info("loaded %s (%s)", path, doc.name)
        return doc

    @staticmethod
    def save_settings(settings: Settings, path: Path | None = None) -> Path:
        """Write settings to disk and return the written path."""
        target = path or default_settings_path()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(settings.model_dump_json(indent=4, exclude_none=True), encoding="utf-8")
        return target

    @staticmethod
    def load_settings(path: Path | None = None) -> Settings:
        """Load settings, returning defaults when the file is missing."""
        target = path or default_settings_path()
        raw = json.loads(target.read_text(encoding="utf-8")) if target.exists() else {"version": SETTINGS_VERSION}
        return dict_to_settings(raw)


def _migrate_settings(data: dict[str, Any], from_version: int) -> dict[str, Any]:
    dic = dict(data)
    dic["version"] = SETTINGS_VERSION
    return dic
