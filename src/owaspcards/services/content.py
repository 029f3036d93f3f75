from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from owaspcards.engine.types import FACE_TYPES, CardCatalog, FaceType, OwaspControl, OwaspRisk


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.absolute_path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _parse_entries(raw: object, key: str) -> dict[int, tuple[str, str, str]]:
    if not isinstance(raw, list):
        raise ContentError(f"catalog.{key} must be a list")
    out: dict[int, tuple[str, str, str]] = {}
    for item in raw:
        if not isinstance(item, dict):
            continue
        value = _require_int(item, "value")
        if value in out:
            raise ContentError(f"Duplicate value {value} in catalog.{key}")
        out[value] = (_require_str(item, "id"), _require_str(item, "name"), _require_str(item, "description"))
    missing = sorted(set(range(1, 11)) - set(out))
    if missing:
        raise ContentError(f"catalog.{key} is missing values: {missing}")
    return out


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_catalog(self) -> CardCatalog:
        path = self._data_dir / "catalog.json"
        schema = _load_json(self._schema_dir / "catalog.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError("catalog.json must be an object")

        risks = {
            value: OwaspRisk(id=rid, name=name, description=desc)
            for value, (rid, name, desc) in _parse_entries(raw.get("risks"), "risks").items()
        }
        controls = {
            value: OwaspControl(id=cid, name=name, description=desc)
            for value, (cid, name, desc) in _parse_entries(raw.get("controls"), "controls").items()
        }

        raw_assets = raw.get("assets")
        if not isinstance(raw_assets, dict):
            raise ContentError("catalog.assets must be an object")
        asset_names: dict[FaceType, str] = {}
        for face in FACE_TYPES:
            asset_names[face] = _require_str(raw_assets, face)

        return CardCatalog(risks=risks, controls=controls, asset_names=asset_names)

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_catalog()
