from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest

from owaspcards.paths import get_paths
from owaspcards.services.content import ContentError, ContentService


def test_content_schemas_validate() -> None:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    content.validate_all()


def test_catalog_maps_every_value() -> None:
    paths = get_paths()
    catalog = ContentService(paths.data_dir, paths.schema_dir).load_catalog()
    assert sorted(catalog.risks) == list(range(1, 11))
    assert sorted(catalog.controls) == list(range(1, 11))
    assert catalog.risk(3).name == "Injection"
    assert catalog.control(5).id == "C5"
    assert catalog.asset_name("queen") == "Database Server"


def _copy_content(tmp_path: Path) -> tuple[Path, Path]:
    paths = get_paths()
    data_dir = tmp_path / "data"
    shutil.copytree(paths.data_dir, data_dir)
    return data_dir, data_dir / "schemas"


def test_schema_violation_is_reported(tmp_path: Path) -> None:
    data_dir, schema_dir = _copy_content(tmp_path)
    catalog_path = data_dir / "catalog.json"
    raw = json.loads(catalog_path.read_text(encoding="utf-8"))
    raw["risks"][0]["value"] = 11
    catalog_path.write_text(json.dumps(raw), encoding="utf-8")

    with pytest.raises(ContentError) as info:
        ContentService(data_dir, schema_dir).load_catalog()
    assert "Schema validation failed" in str(info.value)


def test_missing_and_invalid_files(tmp_path: Path) -> None:
    data_dir, schema_dir = _copy_content(tmp_path)
    (data_dir / "catalog.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ContentError, match="Invalid JSON"):
        ContentService(data_dir, schema_dir).load_catalog()

    (data_dir / "catalog.json").unlink()
    with pytest.raises(ContentError, match="Missing content file"):
        ContentService(data_dir, schema_dir).load_catalog()


def test_duplicate_values_rejected(tmp_path: Path) -> None:
    data_dir, schema_dir = _copy_content(tmp_path)
    catalog_path = data_dir / "catalog.json"
    raw = json.loads(catalog_path.read_text(encoding="utf-8"))
    raw["controls"][1]["value"] = 1
    catalog_path.write_text(json.dumps(raw), encoding="utf-8")

    with pytest.raises(ContentError, match="Duplicate value 1"):
        ContentService(data_dir, schema_dir).load_catalog()
