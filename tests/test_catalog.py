from __future__ import annotations

from pathlib import Path

import pytest

from core.collision.catalog import EquipmentCatalog, EquipmentRecord
from core.exceptions import ConfigurationError
from core.settings import resolve_path


def test_load_catalog_from_yaml(tmp_path) -> None:
    path = tmp_path / "equipment.yaml"
    path.write_text(
        "equipment:\n"
        "  - {id: 10, name: Planer, width_ft: 3, depth_ft: 2.5}\n"
        "  - {id: 11, name: Lathe, width_ft: 6, depth_ft: 2}\n",
        encoding="utf-8",
    )
    catalog = EquipmentCatalog.load(path)

    assert len(catalog) == 2
    assert catalog[10] == EquipmentRecord(id=10, name="Planer", width_ft=3.0, depth_ft=2.5)
    assert catalog.get(12) is None
    assert list(catalog) == [10, 11]


def test_missing_catalog_file(tmp_path) -> None:
    with pytest.raises(ConfigurationError):
        EquipmentCatalog.load(tmp_path / "nope.yaml")


def test_invalid_catalog_entry() -> None:
    with pytest.raises(ConfigurationError):
        EquipmentCatalog.from_payload({"equipment": [{"id": 1, "name": "Saw"}]})


def test_bundled_catalog_loads() -> None:
    catalog = EquipmentCatalog.load(resolve_path(Path("config/equipment.yaml")))
    assert len(catalog) > 0
    assert all(record.width_ft > 0 and record.depth_ft > 0 for record in catalog.values())
