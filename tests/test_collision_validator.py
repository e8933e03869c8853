from __future__ import annotations

import pytest

from core.collision.catalog import EquipmentCatalog
from core.collision.validator import (
    EquipmentPosition,
    Rectangle,
    check_rectangle_overlap,
    validate_layout,
)
from core.exceptions import EquipmentNotFoundError, ReferenceNotFoundError


def test_overlap_area_for_offset_squares() -> None:
    result = check_rectangle_overlap(
        Rectangle(x=0.0, y=0.0, width=4.0, depth=4.0),
        Rectangle(x=2.0, y=0.0, width=4.0, depth=4.0),
    )
    assert result.overlaps
    assert result.area == pytest.approx(8.0)


def test_separated_rectangles_do_not_overlap() -> None:
    result = check_rectangle_overlap(
        Rectangle(x=0.0, y=0.0, width=4.0, depth=4.0),
        Rectangle(x=0.0, y=10.0, width=4.0, depth=4.0),
    )
    assert not result.overlaps
    assert result.area == 0.0


def test_touching_edges_overlap_with_zero_area() -> None:
    result = check_rectangle_overlap(
        Rectangle(x=0.0, y=0.0, width=4.0, depth=4.0),
        Rectangle(x=4.0, y=0.0, width=4.0, depth=4.0),
    )
    assert result.overlaps
    assert result.area == pytest.approx(0.0)


def test_rotation_is_ignored() -> None:
    straight = check_rectangle_overlap(
        Rectangle(x=0.0, y=0.0, width=8.0, depth=1.0),
        Rectangle(x=0.0, y=3.0, width=1.0, depth=1.0),
    )
    rotated = check_rectangle_overlap(
        Rectangle(x=0.0, y=0.0, width=8.0, depth=1.0, rotation=90.0),
        Rectangle(x=0.0, y=3.0, width=1.0, depth=1.0),
    )
    assert straight == rotated
    assert not rotated.overlaps


def test_empty_layout_is_valid(catalog: EquipmentCatalog) -> None:
    result = validate_layout([], catalog)
    assert result.is_valid
    assert not result.has_collisions
    assert result.collision_count == 0
    assert result.collisions == []
    assert result.message == "Layout is collision-free"


def test_layout_reports_pairs_with_names(catalog: EquipmentCatalog) -> None:
    positions = [
        EquipmentPosition(equipment_id=1, x=0.0, y=0.0),
        EquipmentPosition(equipment_id=2, x=2.0, y=0.0, orientation=45.0),
        EquipmentPosition(equipment_id=3, x=30.0, y=30.0),
    ]
    result = validate_layout(positions, catalog)

    assert not result.is_valid
    assert result.has_collisions
    assert result.collision_count == 1
    assert result.message == "Found 1 collision(s)"
    pair = result.collisions[0]
    assert (pair.equipment1_id, pair.equipment2_id) == (1, 2)
    assert (pair.equipment1_name, pair.equipment2_name) == ("Table Saw", "Jointer")
    assert pair.overlap_area == pytest.approx(8.0)


def test_catalog_dimensions_are_authoritative(catalog: EquipmentCatalog) -> None:
    # Position widths are tiny, catalog footprints are 4x4
    positions = [
        EquipmentPosition(equipment_id=1, x=0.0, y=0.0, width_ft=0.1, depth_ft=0.1),
        EquipmentPosition(equipment_id=2, x=3.0, y=0.0, width_ft=0.1, depth_ft=0.1),
    ]
    assert validate_layout(positions, catalog).collision_count == 1


def test_unknown_equipment_fails_whole_call(catalog: EquipmentCatalog) -> None:
    positions = [
        EquipmentPosition(equipment_id=1, x=0.0, y=0.0),
        EquipmentPosition(equipment_id=2, x=0.0, y=0.0),
        EquipmentPosition(equipment_id=99, x=50.0, y=50.0),
    ]
    with pytest.raises(EquipmentNotFoundError) as excinfo:
        validate_layout(positions, catalog)

    assert isinstance(excinfo.value, ReferenceNotFoundError)
    assert excinfo.value.details == {"equipment_id": "99"}
    assert "99" in excinfo.value.message


def test_plain_mapping_works_as_catalog(catalog: EquipmentCatalog) -> None:
    lookup = dict(catalog)
    positions = [EquipmentPosition(equipment_id=3, x=0.0, y=0.0), EquipmentPosition(equipment_id=3, x=1.0, y=1.0)]
    result = validate_layout(positions, lookup)
    assert result.collision_count == 1
    assert result.collisions[0].overlap_area == pytest.approx(1.0)


def test_result_serialises_to_report(catalog: EquipmentCatalog) -> None:
    positions = [EquipmentPosition(equipment_id=1, x=0.0, y=0.0), EquipmentPosition(equipment_id=2, x=2.0, y=0.0)]
    payload = validate_layout(positions, catalog).to_dict()
    assert payload["isValid"] is False
    assert payload["collisions"][0] == {
        "equipment1Id": 1,
        "equipment2Id": 2,
        "overlapArea": 8.0,
        "equipment1Name": "Table Saw",
        "equipment2Name": "Jointer",
    }
