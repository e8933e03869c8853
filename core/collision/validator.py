"""
Layout Collision Validation

One-shot audit of a whole layout: every pair of equipment footprints is
checked for overlap before the layout is persisted. Footprints are treated as
axis-aligned rectangles; orientation is carried but ignored.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Sequence

from loguru import logger

from core.collision.catalog import EquipmentRecord
from core.exceptions import EquipmentNotFoundError


@dataclass(frozen=True)
class Rectangle:
    x: float
    y: float
    width: float
    depth: float
    rotation: float = 0.0

    def bounds(self) -> tuple[float, float, float, float]:
        """(left, right, top, bottom) with rotation ignored."""
        return (
            self.x - self.width / 2.0,
            self.x + self.width / 2.0,
            self.y - self.depth / 2.0,
            self.y + self.depth / 2.0,
        )


@dataclass(frozen=True)
class RectangleOverlap:
    overlaps: bool
    area: float


@dataclass(frozen=True)
class EquipmentPosition:
    equipment_id: int
    x: float
    y: float
    orientation: float = 0.0
    width_ft: float | None = None
    depth_ft: float | None = None


@dataclass(frozen=True)
class CollisionPair:
    equipment1_id: int
    equipment2_id: int
    overlap_area: float
    equipment1_name: str
    equipment2_name: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "equipment1Id": self.equipment1_id,
            "equipment2Id": self.equipment2_id,
            "overlapArea": self.overlap_area,
            "equipment1Name": self.equipment1_name,
            "equipment2Name": self.equipment2_name,
        }


@dataclass
class CollisionValidationResult:
    is_valid: bool
    has_collisions: bool
    collision_count: int
    collisions: list[CollisionPair] = field(default_factory=list)
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "isValid": self.is_valid,
            "hasCollisions": self.has_collisions,
            "collisionCount": self.collision_count,
            "collisions": [pair.to_dict() for pair in self.collisions],
            "message": self.message,
        }


def check_rectangle_overlap(rect1: Rectangle, rect2: Rectangle) -> RectangleOverlap:
    """Overlap test and intersection area for two axis-aligned rectangles.

    Rectangles that only touch along an edge overlap with zero area.
    """
    l1, r1, t1, b1 = rect1.bounds()
    l2, r2, t2, b2 = rect2.bounds()

    if r1 < l2 or l1 > r2 or b1 < t2 or t1 > b2:
        return RectangleOverlap(overlaps=False, area=0.0)

    overlap_width = min(r1, r2) - max(l1, l2)
    overlap_depth = min(b1, b2) - max(t1, t2)
    return RectangleOverlap(overlaps=True, area=overlap_width * overlap_depth)


def _resolve(
    positions: Sequence[EquipmentPosition],
    catalog: Mapping[int, EquipmentRecord],
) -> list[tuple[EquipmentPosition, EquipmentRecord]]:
    resolved = []
    for position in positions:
        record = catalog.get(position.equipment_id)
        if record is None:
            raise EquipmentNotFoundError(
                f"Equipment {position.equipment_id} not found",
                {"equipment_id": str(position.equipment_id)},
            )
        resolved.append((position, record))
    return resolved


def validate_layout(
    positions: Sequence[EquipmentPosition],
    catalog: Mapping[int, EquipmentRecord],
) -> CollisionValidationResult:
    """
    Check every pair of placed equipment for footprint overlap.

    Footprint sizes come from the catalog record, not from the position.

    Args:
        positions: Placed equipment, centres in feet.
        catalog: Equipment lookup by id.

    Returns:
        CollisionValidationResult with one entry per overlapping pair.

    Raises:
        EquipmentNotFoundError: If any position references an id missing from
            the catalog. No partial report is produced.
    """
    resolved = _resolve(positions, catalog)
    collisions: list[CollisionPair] = []

    for i in range(len(resolved)):
        pos1, eq1 = resolved[i]
        rect1 = Rectangle(x=pos1.x, y=pos1.y, width=eq1.width_ft, depth=eq1.depth_ft, rotation=pos1.orientation)
        for j in range(i + 1, len(resolved)):
            pos2, eq2 = resolved[j]
            rect2 = Rectangle(x=pos2.x, y=pos2.y, width=eq2.width_ft, depth=eq2.depth_ft, rotation=pos2.orientation)
            overlap = check_rectangle_overlap(rect1, rect2)
            if overlap.overlaps:
                collisions.append(
                    CollisionPair(
                        equipment1_id=pos1.equipment_id,
                        equipment2_id=pos2.equipment_id,
                        overlap_area=overlap.area,
                        equipment1_name=eq1.name,
                        equipment2_name=eq2.name,
                    )
                )

    count = len(collisions)
    if count:
        logger.info("Layout audit found {count} collision(s) among {total} item(s)", count=count, total=len(positions))
    return CollisionValidationResult(
        is_valid=count == 0,
        has_collisions=count > 0,
        collision_count=count,
        collisions=collisions,
        message="Layout is collision-free" if count == 0 else f"Found {count} collision(s)",
    )


def position_to_dict(position: EquipmentPosition) -> dict[str, Any]:
    payload = asdict(position)
    return {
        "equipmentId": payload["equipment_id"],
        "x": payload["x"],
        "y": payload["y"],
        "orientation": payload["orientation"],
        "widthFt": payload["width_ft"],
        "depthFt": payload["depth_ft"],
    }


def position_from_dict(payload: Mapping[str, Any]) -> EquipmentPosition:
    return EquipmentPosition(
        equipment_id=int(payload["equipmentId"]),
        x=float(payload["x"]),
        y=float(payload["y"]),
        orientation=float(payload.get("orientation", 0.0)),
        width_ft=payload.get("widthFt"),
        depth_ft=payload.get("depthFt"),
    )


__all__ = [
    "Rectangle",
    "RectangleOverlap",
    "EquipmentPosition",
    "CollisionPair",
    "CollisionValidationResult",
    "check_rectangle_overlap",
    "validate_layout",
    "position_to_dict",
    "position_from_dict",
]
