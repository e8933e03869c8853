"""Equipment collision detection: incremental engine and whole-layout audit."""

from __future__ import annotations

from core.collision.catalog import EquipmentCatalog, EquipmentRecord
from core.collision.detector import CollisionDetector, CollisionResult, Dimensions
from core.collision.validator import (
    CollisionPair,
    CollisionValidationResult,
    EquipmentPosition,
    Rectangle,
    check_rectangle_overlap,
    validate_layout,
)

__all__ = [
    "EquipmentCatalog",
    "EquipmentRecord",
    "CollisionDetector",
    "CollisionResult",
    "Dimensions",
    "CollisionPair",
    "CollisionValidationResult",
    "EquipmentPosition",
    "Rectangle",
    "check_rectangle_overlap",
    "validate_layout",
]
