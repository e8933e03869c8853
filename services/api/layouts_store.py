from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from core.collision.validator import (
    CollisionValidationResult,
    EquipmentPosition,
    position_from_dict,
    position_to_dict,
)
from core.exceptions import LayoutNotFoundError, StorageError


@dataclass
class Layout:
    id: int
    name: str
    equipment_positions: list[EquipmentPosition] = field(default_factory=list)
    has_collisions: bool = False
    collision_count: int = 0
    collision_data: list[dict[str, Any]] = field(default_factory=list)
    last_collision_check: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "equipmentPositions": [position_to_dict(p) for p in self.equipment_positions],
            "hasCollisions": self.has_collisions,
            "collisionCount": self.collision_count,
            "collisionData": self.collision_data,
            "lastCollisionCheck": self.last_collision_check.isoformat() if self.last_collision_check else None,
        }


class FileLayoutStore:
    """One JSON file per layout under ``root``."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def _layout_path(self, layout_id: int) -> Path:
        return self.root / f"{layout_id}.json"

    def _next_id(self) -> int:
        ids = [int(path.stem) for path in self.root.glob("*.json") if path.stem.isdigit()]
        return max(ids, default=0) + 1

    def create(self, name: str, positions: list[EquipmentPosition] | None = None) -> Layout:
        layout = Layout(id=self._next_id(), name=name, equipment_positions=list(positions or []))
        self.save(layout)
        return layout

    def save(self, layout: Layout) -> None:
        path = self._layout_path(layout.id)
        try:
            path.write_text(json.dumps(layout.to_dict()), encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"Failed to write layout {layout.id}", {"path": str(path)}) from exc

    def load(self, layout_id: int) -> Layout | None:
        path = self._layout_path(layout_id)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            last_check = data.get("lastCollisionCheck")
            return Layout(
                id=int(data["id"]),
                name=data.get("name", ""),
                equipment_positions=[position_from_dict(p) for p in data.get("equipmentPositions", [])],
                has_collisions=bool(data.get("hasCollisions", False)),
                collision_count=int(data.get("collisionCount", 0)),
                collision_data=list(data.get("collisionData", [])),
                last_collision_check=datetime.fromisoformat(last_check) if last_check else None,
            )
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise StorageError(f"Failed to read layout {layout_id}", {"path": str(path)}) from exc

    def get(self, layout_id: int) -> Layout:
        layout = self.load(layout_id)
        if layout is None:
            raise LayoutNotFoundError("Layout not found", {"layout_id": str(layout_id)})
        return layout

    def record_collision_check(self, layout_id: int, result: CollisionValidationResult) -> Layout:
        """Persist the collision summary of ``result`` on the layout."""
        layout = self.get(layout_id)
        layout.has_collisions = result.has_collisions
        layout.collision_count = result.collision_count
        layout.collision_data = [pair.to_dict() for pair in result.collisions]
        layout.last_collision_check = datetime.now(timezone.utc)
        self.save(layout)
        return layout


__all__ = ["Layout", "FileLayoutStore"]
