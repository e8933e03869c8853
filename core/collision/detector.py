"""
Incremental collision detection for interactive layout editing.

Boxes are axis-aligned (orientation is never applied). Each editing session
owns its own ``CollisionDetector``; results are cached until the next
mutation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from loguru import logger

from core.geometry.contract import MIN_BOX_DIMENSION_FT


@dataclass(frozen=True)
class Dimensions:
    width: float
    height: float
    depth: float


@dataclass(frozen=True)
class Box3:
    """Axis-aligned box given by its min and max corners."""

    min: tuple[float, float, float]
    max: tuple[float, float, float]

    @classmethod
    def from_center(cls, center: Sequence[float], dims: Dimensions) -> "Box3":
        half = (dims.width / 2.0, dims.height / 2.0, dims.depth / 2.0)
        return cls(
            min=tuple(float(center[i]) - half[i] for i in range(3)),  # type: ignore[arg-type]
            max=tuple(float(center[i]) + half[i] for i in range(3)),  # type: ignore[arg-type]
        )

    def intersects(self, other: "Box3") -> bool:
        # Closed intervals: boxes sharing a face collide
        for axis in range(3):
            if other.max[axis] < self.min[axis] or other.min[axis] > self.max[axis]:
                return False
        return True


@dataclass(frozen=True)
class CollisionBox:
    id: str
    box: Box3
    position: tuple[float, float, float]
    dimensions: Dimensions


@dataclass(frozen=True)
class CollisionResult:
    has_collision: bool
    colliding_pairs: tuple[tuple[str, str], ...]
    collision_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "hasCollision": self.has_collision,
            "collidingPairs": [{"id1": a, "id2": b} for a, b in self.colliding_pairs],
            "collisionCount": self.collision_count,
        }


@dataclass(frozen=True)
class Valid:
    result: CollisionResult


class Invalid:
    def __repr__(self) -> str:
        return "INVALID"


INVALID = Invalid()

CacheState = Valid | Invalid


class CollisionDetector:
    """All-pairs AABB collision detector with a cached result.

    Sized for tens of boxes; detection is O(n^2) over the tracked set.
    Queries about unknown ids answer negatively instead of raising.
    """

    def __init__(self, *, min_dimension: float = MIN_BOX_DIMENSION_FT) -> None:
        self.min_dimension = min_dimension
        self._boxes: dict[str, CollisionBox] = {}
        self._cache: CacheState = INVALID

    def update_box(
        self,
        box_id: str,
        position: Sequence[float],
        dimensions: Dimensions | dict[str, float],
    ) -> None:
        """Add or replace the box for ``box_id`` centred at ``position``."""
        dims = self._clamped(box_id, dimensions)
        center = (float(position[0]), float(position[1]), float(position[2]))
        self._boxes[box_id] = CollisionBox(
            id=box_id,
            box=Box3.from_center(center, dims),
            position=center,
            dimensions=dims,
        )
        self._cache = INVALID

    def remove_box(self, box_id: str) -> None:
        self._boxes.pop(box_id, None)
        self._cache = INVALID

    def detect_collisions(self) -> CollisionResult:
        if isinstance(self._cache, Valid):
            return self._cache.result

        pairs: list[tuple[str, str]] = []
        boxes = list(self._boxes.values())
        for i in range(len(boxes)):
            for j in range(i + 1, len(boxes)):
                if boxes[i].box.intersects(boxes[j].box):
                    pairs.append((boxes[i].id, boxes[j].id))

        result = CollisionResult(
            has_collision=bool(pairs),
            colliding_pairs=tuple(pairs),
            collision_count=len(pairs),
        )
        logger.debug(
            "Recomputed collisions: {count} pair(s) over {boxes} box(es)",
            count=result.collision_count,
            boxes=len(boxes),
        )
        self._cache = Valid(result)
        return result

    def is_colliding(self, box_id: str) -> bool:
        return any(box_id in pair for pair in self.detect_collisions().colliding_pairs)

    def get_colliding_with(self, box_id: str) -> list[str]:
        """Ids paired with ``box_id``, in discovery order."""
        colliding: list[str] = []
        for first, second in self.detect_collisions().colliding_pairs:
            if first == box_id:
                colliding.append(second)
            elif second == box_id:
                colliding.append(first)
        return colliding

    def clear(self) -> None:
        self._boxes.clear()
        self._cache = INVALID

    def has_box(self, box_id: str) -> bool:
        return box_id in self._boxes

    @property
    def box_count(self) -> int:
        return len(self._boxes)

    @property
    def is_cache_valid(self) -> bool:
        return isinstance(self._cache, Valid)

    def _clamped(self, box_id: str, dimensions: Dimensions | dict[str, float]) -> Dimensions:
        if isinstance(dimensions, dict):
            raw = Dimensions(
                width=float(dimensions["width"]),
                height=float(dimensions["height"]),
                depth=float(dimensions["depth"]),
            )
        else:
            raw = dimensions
        clamped = Dimensions(
            width=max(raw.width, self.min_dimension),
            height=max(raw.height, self.min_dimension),
            depth=max(raw.depth, self.min_dimension),
        )
        if clamped != raw:
            logger.warning(
                "Clamped non-positive dimensions for box {box_id}: {raw} -> {clamped}",
                box_id=box_id,
                raw=raw,
                clamped=clamped,
            )
        return clamped


__all__ = [
    "Dimensions",
    "Box3",
    "CollisionBox",
    "CollisionResult",
    "CollisionDetector",
    "Valid",
    "Invalid",
    "INVALID",
    "CacheState",
]
