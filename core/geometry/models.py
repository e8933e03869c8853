"""Building floor geometry as captured by the wall editor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Literal, Mapping, Sequence

from shapely.geometry import Polygon

from core.exceptions import MalformedInputError

Point = tuple[float, float]

WallMaterial = Literal["brick", "concrete", "drywall", "wood", "steel", "glass"]


@dataclass(frozen=True)
class Vertex:
    """Vertex in building-local units; scale is carried separately."""

    id: str
    x: float
    y: float

    @property
    def point(self) -> Point:
        return (float(self.x), float(self.y))


@dataclass(frozen=True)
class WallSegment:
    id: str
    a: str
    b: str
    thickness: float | None = None  # feet
    material: WallMaterial | None = None


@dataclass
class BuildingFloorGeometry:
    """Vertices, wall segments and the ordered ring defining the floor outline."""

    vertices: list[Vertex] = field(default_factory=list)
    segments: list[WallSegment] = field(default_factory=list)
    ring_vertex_ids: list[str] | None = None
    version: int = 1

    def vertex_map(self) -> dict[str, Vertex]:
        return {vertex.id: vertex for vertex in self.vertices}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "BuildingFloorGeometry":
        """Build from the editor's JSON shape (camelCase ``ringVertexIds``)."""
        try:
            vertices = [Vertex(id=str(v["id"]), x=float(v["x"]), y=float(v["y"])) for v in payload.get("vertices") or []]
            segments = [
                WallSegment(
                    id=str(s["id"]),
                    a=str(s["a"]),
                    b=str(s["b"]),
                    thickness=s.get("thickness"),
                    material=s.get("material"),
                )
                for s in payload.get("segments") or []
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedInputError(f"Invalid floor geometry: {exc}") from exc
        ring = payload.get("ringVertexIds", payload.get("ring_vertex_ids"))
        return cls(
            vertices=vertices,
            segments=segments,
            ring_vertex_ids=[str(item) for item in ring] if ring is not None else None,
            version=int(payload.get("version", 1)),
        )


@dataclass(frozen=True)
class FloorPlane:
    """Validated, explicitly closed floor outline (last point repeats the first)."""

    points: tuple[Point, ...]
    closed: bool = True

    def to_polygon(self) -> Polygon:
        return Polygon(self.points)

    @property
    def area(self) -> float:
        return float(self.to_polygon().area)

    @property
    def perimeter(self) -> float:
        return float(self.to_polygon().exterior.length)

    @classmethod
    def from_points(cls, points: Iterable[Sequence[float]]) -> "FloorPlane":
        return cls(points=tuple((float(p[0]), float(p[1])) for p in points))


__all__ = [
    "Point",
    "Vertex",
    "WallSegment",
    "BuildingFloorGeometry",
    "FloorPlane",
]
