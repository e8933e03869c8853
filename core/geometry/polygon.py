"""
Floor Plane Validation

Checks that a building's ring of wall vertices forms a simple, closed polygon
before it is accepted as the floor plane. Failures are reported as values so
the wall editor can show the reason directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from loguru import logger

from core.geometry.contract import EPS, MIN_RING_POINTS
from core.geometry.models import BuildingFloorGeometry, FloorPlane, Point


class PolygonFailure(str, Enum):
    """Reasons a ring is rejected."""

    TOO_FEW_POINTS = "too few points"
    NOT_CLOSED = "not closed"
    SELF_INTERSECTS = "self-intersects"
    MISSING_RING = "missing ring"
    MISSING_VERTEX = "missing vertex"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PolygonValidation:
    ok: bool
    reason: PolygonFailure | None = None


@dataclass(frozen=True)
class FloorPlaneResult:
    """Either a validated plane or the reason there is none."""

    plane: FloorPlane | None
    reason: PolygonFailure | None = None

    @property
    def ok(self) -> bool:
        return self.plane is not None


def _cross(ax: float, ay: float, bx: float, by: float) -> float:
    return ax * by - ay * bx


def _orientation(a: Point, b: Point, c: Point, eps: float) -> int:
    # 0 collinear, 1 counter-clockwise, 2 clockwise
    value = _cross(b[0] - a[0], b[1] - a[1], c[0] - a[0], c[1] - a[1])
    if abs(value) < eps:
        return 0
    return 1 if value > 0 else 2


def _on_segment(a: Point, b: Point, c: Point, eps: float) -> bool:
    """True if c lies inside the eps-padded bounding box of segment a-b."""
    return (
        min(a[0], b[0]) - eps <= c[0] <= max(a[0], b[0]) + eps
        and min(a[1], b[1]) - eps <= c[1] <= max(a[1], b[1]) + eps
    )


def segments_intersect(p1: Point, p2: Point, q1: Point, q2: Point, *, eps: float = EPS) -> bool:
    """Orientation-based segment intersection test with collinear fallback."""
    o1 = _orientation(p1, p2, q1, eps)
    o2 = _orientation(p1, p2, q2, eps)
    o3 = _orientation(q1, q2, p1, eps)
    o4 = _orientation(q1, q2, p2, eps)

    if o1 != o2 and o3 != o4:
        return True

    if o1 == 0 and _on_segment(p1, p2, q1, eps):
        return True
    if o2 == 0 and _on_segment(p1, p2, q2, eps):
        return True
    if o3 == 0 and _on_segment(q1, q2, p1, eps):
        return True
    if o4 == 0 and _on_segment(q1, q2, p2, eps):
        return True
    return False


def _as_points(points: Sequence[Sequence[float]]) -> list[Point]:
    return [(float(p[0]), float(p[1])) for p in points]


def _same_point(a: Point, b: Point, eps: float) -> bool:
    return abs(a[0] - b[0]) <= eps and abs(a[1] - b[1]) <= eps


def validate_simple_polygon(points: Sequence[Sequence[float]], *, eps: float = EPS) -> PolygonValidation:
    """
    Decide whether an explicitly closed ring is a simple polygon.

    Only crossings between non-adjacent edges count; adjacent edges touch at
    their shared vertex, and the first and last edges share the closing vertex.

    Args:
        points: Ordered (x, y) points; the last point must repeat the first.
        eps: Per-axis tolerance for closure and collinearity.

    Returns:
        PolygonValidation with ``ok`` and, on failure, the reason.
    """
    pts = _as_points(points)
    if len(pts) < MIN_RING_POINTS:
        return PolygonValidation(ok=False, reason=PolygonFailure.TOO_FEW_POINTS)

    if not _same_point(pts[0], pts[-1], eps):
        return PolygonValidation(ok=False, reason=PolygonFailure.NOT_CLOSED)

    edges = [(i, i + 1) for i in range(len(pts) - 1)]
    last = len(edges) - 1

    for i, (a1, b1) in enumerate(edges):
        for j in range(i + 1, len(edges)):
            a2, b2 = edges[j]
            if a2 in (a1, b1) or b2 in (a1, b1):
                continue
            if i == 0 and j == last:
                continue
            if segments_intersect(pts[a1], pts[b1], pts[a2], pts[b2], eps=eps):
                return PolygonValidation(ok=False, reason=PolygonFailure.SELF_INTERSECTS)

    return PolygonValidation(ok=True)


def geometry_to_floor_plane(geometry: BuildingFloorGeometry, *, eps: float = EPS) -> FloorPlaneResult:
    """Resolve the geometry's ring into a validated, closed floor plane."""
    ring = geometry.ring_vertex_ids
    if not ring:
        return FloorPlaneResult(plane=None, reason=PolygonFailure.MISSING_RING)
    # A repeated closing id does not count towards the minimum ring size
    if len(set(ring)) < MIN_RING_POINTS:
        return FloorPlaneResult(plane=None, reason=PolygonFailure.TOO_FEW_POINTS)

    vertices = geometry.vertex_map()
    pts: list[Point] = []
    for vertex_id in ring:
        vertex = vertices.get(vertex_id)
        if vertex is None:
            logger.warning("Ring references unknown vertex {vertex_id}", vertex_id=vertex_id)
            return FloorPlaneResult(plane=None, reason=PolygonFailure.MISSING_VERTEX)
        pts.append(vertex.point)

    if not _same_point(pts[0], pts[-1], eps):
        pts.append(pts[0])

    validation = validate_simple_polygon(pts, eps=eps)
    if not validation.ok:
        logger.info("Floor plane rejected: {reason}", reason=validation.reason)
        return FloorPlaneResult(plane=None, reason=validation.reason)

    return FloorPlaneResult(plane=FloorPlane.from_points(pts))


__all__ = [
    "PolygonFailure",
    "PolygonValidation",
    "FloorPlaneResult",
    "segments_intersect",
    "validate_simple_polygon",
    "geometry_to_floor_plane",
]
