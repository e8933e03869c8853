from __future__ import annotations

import pytest

from core.exceptions import MalformedInputError
from core.geometry.models import BuildingFloorGeometry, Vertex, WallSegment
from core.geometry.polygon import (
    PolygonFailure,
    geometry_to_floor_plane,
    segments_intersect,
    validate_simple_polygon,
)


RECTANGLE = [(0, 0), (10, 0), (10, 5), (0, 5), (0, 0)]
BOW_TIE = [(0, 0), (10, 10), (0, 10), (10, 0), (0, 0)]


def _geometry(points: dict[str, tuple[float, float]], ring: list[str] | None) -> BuildingFloorGeometry:
    vertices = [Vertex(id=vid, x=x, y=y) for vid, (x, y) in points.items()]
    segments = []
    if ring:
        segments = [WallSegment(id=f"s{i}", a=ring[i], b=ring[(i + 1) % len(ring)]) for i in range(len(ring))]
    return BuildingFloorGeometry(vertices=vertices, segments=segments, ring_vertex_ids=ring)


def test_accepts_simple_closed_rectangle() -> None:
    result = validate_simple_polygon(RECTANGLE)
    assert result.ok
    assert result.reason is None


@pytest.mark.parametrize("points", [[], [(0, 0)], [(0, 0), (1, 0)]])
def test_rejects_too_few_points(points) -> None:
    result = validate_simple_polygon(points)
    assert not result.ok
    assert result.reason == PolygonFailure.TOO_FEW_POINTS
    assert result.reason == "too few points"


def test_rejects_unclosed_ring() -> None:
    result = validate_simple_polygon([(0, 0), (10, 0), (10, 5), (0, 5)])
    assert not result.ok
    assert result.reason == "not closed"


def test_closure_within_epsilon_is_accepted() -> None:
    points = [(0, 0), (10, 0), (10, 5), (0, 5), (5e-7, -5e-7)]
    assert validate_simple_polygon(points).ok


def test_closure_beyond_epsilon_is_rejected() -> None:
    points = [(0, 0), (10, 0), (10, 5), (0, 5), (0, 1e-3)]
    assert validate_simple_polygon(points).reason == PolygonFailure.NOT_CLOSED


def test_rejects_bow_tie() -> None:
    result = validate_simple_polygon(BOW_TIE)
    assert not result.ok
    assert result.reason == "self-intersects"


def test_collinear_overlap_between_non_adjacent_edges() -> None:
    # Edge (4,0)->(2,0) doubles back over edge (0,0)->(6,0)
    points = [(0, 0), (6, 0), (6, 2), (4, 2), (4, 0), (2, 0), (2, 3), (0, 3), (0, 0)]
    assert validate_simple_polygon(points).reason == PolygonFailure.SELF_INTERSECTS


def test_non_convex_simple_polygon_is_accepted() -> None:
    l_shape = [(0, 0), (20, 0), (20, 8), (8, 8), (8, 20), (0, 20), (0, 0)]
    assert validate_simple_polygon(l_shape).ok


def test_validator_is_pure() -> None:
    points = list(BOW_TIE)
    first = validate_simple_polygon(points)
    second = validate_simple_polygon(points)
    assert first == second
    assert points == BOW_TIE


def test_segments_intersect_cases() -> None:
    assert segments_intersect((0, 0), (10, 10), (0, 10), (10, 0))
    assert not segments_intersect((0, 0), (1, 0), (0, 1), (1, 1))
    # Touching at an endpoint counts as intersecting
    assert segments_intersect((0, 0), (5, 0), (5, 0), (5, 5))
    # Collinear but disjoint
    assert not segments_intersect((0, 0), (1, 0), (2, 0), (3, 0))


def test_floor_plane_auto_closes_ring() -> None:
    geometry = _geometry({"a": (0, 0), "b": (10, 0), "c": (10, 5), "d": (0, 5)}, ["a", "b", "c", "d"])
    result = geometry_to_floor_plane(geometry)

    assert result.ok
    assert result.reason is None
    plane = result.plane
    assert plane is not None
    assert plane.closed
    assert plane.points[0] == plane.points[-1]
    assert len(plane.points) == 5
    assert plane.area == pytest.approx(50.0)
    assert plane.perimeter == pytest.approx(30.0)


def test_floor_plane_keeps_explicitly_closed_ring() -> None:
    geometry = _geometry({"a": (0, 0), "b": (10, 0), "c": (10, 5), "d": (0, 5)}, ["a", "b", "c", "d", "a"])
    result = geometry_to_floor_plane(geometry)
    assert result.plane is not None
    assert len(result.plane.points) == 5


def test_floor_plane_missing_vertex() -> None:
    geometry = _geometry({"a": (0, 0), "b": (10, 0), "c": (10, 5)}, ["a", "b", "c", "ghost"])
    result = geometry_to_floor_plane(geometry)
    assert result.plane is None
    assert result.reason == "missing vertex"


def test_floor_plane_missing_ring() -> None:
    geometry = _geometry({"a": (0, 0), "b": (10, 0), "c": (10, 5)}, None)
    result = geometry_to_floor_plane(geometry)
    assert not result.ok
    assert result.reason == PolygonFailure.MISSING_RING


def test_floor_plane_short_ring() -> None:
    geometry = _geometry({"a": (0, 0), "b": (10, 0)}, ["a", "b"])
    assert geometry_to_floor_plane(geometry).reason == PolygonFailure.TOO_FEW_POINTS


def test_floor_plane_ring_with_two_distinct_vertices() -> None:
    geometry = BuildingFloorGeometry(
        vertices=[Vertex(id="a", x=0, y=0), Vertex(id="b", x=10, y=0)],
        ring_vertex_ids=["a", "b", "a"],
    )
    result = geometry_to_floor_plane(geometry)
    assert result.plane is None
    assert result.reason == PolygonFailure.TOO_FEW_POINTS


def test_floor_plane_rejects_self_intersection() -> None:
    geometry = _geometry({"a": (0, 0), "b": (10, 10), "c": (0, 10), "d": (10, 0)}, ["a", "b", "c", "d"])
    result = geometry_to_floor_plane(geometry)
    assert result.plane is None
    assert result.reason == PolygonFailure.SELF_INTERSECTS


def test_geometry_from_dict_reads_camel_case_ring() -> None:
    geometry = BuildingFloorGeometry.from_dict(
        {
            "version": 1,
            "vertices": [{"id": "a", "x": 0, "y": 0}, {"id": "b", "x": 4, "y": 0}, {"id": "c", "x": 0, "y": 3}],
            "segments": [{"id": "s1", "a": "a", "b": "b", "thickness": 0.5, "material": "wood"}],
            "ringVertexIds": ["a", "b", "c"],
        }
    )
    assert geometry.ring_vertex_ids == ["a", "b", "c"]
    assert geometry.segments[0].material == "wood"
    assert geometry_to_floor_plane(geometry).plane.area == pytest.approx(6.0)


def test_geometry_from_dict_rejects_malformed_vertices() -> None:
    with pytest.raises(MalformedInputError):
        BuildingFloorGeometry.from_dict({"vertices": [{"id": "a", "x": "left", "y": 0}]})
