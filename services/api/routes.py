from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from loguru import logger

from core.collision.catalog import EquipmentCatalog
from core.collision.detector import CollisionDetector, Dimensions
from core.collision.validator import EquipmentPosition, validate_layout
from core.geometry.models import BuildingFloorGeometry
from core.geometry.polygon import geometry_to_floor_plane, validate_simple_polygon
from core.settings import Settings
from services.api.layouts_store import FileLayoutStore
from services.api.schemas import (
    BoxCollisionOut,
    BoxUpdateRequest,
    BuildingFloorGeometryIn,
    CollisionCheckRequest,
    CollisionSessionOut,
    CollisionSnapshot,
    EquipmentPositionIn,
    FloorPlaneOut,
    FloorPlaneResponse,
    LayoutCollisionReport,
    LayoutCollisionSaveResponse,
    LayoutCreateRequest,
    LayoutOut,
    PolygonValidateRequest,
    PolygonValidationOut,
)
from services.api.sessions import CollisionSessionRegistry


router = APIRouter(prefix="/v1")


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_layout_store(request: Request) -> FileLayoutStore:
    return request.app.state.layout_store


def get_catalog(request: Request) -> EquipmentCatalog:
    return request.app.state.catalog


def get_sessions(request: Request) -> CollisionSessionRegistry:
    return request.app.state.sessions


def _to_position(item: EquipmentPositionIn) -> EquipmentPosition:
    return EquipmentPosition(
        equipment_id=item.equipmentId,
        x=item.x,
        y=item.y,
        orientation=item.orientation,
        width_ft=item.widthFt,
        depth_ft=item.depthFt,
    )


def _snapshot(detector: CollisionDetector) -> dict[str, Any]:
    return detector.detect_collisions().to_dict()


# --- Floor geometry ---------------------------------------------------------


@router.post("/polygons/validate", response_model=PolygonValidationOut, tags=["geometry"])
async def validate_polygon(
    payload: PolygonValidateRequest,
    settings: Settings = Depends(get_app_settings),
) -> PolygonValidationOut:
    result = validate_simple_polygon(payload.points, eps=settings.geometry.epsilon)
    return PolygonValidationOut(ok=result.ok, reason=result.reason.value if result.reason else None)


@router.post("/buildings/floor-plane", response_model=FloorPlaneResponse, tags=["geometry"])
async def floor_plane(
    payload: BuildingFloorGeometryIn,
    settings: Settings = Depends(get_app_settings),
) -> FloorPlaneResponse:
    geometry = BuildingFloorGeometry.from_dict(payload.model_dump())
    result = geometry_to_floor_plane(geometry, eps=settings.geometry.epsilon)
    if result.plane is None:
        return FloorPlaneResponse(ok=False, reason=result.reason.value if result.reason else None)
    plane = result.plane
    return FloorPlaneResponse(
        ok=True,
        plane=FloorPlaneOut(
            points=[list(point) for point in plane.points],
            closed=plane.closed,
            area=plane.area,
            perimeter=plane.perimeter,
        ),
    )


# --- Layouts ----------------------------------------------------------------


@router.post("/layouts", response_model=LayoutOut, status_code=status.HTTP_201_CREATED, tags=["layouts"])
async def create_layout(
    payload: LayoutCreateRequest,
    store: FileLayoutStore = Depends(get_layout_store),
) -> dict[str, Any]:
    layout = store.create(payload.name, [_to_position(item) for item in payload.equipmentPositions])
    logger.info("Created layout {layout_id} ({name})", layout_id=layout.id, name=layout.name)
    return layout.to_dict()


@router.get("/layouts/{layout_id}", response_model=LayoutOut, tags=["layouts"])
async def get_layout(
    layout_id: int,
    store: FileLayoutStore = Depends(get_layout_store),
) -> dict[str, Any]:
    return store.get(layout_id).to_dict()


@router.get("/layouts/{layout_id}/collisions", response_model=LayoutCollisionReport, tags=["layouts"])
async def get_layout_collisions(
    layout_id: int,
    store: FileLayoutStore = Depends(get_layout_store),
    catalog: EquipmentCatalog = Depends(get_catalog),
) -> dict[str, Any]:
    layout = store.get(layout_id)
    result = validate_layout(layout.equipment_positions, catalog)
    return {
        "layoutId": layout.id,
        "layoutName": layout.name,
        **result.to_dict(),
        "lastCheck": layout.last_collision_check,
    }


@router.post("/layouts/{layout_id}/collisions", response_model=LayoutCollisionSaveResponse, tags=["layouts"])
async def save_layout_collisions(
    layout_id: int,
    payload: CollisionCheckRequest,
    store: FileLayoutStore = Depends(get_layout_store),
    catalog: EquipmentCatalog = Depends(get_catalog),
) -> dict[str, Any]:
    store.get(layout_id)
    positions = [_to_position(item) for item in payload.equipmentPositions]
    result = validate_layout(positions, catalog)
    store.record_collision_check(layout_id, result)
    logger.info(
        "Saved collision check for layout {layout_id}: {count} collision(s)",
        layout_id=layout_id,
        count=result.collision_count,
    )
    return {"success": True, "layoutId": layout_id, **result.to_dict()}


# --- Interactive collision sessions ----------------------------------------


@router.post(
    "/collision-sessions",
    response_model=CollisionSessionOut,
    status_code=status.HTTP_201_CREATED,
    tags=["collision-sessions"],
)
async def open_session(sessions: CollisionSessionRegistry = Depends(get_sessions)) -> CollisionSessionOut:
    return CollisionSessionOut(sessionId=sessions.open())


@router.delete(
    "/collision-sessions/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["collision-sessions"],
)
async def close_session(
    session_id: UUID,
    sessions: CollisionSessionRegistry = Depends(get_sessions),
) -> None:
    sessions.close(session_id)


@router.put(
    "/collision-sessions/{session_id}/boxes/{box_id}",
    response_model=CollisionSnapshot,
    tags=["collision-sessions"],
)
async def update_box(
    session_id: UUID,
    box_id: str,
    payload: BoxUpdateRequest,
    sessions: CollisionSessionRegistry = Depends(get_sessions),
) -> dict[str, Any]:
    detector = sessions.get(session_id)
    position = payload.position
    dims = payload.dimensions
    detector.update_box(
        box_id,
        (position.x, position.y, position.z),
        Dimensions(width=dims.width, height=dims.height, depth=dims.depth),
    )
    return _snapshot(detector)


@router.delete(
    "/collision-sessions/{session_id}/boxes/{box_id}",
    response_model=CollisionSnapshot,
    tags=["collision-sessions"],
)
async def remove_box(
    session_id: UUID,
    box_id: str,
    sessions: CollisionSessionRegistry = Depends(get_sessions),
) -> dict[str, Any]:
    detector = sessions.get(session_id)
    detector.remove_box(box_id)
    return _snapshot(detector)


@router.delete(
    "/collision-sessions/{session_id}/boxes",
    response_model=CollisionSnapshot,
    tags=["collision-sessions"],
)
async def clear_boxes(
    session_id: UUID,
    sessions: CollisionSessionRegistry = Depends(get_sessions),
) -> dict[str, Any]:
    detector = sessions.get(session_id)
    detector.clear()
    return _snapshot(detector)


@router.get(
    "/collision-sessions/{session_id}/collisions",
    response_model=CollisionSnapshot,
    tags=["collision-sessions"],
)
async def check_collisions(
    session_id: UUID,
    sessions: CollisionSessionRegistry = Depends(get_sessions),
) -> dict[str, Any]:
    return _snapshot(sessions.get(session_id))


@router.get(
    "/collision-sessions/{session_id}/boxes/{box_id}/collisions",
    response_model=BoxCollisionOut,
    tags=["collision-sessions"],
)
async def box_collisions(
    session_id: UUID,
    box_id: str,
    sessions: CollisionSessionRegistry = Depends(get_sessions),
) -> BoxCollisionOut:
    detector = sessions.get(session_id)
    return BoxCollisionOut(
        id=box_id,
        isColliding=detector.is_colliding(box_id),
        collidingWith=detector.get_colliding_with(box_id),
    )
