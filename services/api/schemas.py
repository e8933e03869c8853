from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from core.geometry.contract import ORIENTATION_MAX_DEG, ORIENTATION_MIN_DEG


class PolygonValidateRequest(BaseModel):
    points: list[list[float]] = Field(..., description="Ordered (x, y) points, last repeating first")

    @field_validator("points")
    @classmethod
    def _pairs_only(cls, value: list[list[float]]) -> list[list[float]]:
        for point in value:
            if len(point) != 2:
                raise ValueError("each point must be an [x, y] pair")
        return value


class PolygonValidationOut(BaseModel):
    ok: bool
    reason: str | None = None


class VertexIn(BaseModel):
    id: str
    x: float
    y: float


class WallSegmentIn(BaseModel):
    id: str
    a: str = Field(..., description="Start vertex id")
    b: str = Field(..., description="End vertex id")
    thickness: float | None = Field(None, gt=0.0, description="Wall thickness in feet")
    material: Literal["brick", "concrete", "drywall", "wood", "steel", "glass"] | None = None


class BuildingFloorGeometryIn(BaseModel):
    version: Literal[1] = 1
    vertices: list[VertexIn] = Field(default_factory=list)
    segments: list[WallSegmentIn] = Field(default_factory=list)
    ringVertexIds: list[str] | None = Field(None, description="Vertex ids of the floor outline, in order")


class FloorPlaneOut(BaseModel):
    points: list[list[float]]
    closed: bool = True
    area: float
    perimeter: float


class FloorPlaneResponse(BaseModel):
    ok: bool
    reason: str | None = None
    plane: FloorPlaneOut | None = None


class EquipmentPositionIn(BaseModel):
    equipmentId: int
    x: float
    y: float
    orientation: float = Field(0.0, ge=ORIENTATION_MIN_DEG, le=ORIENTATION_MAX_DEG)
    widthFt: float = Field(..., gt=0.0)
    depthFt: float = Field(..., gt=0.0)


class EquipmentPositionOut(BaseModel):
    equipmentId: int
    x: float
    y: float
    orientation: float
    widthFt: float | None = None
    depthFt: float | None = None


class LayoutCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    equipmentPositions: list[EquipmentPositionIn] = Field(default_factory=list)


class CollisionPairOut(BaseModel):
    equipment1Id: int
    equipment2Id: int
    overlapArea: float
    equipment1Name: str
    equipment2Name: str


class LayoutOut(BaseModel):
    id: int
    name: str
    equipmentPositions: list[EquipmentPositionOut]
    hasCollisions: bool
    collisionCount: int
    collisionData: list[CollisionPairOut]
    lastCollisionCheck: datetime | None = None


class CollisionCheckRequest(BaseModel):
    equipmentPositions: list[EquipmentPositionIn]


class CollisionReport(BaseModel):
    isValid: bool
    hasCollisions: bool
    collisionCount: int
    collisions: list[CollisionPairOut]
    message: str


class LayoutCollisionReport(CollisionReport):
    layoutId: int
    layoutName: str
    lastCheck: datetime | None = None


class LayoutCollisionSaveResponse(CollisionReport):
    success: bool = True
    layoutId: int


class Vector3(BaseModel):
    x: float
    y: float
    z: float = 0.0


class BoxDimensions(BaseModel):
    width: float = Field(..., gt=0.0)
    height: float = Field(..., gt=0.0)
    depth: float = Field(..., gt=0.0)


class BoxUpdateRequest(BaseModel):
    position: Vector3
    dimensions: BoxDimensions


class CollisionSessionOut(BaseModel):
    sessionId: UUID


class CollidingPairOut(BaseModel):
    id1: str
    id2: str


class CollisionSnapshot(BaseModel):
    hasCollision: bool
    collidingPairs: list[CollidingPairOut]
    collisionCount: int


class BoxCollisionOut(BaseModel):
    id: str
    isColliding: bool
    collidingWith: list[str]
