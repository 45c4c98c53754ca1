"""Pydantic schemas for the editable building design and its derived data."""

from typing import Optional, List, Dict, Literal
from pydantic import BaseModel, Field


FloorType = Literal["standard", "penthouse", "mechanical"]

IssueType = Literal["error", "warning", "info"]


class RoomConfiguration(BaseModel):
    """Rooms of one type on a floor. A missing entry means zero rooms."""
    roomTypeId: str
    quantity: int = Field(0, ge=0)
    averageSize: float = Field(0, ge=0)


class Floor(BaseModel):
    id: str
    name: str
    level: int = Field(description="Unique per project; drives stacking order")
    height: float = 9
    floorType: FloorType = "standard"
    rooms: List[RoomConfiguration] = []
    totalArea: float = 0

    def room_count(self) -> int:
        return sum(room.quantity for room in self.rooms)

    def quantity_of(self, room_type_id: str) -> int:
        for room in self.rooms:
            if room.roomTypeId == room_type_id:
                return room.quantity
        return 0


class PublicArea(BaseModel):
    """Public area; the id is the area-type key, so one per type per project."""
    id: str
    areaType: str
    sizeSqft: int = Field(0, ge=0)
    isRequired: bool = False
    level: int = 0


class ComplianceIssue(BaseModel):
    type: IssueType
    message: str
    recommendation: Optional[str] = None


class CostEstimateTotals(BaseModel):
    """Per-key range and the same range across every key in the hotel."""
    low: float
    mid: float
    high: float
    totalLow: float
    totalMid: float
    totalHigh: float
    totalRooms: int
    brandTier: str
    regionalMultiplier: float


class CostSummary(BaseModel):
    id: str
    project_id: str
    low_cost_per_key: float
    mid_cost_per_key: float
    high_cost_per_key: float
    regional_multiplier: float
    brand_tier: str
    created_at: str
    estimate: Optional[CostEstimateTotals] = None


class DesignMetrics(BaseModel):
    totalRooms: int
    totalFloors: int
    accessibleRooms: int
    averageRoomsPerFloor: int
    totalPublicAreaSqft: int
    estimatedTotalCost: float


# Request bodies

class CreateFloorRequest(BaseModel):
    name: str = Field(min_length=1)
    level: Optional[int] = None
    height: float = 9
    floorType: FloorType = "standard"


class UpdateFloorRequest(BaseModel):
    name: Optional[str] = None
    level: Optional[int] = None
    height: Optional[float] = None
    floorType: Optional[FloorType] = None


class MoveFloorRequest(BaseModel):
    direction: Literal[-1, 1]


class RoomQuantityRequest(BaseModel):
    quantity: int = Field(ge=0)
    averageSize: Optional[float] = Field(None, ge=0)


class BulkRoomUpdateRequest(BaseModel):
    floorIds: Optional[List[str]] = Field(None, description="Defaults to all standard floors")
    roomQuantities: Optional[Dict[str, int]] = None
    preset: Optional[Literal["small", "medium", "large"]] = None


class EnablePublicAreaRequest(BaseModel):
    sizeSqft: Optional[int] = Field(None, ge=0)
    level: int = 0


class ResizePublicAreaRequest(BaseModel):
    sizeSqft: int = Field(ge=0)


class CostRequest(BaseModel):
    regionalMultiplier: Optional[float] = None
    brandTier: Optional[str] = None
