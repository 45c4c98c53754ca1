"""
Editable design state for one project.

A DesignSession is immutable: every command returns a new session and
leaves the original untouched, so the caller owns exactly one current
version and decides when to persist it.
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from hotel_design.core.errors import FloorLevelConflictError, FloorNotFoundError
from hotel_design.schemas.conversation import HotelBaseModel
from hotel_design.schemas.design import DesignMetrics, Floor, PublicArea, RoomConfiguration
from hotel_design.services import catalog
from hotel_design.services.compliance import accessible_room_count, total_room_count
from hotel_design.services.cost_estimator import (
    PUBLIC_AREA_COST_PER_SQFT,
    base_cost_for_tier,
)


@dataclass(frozen=True)
class DesignSession:
    floors: Tuple[Floor, ...] = ()
    public_areas: Tuple[PublicArea, ...] = ()
    last_modified: Optional[datetime] = None
    changes: Tuple[str, ...] = field(default=(), compare=False)

    # Floors

    def sorted_floors(self) -> List[Floor]:
        return sorted(self.floors, key=lambda f: f.level)

    def get_floor(self, floor_id: str) -> Floor:
        for floor in self.floors:
            if floor.id == floor_id:
                return floor
        raise FloorNotFoundError(floor_id)

    def _touch(self, change: str, **updates) -> "DesignSession":
        return replace(
            self,
            last_modified=datetime.utcnow(),
            changes=self.changes + (change,),
            **updates,
        )

    def _replace_floor(self, updated: Floor, change: str) -> "DesignSession":
        floors = tuple(updated if f.id == updated.id else f for f in self.floors)
        return self._touch(change, floors=floors)

    def add_floor(
        self,
        name: str,
        level: Optional[int] = None,
        height: float = 9,
        floor_type: str = "standard",
        floor_id: Optional[str] = None,
    ) -> "DesignSession":
        """Add an empty floor; without a level it goes on top of the stack."""
        if level is None:
            level = max((f.level for f in self.floors), default=-1) + 1
        if any(f.level == level for f in self.floors):
            raise FloorLevelConflictError(level)

        floor = Floor(
            id=floor_id or str(uuid.uuid4()),
            name=name,
            level=level,
            height=height,
            floorType=floor_type,
        )
        return self._touch(f"add_floor:{floor.id}", floors=self.floors + (floor,))

    def update_floor(self, floor_id: str, **updates) -> "DesignSession":
        floor = self.get_floor(floor_id)
        level = updates.get("level")
        if level is not None and any(
            f.level == level and f.id != floor_id for f in self.floors
        ):
            raise FloorLevelConflictError(level)

        clean = {k: v for k, v in updates.items() if v is not None}
        return self._replace_floor(floor.model_copy(update=clean), f"update_floor:{floor_id}")

    def remove_floor(self, floor_id: str) -> "DesignSession":
        self.get_floor(floor_id)
        floors = tuple(f for f in self.floors if f.id != floor_id)
        return self._touch(f"remove_floor:{floor_id}", floors=floors)

    def move_floor(self, floor_id: str, direction: int) -> "DesignSession":
        """Swap a floor with its neighbour and re-level the stack from 0."""
        ordered = self.sorted_floors()
        index = next(i for i, f in enumerate(ordered) if f.id == self.get_floor(floor_id).id)
        new_index = index + direction
        if new_index < 0 or new_index >= len(ordered):
            return self

        ordered[index], ordered[new_index] = ordered[new_index], ordered[index]
        floors = tuple(f.model_copy(update={"level": i}) for i, f in enumerate(ordered))
        return self._touch(f"move_floor:{floor_id}", floors=floors)

    # Rooms

    def set_room_quantity(
        self,
        floor_id: str,
        room_type_id: str,
        quantity: int,
        average_size: Optional[float] = None,
    ) -> "DesignSession":
        floor = self.get_floor(floor_id)
        rooms = list(floor.rooms)
        for i, room in enumerate(rooms):
            if room.roomTypeId == room_type_id:
                update = {"quantity": quantity}
                if average_size is not None:
                    update["averageSize"] = average_size
                rooms[i] = room.model_copy(update=update)
                break
        else:
            rooms.append(RoomConfiguration(
                roomTypeId=room_type_id,
                quantity=quantity,
                averageSize=average_size or 0,
            ))

        updated = floor.model_copy(update={"rooms": rooms})
        return self._replace_floor(updated, f"room:{floor_id}:{room_type_id}")

    def standard_floor_ids(self) -> List[str]:
        return [f.id for f in self.sorted_floors() if f.floorType == "standard"]

    def apply_bulk_rooms(
        self,
        floor_ids: Sequence[str],
        room_quantities: Dict[str, int],
    ) -> "DesignSession":
        """Set the given room quantities on every selected floor; zeros are skipped."""
        session = self
        for floor_id in floor_ids:
            for room_type_id, quantity in room_quantities.items():
                if quantity > 0:
                    session = session.set_room_quantity(floor_id, room_type_id, quantity)
        return session

    # Public areas

    def get_public_area(self, area_id: str) -> Optional[PublicArea]:
        for area in self.public_areas:
            if area.id == area_id:
                return area
        return None

    def enable_public_area(
        self,
        area_id: str,
        size_sqft: Optional[int] = None,
        level: int = 0,
    ) -> "DesignSession":
        """Add an area from the catalogue; enabling an existing one resizes it."""
        area_type = catalog.get_public_area_type(area_id)
        if size_sqft is None:
            size_sqft = area_type["defaultSize"] if area_type else 0
        size_sqft = catalog.clamp_area_size(area_id, size_sqft)

        existing = self.get_public_area(area_id)
        if existing:
            return self.resize_public_area(area_id, size_sqft)

        area = PublicArea(
            id=area_id,
            areaType=area_type["name"] if area_type else area_id,
            sizeSqft=size_sqft,
            isRequired=area_type["required"] if area_type else False,
            level=level,
        )
        return self._touch(f"enable_area:{area_id}", public_areas=self.public_areas + (area,))

    def resize_public_area(self, area_id: str, size_sqft: int) -> "DesignSession":
        size_sqft = catalog.clamp_area_size(area_id, size_sqft)
        public_areas = tuple(
            a.model_copy(update={"sizeSqft": size_sqft}) if a.id == area_id else a
            for a in self.public_areas
        )
        return self._touch(f"resize_area:{area_id}", public_areas=public_areas)

    def disable_public_area(self, area_id: str) -> "DesignSession":
        public_areas = tuple(a for a in self.public_areas if a.id != area_id)
        return self._touch(f"disable_area:{area_id}", public_areas=public_areas)

    # Metrics

    def metrics(self, brand_tier: Optional[str] = None) -> DesignMetrics:
        total_rooms = total_room_count(self.floors)
        total_floors = len(self.floors)
        public_sqft = sum(a.sizeSqft for a in self.public_areas)

        return DesignMetrics(
            totalRooms=total_rooms,
            totalFloors=total_floors,
            accessibleRooms=accessible_room_count(self.floors),
            averageRoomsPerFloor=round(total_rooms / total_floors) if total_floors else 0,
            totalPublicAreaSqft=public_sqft,
            estimatedTotalCost=(
                total_rooms * base_cost_for_tier(brand_tier)
                + public_sqft * PUBLIC_AREA_COST_PER_SQFT
            ),
        )


def session_from_base_model(model: HotelBaseModel) -> DesignSession:
    """Seed the editable design from the conversation's base model."""
    session = DesignSession()

    for entry in sorted(model.floorMix, key=lambda e: e.floorIndex):
        floor_id = str(uuid.uuid4())
        session = session.add_floor(
            name=f"Floor {entry.floorIndex}",
            level=entry.floorIndex - 1,
            floor_id=floor_id,
        )
        quantities: Dict[str, int] = {}
        for room_type, quantity in entry.roomsByType.items():
            room_type_id = catalog.room_type_id_for(room_type)
            quantities[room_type_id] = quantities.get(room_type_id, 0) + quantity
        session = session.apply_bulk_rooms([floor_id], quantities)

    for selection in model.publicAreas:
        if selection.enabled:
            session = session.enable_public_area(
                catalog.public_area_id_for(selection.area),
                size_sqft=selection.size or None,
            )

    return session
