"""
Compliance rules for a building design.

Rules run in a fixed order and every call rebuilds the full issue list:

1. ADA accessible-room share (error below 5%)
2. Rooms per floor (warning per floor above 100)
3. Elevator access for buildings above 4 floors (warning)
4. Main lobby present (error)
5. Parking estimate at 1.2 spaces per room (info)
"""

import math
from typing import List, Sequence

from hotel_design.schemas.design import ComplianceIssue, Floor, PublicArea
from hotel_design.services.catalog import ACCESSIBLE_ROOM_TYPE


MIN_ACCESSIBLE_PERCENT = 5
MAX_ROOMS_PER_FLOOR = 100
ELEVATOR_FLOOR_THRESHOLD = 4
PARKING_SPACES_PER_ROOM = 1.2
LOBBY_AREA_ID = "lobby"


def total_room_count(floors: Sequence[Floor]) -> int:
    return sum(floor.room_count() for floor in floors)


def accessible_room_count(floors: Sequence[Floor]) -> int:
    return sum(floor.quantity_of(ACCESSIBLE_ROOM_TYPE) for floor in floors)


def accessible_percentage(floors: Sequence[Floor]) -> float:
    total = total_room_count(floors)
    if total == 0:
        return 0.0
    return accessible_room_count(floors) / total * 100


def _check_accessibility(floors, public_areas) -> List[ComplianceIssue]:
    total = total_room_count(floors)
    accessible = accessible_room_count(floors)
    percentage = accessible_percentage(floors)

    if percentage >= MIN_ACCESSIBLE_PERCENT:
        return []
    return [ComplianceIssue(
        type="error",
        message=f"Only {percentage:.1f}% accessible rooms ({accessible}/{total})",
        recommendation=f"ADA requires minimum {MIN_ACCESSIBLE_PERCENT}% accessible rooms",
    )]


def _check_floor_density(floors, public_areas) -> List[ComplianceIssue]:
    issues = []
    for floor in floors:
        floor_rooms = floor.room_count()
        if floor_rooms > MAX_ROOMS_PER_FLOOR:
            issues.append(ComplianceIssue(
                type="warning",
                message=f"Floor {floor.name} has {floor_rooms} rooms",
                recommendation="Consider fire safety requirements for high room counts",
            ))
    return issues


def _check_elevator(floors, public_areas) -> List[ComplianceIssue]:
    if len(floors) <= ELEVATOR_FLOOR_THRESHOLD:
        return []
    if any("elevator" in area.areaType.lower() for area in public_areas):
        return []
    return [ComplianceIssue(
        type="warning",
        message=f"{len(floors)} floors without elevator access",
        recommendation=f"Buildings over {ELEVATOR_FLOOR_THRESHOLD} floors typically require elevator access",
    )]


def _check_lobby(floors, public_areas) -> List[ComplianceIssue]:
    if any(area.id == LOBBY_AREA_ID for area in public_areas):
        return []
    return [ComplianceIssue(
        type="error",
        message="No lobby configured",
        recommendation="Hotels require a main lobby area",
    )]


def _check_parking(floors, public_areas) -> List[ComplianceIssue]:
    total = total_room_count(floors)
    if total <= 0:
        return []
    spaces = math.ceil(total * PARKING_SPACES_PER_ROOM)
    return [ComplianceIssue(
        type="info",
        message=f"Estimated parking needed: {spaces} spaces",
        recommendation="Plan for adequate parking based on local requirements",
    )]


RULES = [
    _check_accessibility,
    _check_floor_density,
    _check_elevator,
    _check_lobby,
    _check_parking,
]


def evaluate_compliance(
    floors: Sequence[Floor],
    public_areas: Sequence[PublicArea],
) -> List[ComplianceIssue]:
    """Run every rule in order and return the combined issue list."""
    issues: List[ComplianceIssue] = []
    for rule in RULES:
        issues.extend(rule(floors, public_areas))
    return issues


def has_blocking_errors(issues: Sequence) -> bool:
    """True if any issue (model or stored dict) is an error."""
    for issue in issues:
        issue_type = issue.get("type") if isinstance(issue, dict) else issue.type
        if issue_type == "error":
            return True
    return False
