"""Room types, public area catalogue and bulk-edit presets."""

import re
from typing import Optional


ACCESSIBLE_ROOM_TYPE = "accessible"

ROOM_TYPES = [
    {"id": "standard-king", "name": "Standard King"},
    {"id": "standard-double", "name": "Standard Double"},
    {"id": "suite", "name": "Suite"},
    {"id": ACCESSIBLE_ROOM_TYPE, "name": "Accessible"},
]

# Conversation choices that do not slugify onto a catalogue id
ROOM_TYPE_ALIASES = {
    "accessible room": ACCESSIBLE_ROOM_TYPE,
    "junior suite": "suite",
    "executive suite": "suite",
    "presidential suite": "suite",
}

PUBLIC_AREA_TYPES = [
    {"id": "lobby", "name": "Lobby", "min": 500, "max": 3000, "defaultSize": 800, "required": True},
    {"id": "restaurant", "name": "Restaurant", "min": 800, "max": 5000, "defaultSize": 1200, "required": False},
    {"id": "fitness", "name": "Fitness Center", "min": 400, "max": 2000, "defaultSize": 600, "required": False},
    {"id": "pool", "name": "Pool Area", "min": 600, "max": 4000, "defaultSize": 1000, "required": False},
    {"id": "business-center", "name": "Business Center", "min": 200, "max": 800, "defaultSize": 300, "required": False},
    {"id": "conference-room", "name": "Conference Room", "min": 300, "max": 1500, "defaultSize": 500, "required": False},
    {"id": "elevator", "name": "Elevator Core", "min": 100, "max": 300, "defaultSize": 150, "required": False},
    {"id": "laundry", "name": "Laundry Facility", "min": 200, "max": 800, "defaultSize": 400, "required": False},
    {"id": "storage", "name": "Storage", "min": 100, "max": 500, "defaultSize": 200, "required": False},
    {"id": "parking-garage", "name": "Parking Garage", "min": 5000, "max": 50000, "defaultSize": 15000, "required": False},
]

# Conversation area names that differ from the catalogue names
PUBLIC_AREA_ALIASES = {
    "meeting rooms": "conference-room",
}

FLOOR_PRESETS = {
    "small": {"standard-king": 8, "standard-double": 4, "suite": 1, ACCESSIBLE_ROOM_TYPE: 1},
    "medium": {"standard-king": 12, "standard-double": 8, "suite": 2, ACCESSIBLE_ROOM_TYPE: 2},
    "large": {"standard-king": 16, "standard-double": 12, "suite": 3, ACCESSIBLE_ROOM_TYPE: 3},
}


def slugify(name: str) -> str:
    """Lowercase a display name and join its words with hyphens."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.strip().lower())
    return slug.strip("-")


def room_type_id_for(name: str) -> str:
    """Map a room type display name to its catalogue id."""
    key = name.strip().lower()
    if key in ROOM_TYPE_ALIASES:
        return ROOM_TYPE_ALIASES[key]
    for room_type in ROOM_TYPES:
        if room_type["name"].lower() == key or room_type["id"] == key:
            return room_type["id"]
    return slugify(name)


def get_public_area_type(area_id: str) -> Optional[dict]:
    for area_type in PUBLIC_AREA_TYPES:
        if area_type["id"] == area_id:
            return area_type
    return None


def public_area_id_for(name: str) -> str:
    """Map a public area display name to its area-type key."""
    key = name.strip().lower()
    if key in PUBLIC_AREA_ALIASES:
        return PUBLIC_AREA_ALIASES[key]
    for area_type in PUBLIC_AREA_TYPES:
        if area_type["name"].lower() == key or area_type["id"] == key:
            return area_type["id"]
    return slugify(name)


def clamp_area_size(area_id: str, size_sqft: int) -> int:
    """Keep a size inside the catalogue range for known area types."""
    area_type = get_public_area_type(area_id)
    if not area_type:
        return max(size_sqft, 0)
    return min(max(size_sqft, area_type["min"]), area_type["max"])
