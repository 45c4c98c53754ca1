"""
Ordered slots the hotel-setup conversation has to fill.

Each slot is one of four variants, keyed by how the client answers it:

- TextSlot: free text, optionally parsed as an integer
- ChoiceSlot: one option, or several when multi_select (JSON array content)
- TableSlot: room mix per floor (JSON array content)
- AreaSlot: public area selection (JSON array content)

Extraction only ever looks at the latest user message of the history it is
given and returns None when that message does not answer the slot.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Sequence, Union

from hotel_design.schemas.conversation import ChatMessage


BRAND_CHOICES = [
    "Marriott", "Hilton", "IHG", "Hyatt", "Choice Hotels",
    "Wyndham", "Independent", "Other",
]

ROOM_TYPE_CHOICES = [
    "Standard King", "Standard Double", "Junior Suite",
    "Executive Suite", "Presidential Suite", "Accessible Room",
]

PUBLIC_AREA_CHOICES = [
    "Lobby", "Restaurant", "Bar/Lounge", "Fitness Center", "Business Center",
    "Meeting Rooms", "Pool", "Spa", "Gift Shop", "Parking Garage",
]

LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class TextSlot:
    id: str
    prompt: str
    numeric: bool = False
    response_type: str = "text"


@dataclass(frozen=True)
class ChoiceSlot:
    id: str
    prompt: str
    choices: List[str] = field(default_factory=list)
    allow_custom: bool = False
    multi_select: bool = False
    response_type: str = "choices"


@dataclass(frozen=True)
class TableSlot:
    id: str
    prompt: str
    response_type: str = "table"


@dataclass(frozen=True)
class AreaSlot:
    id: str
    prompt: str
    areas: List[str] = field(default_factory=list)
    response_type: str = "areas"


Slot = Union[TextSlot, ChoiceSlot, TableSlot, AreaSlot]


SLOTS: List[Slot] = [
    TextSlot(
        id="location",
        prompt="Let's start with the basics! What city or ZIP code is your hotel project located in?",
    ),
    ChoiceSlot(
        id="brand",
        prompt="Great! What hotel brand or flag are you planning for this project?",
        choices=BRAND_CHOICES,
        allow_custom=True,
    ),
    TextSlot(
        id="floors",
        prompt="How many floors will your hotel have? (Including ground floor)",
        numeric=True,
    ),
    ChoiceSlot(
        id="roomTypes",
        prompt="What types of rooms will you offer? Select all that apply:",
        choices=ROOM_TYPE_CHOICES,
        allow_custom=False,
        multi_select=True,
    ),
    TableSlot(
        id="roomMix",
        prompt="Now let's plan your room mix by floor. Please specify how many of each room type per floor:",
    ),
    AreaSlot(
        id="publicAreas",
        prompt="Finally, which public areas and amenities will your hotel include?",
        areas=PUBLIC_AREA_CHOICES,
    ),
]


def last_user_content(history: Sequence[ChatMessage]) -> Optional[str]:
    """Content of the most recent user message, or None if there is none."""
    for message in reversed(history):
        if message.role == "user":
            return message.content
    return None


def parse_leading_int(text: str) -> Optional[int]:
    """Parse an integer prefix ("12 floors" -> 12); None when there is none."""
    match = LEADING_INT.match(text)
    if not match:
        return None
    return int(match.group(1))


def parse_json_array(text: str) -> Optional[list]:
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None
    return value if isinstance(value, list) else None


def _match_choice(answer: str, choices: Sequence[str]) -> Optional[str]:
    for choice in choices:
        if choice.lower() == answer.lower():
            return choice
    return None


def _extract_text(slot: TextSlot, content: str) -> Any:
    text = content.strip()
    if not text:
        return None
    if slot.numeric:
        return parse_leading_int(text)
    return text


def _extract_choice(slot: ChoiceSlot, content: str) -> Any:
    text = content.strip()
    if not text:
        return None

    if not slot.multi_select:
        matched = _match_choice(text, slot.choices)
        if matched:
            return matched
        return text if slot.allow_custom else None

    items = parse_json_array(text)
    if items is None:
        # A single unserialized option is still a valid selection
        items = [text]

    selected = []
    for item in items:
        if not isinstance(item, str) or not item.strip():
            return None
        matched = _match_choice(item.strip(), slot.choices)
        if matched:
            selected.append(matched)
        elif slot.allow_custom:
            selected.append(item.strip())
        else:
            return None

    return selected or None


def _extract_table(slot: TableSlot, content: str) -> Any:
    rows = parse_json_array(content)
    if rows is None or not all(isinstance(row, dict) for row in rows):
        return None
    return rows


def _extract_areas(slot: AreaSlot, content: str) -> Any:
    areas = parse_json_array(content)
    if areas is None or not all(isinstance(area, dict) for area in areas):
        return None
    return areas


EXTRACTORS = {
    TextSlot: _extract_text,
    ChoiceSlot: _extract_choice,
    TableSlot: _extract_table,
    AreaSlot: _extract_areas,
}


def extract(slot: Slot, history: Sequence[ChatMessage]) -> Any:
    """
    Extract the value answering `slot` from the history ending at the
    latest user message.

    Returns:
        The slot value, or None when the answer does not fill the slot
    """
    content = last_user_content(history)
    if content is None:
        return None
    return EXTRACTORS[type(slot)](slot, content)
