"""
Slot-filling conversation engine.

The engine is a pure function of the message history: every call replays
the history from the start, offers each user answer to the first unfilled
slot, and either returns the next question or the validated model. Nothing
is stored between calls, so re-submitting the same history always yields
the same result.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from hotel_design.schemas.conversation import ChatMessage, HotelBaseModel, Question
from hotel_design.services.model_validator import SchemaViolation, validate_model
from hotel_design.services.slot_schema import (
    SLOTS,
    AreaSlot,
    ChoiceSlot,
    Slot,
    extract,
)

logger = logging.getLogger(__name__)

AWAITING_ANSWER = "awaiting_answer"
COMPLETE = "complete"
INVALID = "invalid"


@dataclass
class ConversationState:
    """Derived view of a conversation; rebuilt on every call."""
    next_slot_index: int
    values: Dict[str, Any] = field(default_factory=dict)
    status: str = AWAITING_ANSWER
    question: Optional[Question] = None
    model: Optional[HotelBaseModel] = None
    violation: Optional[SchemaViolation] = None

    @property
    def is_complete(self) -> bool:
        return self.status == COMPLETE


class ConversationEngine:
    """Turns a chat history into the next question or a finished model."""

    def __init__(self, slots: Optional[List[Slot]] = None):
        self.slots = slots if slots is not None else SLOTS

    def fill_slots(self, messages: Sequence[ChatMessage]) -> tuple[Dict[str, Any], int]:
        """
        Replay the history against the slots in order.

        Each user message is tried once, against the slot that is current
        when it arrives; a failed extraction leaves that slot current.

        Returns:
            (filled values by slot id, index of the next unfilled slot)
        """
        values: Dict[str, Any] = {}
        slot_index = 0

        for position, message in enumerate(messages):
            if slot_index >= len(self.slots):
                break
            if message.role != "user":
                continue

            slot = self.slots[slot_index]
            value = extract(slot, messages[: position + 1])
            if value is None:
                logger.debug("Slot %s not filled by message %d", slot.id, position)
                continue

            values[slot.id] = value
            slot_index += 1

        return values, slot_index

    def build_question(self, slot: Slot, values: Dict[str, Any]) -> Question:
        question = Question(
            id=slot.id,
            text=slot.prompt,
            responseType=slot.response_type,
            floorCount=values.get("floors"),
            roomTypes=values.get("roomTypes"),
        )

        if isinstance(slot, ChoiceSlot):
            question.choices = list(slot.choices)
            question.allowCustom = slot.allow_custom
            question.multiSelect = slot.multi_select
        elif isinstance(slot, AreaSlot):
            question.publicAreas = list(slot.areas)

        return question

    def advance(self, messages: Sequence[ChatMessage]) -> ConversationState:
        """Derive the conversation state for the full message history."""
        values, slot_index = self.fill_slots(messages)
        state = ConversationState(next_slot_index=slot_index, values=values)

        if slot_index < len(self.slots):
            state.question = self.build_question(self.slots[slot_index], values)
            return state

        try:
            state.model = validate_model(values)
            state.status = COMPLETE
        except SchemaViolation as e:
            logger.info("Conversation completed with invalid model: %s", e)
            state.violation = e
            state.status = INVALID

        return state
