"""
Tests for the hotel-setup conversation.

These tests verify that:
1. Each user answer fills at most one slot, in order
2. Answers that cannot be parsed leave the slot unfilled
3. The same history always produces the same result
4. A completed conversation is validated before a model is returned
"""

import json

import pytest
from hotel_design.schemas.conversation import ChatMessage
from hotel_design.services.conversation_engine import (
    AWAITING_ANSWER,
    COMPLETE,
    INVALID,
    ConversationEngine,
)
from hotel_design.services.model_validator import SchemaViolation, validate_model
from hotel_design.services.slot_schema import (
    SLOTS,
    ChoiceSlot,
    TextSlot,
    extract,
    last_user_content,
    parse_leading_int,
)


def user(content: str) -> ChatMessage:
    return ChatMessage(role="user", content=content)


def assistant(content: str) -> ChatMessage:
    return ChatMessage(role="assistant", content=content)


ROOM_MIX = json.dumps([
    {"floorIndex": 1, "roomsByType": {"Standard King": 18, "Accessible Room": 2}},
    {"floorIndex": 2, "roomsByType": {"Standard King": 18, "Accessible Room": 2}},
    {"floorIndex": 3, "roomsByType": {"Standard King": 20, "Accessible Room": 0}},
])

PUBLIC_AREAS = json.dumps([
    {"area": "Lobby", "enabled": True, "size": 1200},
    {"area": "Pool", "enabled": False, "size": 0},
])


def full_history(floors: str = "3", room_mix: str = ROOM_MIX) -> list:
    return [
        assistant("Where is the hotel?"),
        user("Austin, TX"),
        assistant("Which brand?"),
        user("hilton"),
        assistant("How many floors?"),
        user(floors),
        assistant("Which room types?"),
        user('["Standard King", "Accessible Room"]'),
        assistant("Room mix?"),
        user(room_mix),
        assistant("Public areas?"),
        user(PUBLIC_AREAS),
    ]


class TestSlotExtraction:
    """Tests for per-slot answer extraction."""

    def test_last_user_content_skips_assistant(self):
        history = [user("first"), assistant("reply")]
        assert last_user_content(history) == "first"

    def test_last_user_content_none_without_user(self):
        assert last_user_content([assistant("hi")]) is None

    def test_leading_int_parsing(self):
        assert parse_leading_int("12") == 12
        assert parse_leading_int(" 12 floors") == 12
        assert parse_leading_int("twelve") is None
        assert parse_leading_int("NaN") is None

    def test_blank_text_does_not_fill(self):
        slot = TextSlot(id="location", prompt="Where?")
        assert extract(slot, [user("   ")]) is None

    def test_single_choice_is_case_insensitive(self):
        slot = ChoiceSlot(id="brand", prompt="Brand?", choices=["Hilton", "Hyatt"])
        assert extract(slot, [user("HYATT")]) == "Hyatt"

    def test_single_choice_custom_only_when_allowed(self):
        closed = ChoiceSlot(id="brand", prompt="Brand?", choices=["Hilton"])
        open_ = ChoiceSlot(id="brand", prompt="Brand?", choices=["Hilton"], allow_custom=True)
        assert extract(closed, [user("Boutique Co")]) is None
        assert extract(open_, [user("Boutique Co")]) == "Boutique Co"

    def test_multi_select_rejects_unknown_option(self):
        slot = ChoiceSlot(id="roomTypes", prompt="?", choices=["Suite"], multi_select=True)
        assert extract(slot, [user('["Suite", "Treehouse"]')]) is None

    def test_multi_select_empty_list_does_not_fill(self):
        slot = ChoiceSlot(id="roomTypes", prompt="?", choices=["Suite"], multi_select=True)
        assert extract(slot, [user("[]")]) is None

    def test_multi_select_accepts_bare_option(self):
        slot = ChoiceSlot(id="roomTypes", prompt="?", choices=["Suite"], multi_select=True)
        assert extract(slot, [user("suite")]) == ["Suite"]

    def test_table_requires_json_array_of_objects(self):
        slot = SLOTS[4]
        assert extract(slot, [user("lots of rooms")]) is None
        assert extract(slot, [user('[1, 2]')]) is None
        assert extract(slot, [user('[{"floorIndex": 1, "roomsByType": {}}]')]) == [
            {"floorIndex": 1, "roomsByType": {}}
        ]

    def test_no_public_areas_is_a_valid_answer(self):
        assert extract(SLOTS[5], [user("[]")]) == []


class TestConversationEngine:
    """Tests for ConversationEngine.advance."""

    def test_empty_history_asks_first_question(self):
        state = ConversationEngine().advance([])

        assert state.status == AWAITING_ANSWER
        assert state.next_slot_index == 0
        assert state.question.id == "location"
        assert state.question.responseType == "text"

    def test_answers_fill_slots_in_order(self):
        state = ConversationEngine().advance([user("Austin, TX"), user("Hilton")])

        assert state.values == {"location": "Austin, TX", "brand": "Hilton"}
        assert state.question.id == "floors"

    def test_unparseable_floor_count_stalls(self):
        """A non-numeric floor answer leaves the floors slot current."""
        engine = ConversationEngine()
        history = [user("Austin"), user("Hilton"), user("NaN")]

        state = engine.advance(history)

        assert "floors" not in state.values
        assert state.question.id == "floors"

        state = engine.advance(history + [user("6 floors")])
        assert state.values["floors"] == 6
        assert state.question.id == "roomTypes"

    def test_choice_question_carries_widget_hints(self):
        state = ConversationEngine().advance([user("Austin")])

        assert state.question.id == "brand"
        assert "Hilton" in state.question.choices
        assert state.question.allowCustom is True
        assert state.question.multiSelect is False

    def test_table_question_carries_floor_count_and_room_types(self):
        history = [user("Austin"), user("Hilton"), user("3"), user('["Suite"]')]
        state = ConversationEngine().advance(history)

        assert state.question.id == "roomMix"
        assert state.question.responseType == "table"
        assert state.question.floorCount == 3
        assert state.question.roomTypes == ["Suite"]

    def test_same_history_same_question(self):
        """Resubmitting identical history must not advance the conversation."""
        engine = ConversationEngine()
        history = [user("Austin"), user("Hilton")]

        first = engine.advance(history)
        second = engine.advance(history)

        assert first.question == second.question
        assert first.values == second.values

    def test_full_history_completes(self):
        state = ConversationEngine().advance(full_history())

        assert state.status == COMPLETE
        assert state.is_complete
        assert state.model.siteLocation == "Austin, TX"
        assert state.model.brandFlag == "Hilton"
        assert state.model.floorCount == 3
        assert len(state.model.floorMix) == 3
        assert state.model.publicAreas[0].area == "Lobby"

    def test_out_of_range_floor_count_is_invalid(self):
        state = ConversationEngine().advance(full_history(floors="50"))

        assert state.status == INVALID
        assert state.model is None
        assert state.violation.field == "floorCount"

    def test_room_mix_length_mismatch_is_invalid(self):
        state = ConversationEngine().advance(full_history(floors="4"))

        assert state.status == INVALID
        assert state.violation.field == "floorMix"

    def test_extra_messages_after_completion_are_ignored(self):
        history = full_history() + [user("one more thing")]
        state = ConversationEngine().advance(history)

        assert state.status == COMPLETE


class TestModelValidator:
    """Tests for validate_model."""

    def _values(self, **overrides) -> dict:
        values = {
            "location": "Denver",
            "brand": "Hyatt",
            "floors": 1,
            "roomTypes": ["Suite"],
            "roomMix": [{"floorIndex": 1, "roomsByType": {"Suite": 10}}],
            "publicAreas": [],
        }
        values.update(overrides)
        return values

    def test_valid_values_build_model(self):
        model = validate_model(self._values())
        assert model.floorMix[0].roomsByType == {"Suite": 10}

    def test_negative_room_count_names_field(self):
        mix = [{"floorIndex": 1, "roomsByType": {"Suite": -1}}]

        with pytest.raises(SchemaViolation) as exc:
            validate_model(self._values(roomMix=mix))

        assert exc.value.field.startswith("floorMix.0.roomsByType")

    def test_string_room_count_rejected(self):
        mix = [{"floorIndex": 1, "roomsByType": {"Suite": "10"}}]

        with pytest.raises(SchemaViolation):
            validate_model(self._values(roomMix=mix))

    def test_missing_slot_rejected(self):
        values = self._values()
        del values["brand"]

        with pytest.raises(SchemaViolation) as exc:
            validate_model(values)

        assert exc.value.field == "brandFlag"

    def test_duplicate_floor_index_rejected(self):
        mix = [
            {"floorIndex": 1, "roomsByType": {"Suite": 1}},
            {"floorIndex": 1, "roomsByType": {"Suite": 1}},
        ]

        with pytest.raises(SchemaViolation) as exc:
            validate_model(self._values(floors=2, roomMix=mix))

        assert exc.value.field == "floorMix"

    def test_negative_area_size_rejected(self):
        areas = [{"area": "Lobby", "enabled": True, "size": -5}]

        with pytest.raises(SchemaViolation) as exc:
            validate_model(self._values(publicAreas=areas))

        assert exc.value.to_dict()["field"] == "publicAreas.0.size"
