"""Assemble and strictly validate the hotel base model from filled slots."""

from typing import Dict, Any

from pydantic import ValidationError

from hotel_design.schemas.conversation import HotelBaseModel


# Slot id -> model field
SLOT_FIELDS = {
    "location": "siteLocation",
    "brand": "brandFlag",
    "floors": "floorCount",
    "roomTypes": "roomTypes",
    "roomMix": "floorMix",
    "publicAreas": "publicAreas",
}


class SchemaViolation(Exception):
    """The assembled model failed validation on `field`."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


def _field_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "model"


def validate_model(slot_values: Dict[str, Any]) -> HotelBaseModel:
    """
    Build a HotelBaseModel from the slot-value map.

    Every field is checked for type and range before the model is returned,
    and the room mix must have exactly one entry per floor.

    Raises:
        SchemaViolation: naming the first offending field
    """
    payload = {
        model_field: slot_values.get(slot_id)
        for slot_id, model_field in SLOT_FIELDS.items()
    }

    try:
        model = HotelBaseModel.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        raise SchemaViolation(_field_path(first["loc"]), first["msg"]) from e

    if len(model.floorMix) != model.floorCount:
        raise SchemaViolation(
            "floorMix",
            f"Expected {model.floorCount} floor entries, got {len(model.floorMix)}",
        )

    indexes = [entry.floorIndex for entry in model.floorMix]
    if len(set(indexes)) != len(indexes):
        raise SchemaViolation("floorMix", "Each floorIndex must appear once")

    return model
