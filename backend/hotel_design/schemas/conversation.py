"""Pydantic schemas for the guided hotel-setup conversation."""

from typing import Annotated, Optional, List, Dict, Literal
from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr


MessageRole = Literal["system", "user", "assistant"]

ResponseType = Literal["text", "choices", "table", "areas"]


class ChatMessage(BaseModel):
    """One entry of the conversation history."""
    role: MessageRole
    content: str = ""


class Question(BaseModel):
    """Next prompt to render, with hints for the answer widget."""
    id: str
    text: str
    responseType: ResponseType
    choices: Optional[List[str]] = None
    allowCustom: Optional[bool] = None
    multiSelect: Optional[bool] = None
    floorCount: Optional[int] = Field(None, description="Rows of the room-mix table")
    roomTypes: Optional[List[str]] = Field(None, description="Columns of the room-mix table")
    publicAreas: Optional[List[str]] = Field(None, description="Selectable public area names")


class FloorMixEntry(BaseModel):
    floorIndex: StrictInt = Field(ge=1)
    roomsByType: Dict[StrictStr, Annotated[StrictInt, Field(ge=0)]]


class PublicAreaSelection(BaseModel):
    area: StrictStr
    enabled: StrictBool
    size: StrictInt = Field(ge=0)


class HotelBaseModel(BaseModel):
    """Validated description of the hotel produced by the conversation."""
    siteLocation: StrictStr = Field(min_length=1)
    brandFlag: StrictStr = Field(min_length=1)
    floorCount: StrictInt = Field(ge=1, le=40)
    roomTypes: List[StrictStr] = Field(min_length=1)
    floorMix: List[FloorMixEntry]
    publicAreas: List[PublicAreaSelection]


class ChatRequest(BaseModel):
    messages: List[ChatMessage]


class QuestionResponse(BaseModel):
    question: Question


class CompletionResponse(BaseModel):
    model: HotelBaseModel
    projectId: str
    message: str
