from enum import Enum
from pydantic import BaseModel
from datetime import datetime
from typing import Optional
import uuid


class EventType(str, Enum):
    DESIGN_CHANGED = "design_changed"
    RECALC_REQUESTED = "recalc_requested"
    COST_REQUESTED = "cost_requested"


class PipelineEvent(BaseModel):
    id: str
    type: EventType
    timestamp: datetime
    project_id: str
    data: dict
    parent_id: Optional[str] = None

    @classmethod
    def create(
        cls,
        event_type: EventType,
        project_id: str,
        data: Optional[dict] = None,
        parent_id: Optional[str] = None
    ) -> "PipelineEvent":
        return cls(
            id=str(uuid.uuid4()),
            type=event_type,
            timestamp=datetime.utcnow(),
            project_id=project_id,
            data=data or {},
            parent_id=parent_id
        )
