from pydantic import BaseModel, Field, field_serializer
from typing import Dict, List, Optional
from datetime import datetime, timedelta, timezone


class UserQuestCreate(BaseModel):
    quest_id: int


class StatusUpdate(BaseModel):
    # Plain string so unknown values reach the service and get the domain error
    status: str = Field(..., examples=["inProgress"])


class StatusOut(BaseModel):
    status: Optional[str] = None


class CountOut(BaseModel):
    count: int


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def to_epoch_ms(value: Optional[datetime]) -> Optional[int]:
    """Unix timestamp in milliseconds; naive values are stored UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return (value - _EPOCH) // timedelta(milliseconds=1)


class UserQuestOut(BaseModel):
    """A user's progress record merged with the quest it points at."""

    id: int
    user_id: int
    quest_id: int
    status: str
    completion_time: Optional[datetime] = None
    created_at: Optional[datetime] = None
    title: str
    category: str
    jurisdiction: str

    @field_serializer("completion_time")
    def serialize_completion_time(self, value: Optional[datetime]) -> Optional[int]:
        return to_epoch_ms(value)


UserQuestGroups = Dict[str, List[UserQuestOut]]
