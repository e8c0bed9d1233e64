from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


# QUEST CREATE + RESPONSE SCHEMA
class QuestCreate(BaseModel):
    title: str = Field(..., examples=["Apply for SNAP benefits"])
    category: str = Field(..., examples=["core"])
    jurisdiction: str = Field(..., examples=["MA"])


class QuestOut(BaseModel):
    id: int
    title: str
    category: str
    jurisdiction: str
    creation_user_id: Optional[int] = None
    deletion_time: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
