# schemas/user_schema.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

class UserCreate(BaseModel):
    email: str = Field(..., examples=["test@example.com"])
    role: Optional[str] = "user"


class UserResponse(BaseModel):
    id: int
    email: str
    role: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserCreated(BaseModel):
    message: str
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
