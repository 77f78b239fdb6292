"""Pydantic schemas for stored users and chat turns."""
from pydantic import BaseModel, ConfigDict
from typing import Literal, Optional
from datetime import datetime


ChatRole = Literal["user", "assistant"]


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    preferred_language: Optional[str] = "en"
    created_at: Optional[datetime] = None


class ChatTurn(BaseModel):
    """One stored chat message."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    user_id: Optional[str] = None
    role: ChatRole
    message: str
    created_at: Optional[datetime] = None
