"""API request/response schemas."""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any

from src.database.schemas import ChatTurn


class _Request(BaseModel):
    # Accept both the frontend's camelCase keys and snake_case
    model_config = ConfigDict(populate_by_name=True)


class ChatRequest(_Request):
    user_id: Optional[str] = Field(default=None, alias="userId")
    message: Optional[str] = None
    user_name: Optional[str] = Field(default=None, alias="userName")
    user_email: Optional[str] = Field(default=None, alias="userEmail")


class ChatResponse(BaseModel):
    user_message: ChatTurn
    assistant_message: ChatTurn
    success: bool = True


class HistoryRequest(_Request):
    user_id: Optional[str] = Field(default=None, alias="userId")
    limit: int = Field(default=50, ge=1, le=200)


class HistoryResponse(BaseModel):
    chat_history: List[ChatTurn]
    success: bool = True


class WarmCacheRequest(BaseModel):
    force: bool = False


class WarmCacheResponse(BaseModel):
    success: bool
    message: str
    context_files_loaded: bool
    product_index_warmed: bool
    timestamp: str


class PerformanceStats(BaseModel):
    timestamp: str
    context_cache: Dict[str, Any]
    product_index: Dict[str, Any]
    system: Dict[str, Any]
