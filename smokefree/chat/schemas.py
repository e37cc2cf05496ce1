from datetime import datetime
from typing import Any, Dict, Literal, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class ChatMessageBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: UUID
    user_id: UUID
    role: Literal["user", "assistant", "system"]
    content: str
    metadata: Optional[Dict[str, Any]] = Field(default=None, validation_alias="message_metadata")
    created_at: datetime


class SendMessageRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=2000)
    include_context: bool = False


class ChatResponse(BaseModel):
    message: ChatMessageBase
    assistant_message: ChatMessageBase


class DeletedCount(BaseModel):
    deleted_count: int
