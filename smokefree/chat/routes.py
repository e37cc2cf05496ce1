from datetime import datetime
from uuid import UUID
from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Security
from sqlalchemy.orm import Session

from smokefree.auth.service import get_current_user_id
from smokefree.chat.coach import CoachService
from smokefree.chat.schemas import ChatMessageBase, ChatResponse, DeletedCount, SendMessageRequest
from smokefree.chat.service import delete_chat_history, get_chat_history, send_message
from smokefree.core.database import get_db
from smokefree.core.dependency import get_coach, get_now

router = APIRouter(prefix="/chat", tags=["Chat"])
logger = logging.getLogger(__name__)


@router.post(
    "/message",
    response_model=ChatResponse,
    summary="Talk to the AI coach",
    description="Stores the message and the coach's reply. Falls back to a canned reply if the coach is unavailable.",
    responses={
        200: {"description": "Reply generated."},
        401: {"description": "Unauthorized."},
        500: {"description": "Failed to send message."},
    },
)
def send_message_route(
    req: SendMessageRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
    coach: CoachService = Depends(get_coach),
    now: datetime = Depends(get_now),
) -> ChatResponse:
    try:
        return send_message(db, user_id, req.message, coach, now, include_context=req.include_context)
    except Exception as e:
        logger.error(f"Failed to send chat message for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to send message")


@router.get(
    "/history",
    response_model=List[ChatMessageBase],
    summary="Get chat history",
    description="Most recent messages first.",
    responses={
        200: {"description": "History retrieved."},
        401: {"description": "Unauthorized."},
    },
)
def read_history_route(
    limit: int = Query(50, ge=1, le=200),
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> List[ChatMessageBase]:
    return get_chat_history(db, user_id, limit)


@router.delete(
    "/history",
    response_model=DeletedCount,
    summary="Delete chat history",
    responses={
        200: {"description": "History deleted."},
        401: {"description": "Unauthorized."},
    },
)
def delete_history_route(
    db: Session = Depends(get_db),
    user_id: UUID = Security(get_current_user_id),
) -> DeletedCount:
    return DeletedCount(deleted_count=delete_chat_history(db, user_id))
