from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy.orm import Session
from smokefree.chat.models import ChatMessage


def save_message(
    db: Session,
    user_id: UUID,
    role: str,
    content: str,
    created_at: datetime,
    metadata: Optional[Dict[str, Any]] = None,
) -> ChatMessage:
    message = ChatMessage(
        id=uuid4(),
        user_id=user_id,
        role=role,
        content=content,
        message_metadata=metadata,
        created_at=created_at,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message

def get_recent_messages(db: Session, user_id: UUID, limit: int = 50) -> List[ChatMessage]:
    return (
        db.query(ChatMessage)
        .filter(ChatMessage.user_id == user_id)
        # An exchange shares one timestamp; the reply sorts as the newer of the two
        .order_by(ChatMessage.created_at.desc(), ChatMessage.role.asc())
        .limit(limit)
        .all()
    )

def delete_user_messages(db: Session, user_id: UUID) -> int:
    deleted = db.query(ChatMessage).filter(ChatMessage.user_id == user_id).delete(synchronize_session=False)
    db.commit()
    return deleted
