from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from smokefree.chat import db as chat_db
from smokefree.chat.coach import CoachService, build_system_prompt
from smokefree.chat.schemas import ChatMessageBase, ChatResponse
from smokefree.core.config import CHAT_HISTORY_CONTEXT
from smokefree.profile.service import get_chatbot_tone
from smokefree.statistics.service import get_user_statistics

logger = logging.getLogger(__name__)

CRAVING_REPLY = """I understand you're experiencing a craving right now. Remember, cravings typically last only 3-5 minutes. Try these quick techniques:

1. Take 10 deep breaths - breathe in slowly through your nose, hold for 3 seconds, exhale through your mouth
2. Drink a glass of water slowly
3. Go for a short walk or do some light stretching
4. Call a supportive friend or family member

You've come so far - you can get through this moment! What coping strategy would you like to try first?"""

PROGRESS_REPLY = (
    "I'd love to share your progress with you! You can view your detailed statistics on the progress "
    "screen, including your smoke-free time, money saved, and health improvements. Every day smoke-free "
    "is a victory worth celebrating!"
)

BREATHING_REPLY = """Let's do a calming breathing exercise together:

1. Find a comfortable position and close your eyes if you'd like
2. Breathe in slowly through your nose for 4 counts
3. Hold your breath for 4 counts
4. Exhale slowly through your mouth for 6 counts
5. Repeat this cycle 5 times

This technique activates your body's relaxation response and can help reduce cravings. How are you feeling now?"""

DEFAULT_REPLY = """Thank you for reaching out. I'm here to support you on your quit smoking journey. Whether you're dealing with a craving, want to celebrate your progress, or just need someone to talk to, I'm here for you.

How can I help you today? You can ask me about:
- Coping strategies for cravings
- Your progress and statistics
- Breathing exercises and relaxation techniques
- Health benefits of quitting
- Or just chat about how you're feeling"""

# Checked in order, first match wins
FALLBACK_RULES = [
    (("craving", "urge", "want to smoke"), CRAVING_REPLY),
    (("progress", "how am i doing", "stats"), PROGRESS_REPLY),
    (("breathing", "breathe", "relax"), BREATHING_REPLY),
]


def get_fallback_response(message: str) -> str:
    """Canned reply picked by keyword, used whenever the coach is unavailable."""
    lowered = message.lower()
    for keywords, reply in FALLBACK_RULES:
        if any(keyword in lowered for keyword in keywords):
            return reply
    return DEFAULT_REPLY


def build_user_context(db: Session, user_id: UUID, now: datetime) -> Optional[str]:
    try:
        stats = get_user_statistics(db, user_id, now)
    except Exception as e:
        logger.error(f"Failed to build chat context for user {user_id}: {e}")
        return None
    if stats is None:
        return None
    return (
        f"The user has been smoke-free for {stats.smoke_free_time.days} days, "
        f"{stats.smoke_free_time.hours} hours. They have saved ${stats.money_saved:.2f} "
        f"and avoided {stats.cigarettes_not_smoked} cigarettes."
    )


def send_message(
    db: Session,
    user_id: UUID,
    message: str,
    coach: CoachService,
    now: datetime,
    include_context: bool = False,
) -> ChatResponse:
    """
    Stores the user's message, asks the coach for a reply and stores that too.

    The prompt is the system prompt in the user's preferred tone, optional
    progress context, up to CHAT_HISTORY_CONTEXT earlier messages oldest first,
    then the new message. If the coach fails the reply is a keyword-based
    fallback flagged with `fallback` in its metadata.
    """
    history = chat_db.get_recent_messages(db, user_id, CHAT_HISTORY_CONTEXT)
    user_message = chat_db.save_message(db, user_id, "user", message, now)

    messages: List[Dict[str, str]] = [
        {"role": "system", "content": build_system_prompt(get_chatbot_tone(db, user_id))}
    ]
    if include_context:
        context = build_user_context(db, user_id, now)
        if context:
            messages.append({"role": "system", "content": f"User context: {context}"})
    for past in reversed(history):
        messages.append({"role": past.role, "content": past.content})
    messages.append({"role": "user", "content": message})

    try:
        content, metadata = coach.reply(messages)
    except Exception as e:
        logger.error(f"Coach reply failed for user {user_id}: {e}")
        content = get_fallback_response(message)
        metadata = {"error": "Coach unavailable", "fallback": True}

    assistant_message = chat_db.save_message(db, user_id, "assistant", content, now, metadata)
    return ChatResponse(
        message=ChatMessageBase.model_validate(user_message),
        assistant_message=ChatMessageBase.model_validate(assistant_message),
    )


def get_chat_history(db: Session, user_id: UUID, limit: int = 50) -> List[ChatMessageBase]:
    return [ChatMessageBase.model_validate(m) for m in chat_db.get_recent_messages(db, user_id, limit)]


def delete_chat_history(db: Session, user_id: UUID) -> int:
    deleted = chat_db.delete_user_messages(db, user_id)
    logger.info(f"Deleted {deleted} chat messages for user {user_id}")
    return deleted
