from sqlalchemy import Column, Boolean, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from smokefree.core.database import Base

DEFAULT_CHATBOT_TONE = "empathetic"
DEFAULT_LANGUAGE = "en"
DEFAULT_THEME = "auto"


class UserPreferences(Base):
    __tablename__ = "user_preferences"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)

    notifications_enabled = Column(Boolean, nullable=False, default=True)
    daily_check_in_time = Column(String(5), nullable=True)  # HH:MM
    craving_alerts_enabled = Column(Boolean, nullable=False, default=True)
    ai_chatbot_tone = Column(String(20), nullable=False, default=DEFAULT_CHATBOT_TONE)
    language = Column(String(10), nullable=False, default=DEFAULT_LANGUAGE)
    theme = Column(String(10), nullable=False, default=DEFAULT_THEME)

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="preferences")
