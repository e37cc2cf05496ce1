from datetime import datetime
from typing import Literal, Optional
from uuid import UUID
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

CHECK_IN_TIME = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")

ChatbotTone = Literal["empathetic", "motivational", "direct"]
Theme = Literal["light", "dark", "auto"]


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class PreferencesOut(BaseSchema):
    notifications_enabled: bool = True
    daily_check_in_time: Optional[str] = None
    craving_alerts_enabled: bool = True
    ai_chatbot_tone: ChatbotTone = "empathetic"
    language: str = "en"
    theme: Theme = "auto"


class ProfileOut(BaseSchema):
    id: UUID
    email: str
    name: str
    profile_picture_url: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None
    preferences: PreferencesOut


class ProfileUpdate(BaseSchema):
    """An empty `profile_picture_url` removes the picture."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    profile_picture_url: Optional[str] = Field(None, max_length=2048)

    @field_validator("name")
    @classmethod
    def name_not_null(cls, v):
        if v is None:
            raise ValueError("name cannot be null")
        return v

    @field_validator("profile_picture_url")
    @classmethod
    def picture_is_url(cls, v):
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("profile_picture_url must be an http(s) URL")
        return v


class PreferencesUpdate(BaseSchema):
    """Partial update. `daily_check_in_time` is cleared with null or an empty string."""

    notifications_enabled: Optional[bool] = None
    daily_check_in_time: Optional[str] = None
    craving_alerts_enabled: Optional[bool] = None
    ai_chatbot_tone: Optional[ChatbotTone] = None
    language: Optional[str] = Field(None, min_length=2, max_length=10)
    theme: Optional[Theme] = None

    @field_validator(
        "notifications_enabled", "craving_alerts_enabled", "ai_chatbot_tone", "language", "theme"
    )
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v

    @field_validator("daily_check_in_time")
    @classmethod
    def check_in_time_format(cls, v):
        if v and not CHECK_IN_TIME.match(v):
            raise ValueError("Time must be in HH:MM format")
        return v
