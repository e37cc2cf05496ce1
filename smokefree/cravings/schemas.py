from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class CravingBase(BaseSchema):
    id: UUID
    user_id: UUID
    intensity: int
    triggers: List[str]
    relief_techniques_used: List[str] = []
    duration: Optional[int] = None
    notes: Optional[str] = None
    resolved: bool
    created_at: datetime


class CravingCreate(BaseSchema):
    intensity: int = Field(..., ge=1, le=10)
    triggers: List[str] = Field(..., min_length=1, max_length=20)
    relief_techniques_used: Optional[List[str]] = Field(None, max_length=20)
    notes: Optional[str] = Field(None, max_length=500)


class CravingUpdate(BaseSchema):
    resolved: Optional[bool] = None
    duration: Optional[int] = Field(None, ge=0, le=86400)  # at most 24 hours
    relief_techniques_used: Optional[List[str]] = Field(None, max_length=20)

    @field_validator("resolved", "relief_techniques_used")
    @classmethod
    def not_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return v


class TriggerCount(BaseModel):
    trigger: str
    count: int


class DayCount(BaseModel):
    date: str
    count: int


class CravingAnalytics(BaseModel):
    total_cravings: int
    average_intensity: float
    most_common_triggers: List[TriggerCount]
    cravings_by_day: List[DayCount]
    resolution_rate: float
