from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class MilestoneBase(BaseSchema):
    id: UUID
    name: str
    description: str
    category: str
    duration_hours: float
    threshold_value: Optional[float] = None
    threshold_unit: Optional[str] = None
    icon: Optional[str] = None


class UserMilestoneBase(BaseSchema):
    id: UUID
    user_id: UUID
    milestone_id: UUID
    unlocked_at: datetime
    shared: bool
    milestone: MilestoneBase


class TimeRemaining(BaseModel):
    hours: int
    days: int


class MilestoneProgress(BaseModel):
    milestone: MilestoneBase
    unlocked: bool
    unlocked_at: Optional[datetime] = None
    progress_percent: int
    time_remaining: Optional[TimeRemaining] = None


class BestStreak(BaseModel):
    best_streak: int
