from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class QuitPlanBase(BaseSchema):
    id: UUID
    user_id: UUID
    quit_date: datetime
    cigarettes_per_day: int
    cost_per_pack: float
    cigarettes_per_pack: int
    motivations: List[str]
    created_at: datetime
    updated_at: datetime


class QuitPlanCreate(BaseSchema):
    quit_date: datetime
    cigarettes_per_day: int = Field(..., ge=1, le=200)
    cost_per_pack: float = Field(..., gt=0, le=1000)
    cigarettes_per_pack: Optional[int] = Field(None, ge=1, le=50)
    motivations: List[str] = Field(..., min_length=1, max_length=20)


class QuitPlanUpdate(BaseSchema):
    quit_date: Optional[datetime] = None
    cigarettes_per_day: Optional[int] = Field(None, ge=1, le=200)
    cost_per_pack: Optional[float] = Field(None, gt=0, le=1000)
    cigarettes_per_pack: Optional[int] = Field(None, ge=1, le=50)
    motivations: Optional[List[str]] = Field(None, min_length=1, max_length=20)


class QuitDateUpdate(BaseSchema):
    quit_date: datetime


class Savings(BaseModel):
    daily: float
    weekly: float
    monthly: float
    yearly: float


class QuitPlanResponse(BaseModel):
    quit_plan: QuitPlanBase
    savings: Savings
