from datetime import datetime
from pydantic import BaseModel


class SmokeFreeDuration(BaseModel):
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    total_seconds: int = 0
    total_minutes: int = 0
    total_hours: int = 0
    total_days: int = 0


class LifeRegained(BaseModel):
    minutes: int
    hours: int
    days: int


class UserStatistics(BaseModel):
    smoke_free_time: SmokeFreeDuration
    money_saved: float
    cigarettes_not_smoked: int
    life_regained: LifeRegained
    current_streak: int
    quit_date: datetime


class SmokeFreeTimer(BaseModel):
    smoke_free_time: SmokeFreeDuration
    timestamp: datetime
