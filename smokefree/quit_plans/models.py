import uuid
from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship
from smokefree.core.database import Base


class QuitPlan(Base):
    __tablename__ = "quit_plans"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # One plan per user
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, index=True, nullable=False)

    quit_date = Column(DateTime, index=True, nullable=False)
    cigarettes_per_day = Column(Integer, nullable=False)
    cost_per_pack = Column(Float, nullable=False)
    cigarettes_per_pack = Column(Integer, nullable=False, default=20)
    motivations = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    user = relationship("User", back_populates="quit_plan")
