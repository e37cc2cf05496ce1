import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from smokefree.core.database import Base


class Milestone(Base):
    __tablename__ = "milestones"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(String, nullable=False)
    category = Column(String(50), index=True, nullable=False)  # time, health, savings, achievement
    duration_hours = Column(Float, index=True, nullable=False, default=0)  # hours after the quit date
    threshold_value = Column(Float, nullable=True)
    threshold_unit = Column(String(30), nullable=True)  # hours, resolved_cravings, dollars
    icon = Column(String(50), nullable=True)
    created_at = Column(DateTime, nullable=False)


class UserMilestone(Base):
    __tablename__ = "user_milestones"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    milestone_id = Column(Uuid(as_uuid=True), ForeignKey("milestones.id", ondelete="CASCADE"), index=True, nullable=False)
    unlocked_at = Column(DateTime, nullable=False)
    shared = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="milestones")
    milestone = relationship("Milestone", lazy="joined")

    __table_args__ = (
        UniqueConstraint("user_id", "milestone_id", name="uq_user_milestone"),
    )
