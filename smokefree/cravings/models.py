import uuid
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, JSON, Index, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
from smokefree.core.database import Base


class Craving(Base):
    __tablename__ = "cravings"

    id = Column(Uuid(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)

    intensity = Column(Integer, nullable=False)
    triggers = Column(JSON, nullable=False, default=list)
    relief_techniques_used = Column(JSON, nullable=False, default=list)
    duration = Column(Integer, nullable=True)  # seconds until the craving passed
    notes = Column(String, nullable=True)
    resolved = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, index=True, nullable=False)

    user = relationship("User", back_populates="cravings")

    __table_args__ = (
        CheckConstraint("intensity >= 1 AND intensity <= 10", name="ck_craving_intensity"),
        Index("ix_cravings_user_created", "user_id", "created_at"),
    )
