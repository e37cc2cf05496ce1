import logging
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID, uuid4

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from smokefree.milestones.models import Milestone, UserMilestone

logger = logging.getLogger(__name__)

_UPSERT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


# Catalog
def list_milestones(db: Session) -> List[Milestone]:
    return (
        db.query(Milestone)
        .order_by(Milestone.duration_hours.asc(), Milestone.category.asc(), Milestone.name.asc())
        .all()
    )

def get_milestone(db: Session, milestone_id: UUID) -> Optional[Milestone]:
    return db.query(Milestone).filter(Milestone.id == milestone_id).first()


# Unlock records
def get_user_milestone(db: Session, user_id: UUID, milestone_id: UUID) -> Optional[UserMilestone]:
    return db.query(UserMilestone).filter(
        UserMilestone.user_id == user_id,
        UserMilestone.milestone_id == milestone_id
    ).first()

def get_user_milestones(db: Session, user_id: UUID) -> List[UserMilestone]:
    return (
        db.query(UserMilestone)
        .filter(UserMilestone.user_id == user_id)
        .order_by(UserMilestone.unlocked_at.desc())
        .all()
    )

def get_unlocked_at_by_milestone(db: Session, user_id: UUID) -> Dict[UUID, datetime]:
    rows = db.query(UserMilestone.milestone_id, UserMilestone.unlocked_at).filter(
        UserMilestone.user_id == user_id
    ).all()
    return {row.milestone_id: row.unlocked_at for row in rows}

def insert_user_milestone_if_absent(
    db: Session, user_id: UUID, milestone_id: UUID, unlocked_at: datetime
) -> Optional[UserMilestone]:
    """
    Atomically records an unlock unless one already exists for (user, milestone).

    Relies on the uq_user_milestone constraint, so concurrent callers across
    processes still end up with a single row.

    Returns:
        Optional[UserMilestone]: The new record, or None if the milestone was already unlocked.
    """
    values = {
        "id": uuid4(),
        "user_id": user_id,
        "milestone_id": milestone_id,
        "unlocked_at": unlocked_at,
        "shared": False,
    }

    insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
    if insert is not None:
        stmt = (
            insert(UserMilestone)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["user_id", "milestone_id"])
            .returning(UserMilestone.id)
        )
        inserted_id = db.execute(stmt).scalar_one_or_none()
        db.commit()
        if inserted_id is None:
            logger.debug("Milestone %s already unlocked for user %s", milestone_id, user_id)
            return None
        return db.query(UserMilestone).filter(UserMilestone.id == inserted_id).first()

    # Other dialects: let the unique constraint reject the duplicate inside a savepoint
    record = UserMilestone(**values)
    try:
        with db.begin_nested():
            db.add(record)
    except IntegrityError:
        logger.debug("Milestone %s already unlocked for user %s", milestone_id, user_id)
        db.commit()
        return None
    db.commit()
    db.refresh(record)
    return record

def set_milestone_shared(db: Session, user_id: UUID, milestone_id: UUID) -> bool:
    updated = db.query(UserMilestone).filter(
        UserMilestone.user_id == user_id,
        UserMilestone.milestone_id == milestone_id
    ).update({UserMilestone.shared: True}, synchronize_session=False)
    db.commit()
    return updated > 0
