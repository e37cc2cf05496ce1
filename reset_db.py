from smokefree.core.database import Base, SessionLocal, engine
from smokefree.core.dependency import utc_now
from smokefree.milestones.catalog import seed_milestones


def reset_database():
    print("Dropping all tables...")
    Base.metadata.drop_all(bind=engine)

    print("Recreating tables...")
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        inserted = seed_milestones(db, utc_now())
    finally:
        db.close()
    print(f"Tables recreated, {inserted} milestones seeded.")

if __name__ == "__main__":
    reset_database()
