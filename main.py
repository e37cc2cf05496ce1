import logging
from contextlib import asynccontextmanager

from smokefree.auth import routes as auth_router
from smokefree.quit_plans import routes as quit_plans_router
from smokefree.cravings import routes as cravings_router
from smokefree.statistics import routes as statistics_router
from smokefree.milestones import routes as milestones_router
from smokefree.chat import routes as chat_router
from smokefree.profile import routes as profile_router
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from smokefree.core.config import CORS_ORIGINS, LOG_LEVEL
from smokefree.core.database import Base, SessionLocal, engine
from smokefree.core.dependency import utc_now
from smokefree.milestones.catalog import seed_milestones

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def create_tables():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        seed_milestones(db, utc_now())
    finally:
        db.close()
    logger.info("Database ready")


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    yield


app = FastAPI(
    lifespan=lifespan,
    title="SmokeFree API",
    version="1.0.0",
    description="Backend for SmokeFree: quit plans, cravings, progress statistics, milestones and an AI coach.",
)

# CORS config
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth_router.router)
app.include_router(quit_plans_router.router)
app.include_router(cravings_router.router)
app.include_router(statistics_router.router)
app.include_router(milestones_router.router)
app.include_router(chat_router.router)
app.include_router(profile_router.router)


@app.get("/health", tags=["System"], summary="Liveness check")
def health():
    return {"status": "ok", "timestamp": utc_now()}

