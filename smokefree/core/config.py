import os
from dotenv import load_dotenv

load_dotenv()  # Load from .env file

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./smokefree.db")

# SQLAlchemy only understands the postgresql:// scheme
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# Token & Auth
SECRET_KEY = os.getenv("SECRET_KEY", "change-this-secret-key")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))
PASSWORD_RESET_EXPIRE_MINUTES = int(os.getenv("PASSWORD_RESET_EXPIRE_MINUTES", "60"))

# HTTP
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Quit plan rules
QUIT_DATE_MAX_FUTURE_DAYS = int(os.getenv("QUIT_DATE_MAX_FUTURE_DAYS", "14"))
QUIT_DATE_PAST_GRACE_HOURS = int(os.getenv("QUIT_DATE_PAST_GRACE_HOURS", "24"))
DEFAULT_CIGARETTES_PER_PACK = int(os.getenv("DEFAULT_CIGARETTES_PER_PACK", "20"))

# Average minutes of life expectancy lost per cigarette
LIFE_MINUTES_PER_CIGARETTE = int(os.getenv("LIFE_MINUTES_PER_CIGARETTE", "11"))

# OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_CHAT_MODEL = os.getenv("OPENAI_CHAT_MODEL", "gpt-3.5-turbo")
CHAT_HISTORY_CONTEXT = int(os.getenv("CHAT_HISTORY_CONTEXT", "10"))
