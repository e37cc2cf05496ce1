from datetime import datetime, timezone
from functools import lru_cache
import logging

from smokefree.auth.mailer import LoggingResetMailer, ResetMailer
from smokefree.chat.coach import CoachService, OpenAICoachService

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    """Current wall-clock time as naive UTC, the form every timestamp is stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_utc_naive(value: datetime) -> datetime:
    """Normalizes an incoming instant to naive UTC. Naive inputs are assumed to be UTC already."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def get_now() -> datetime:
    """
    FastAPI dependency providing the request's notion of "now".

    Statistics and milestone progress are computed against this value, so tests
    override it to pin the clock.
    """
    return utc_now()


@lru_cache(maxsize=None)
def _openai_coach() -> CoachService:
    return OpenAICoachService()


def get_coach() -> CoachService:
    """
    FastAPI dependency that returns the AI coach used by the chat routes.
    """
    return _openai_coach()


@lru_cache(maxsize=None)
def _reset_mailer() -> ResetMailer:
    return LoggingResetMailer()


def get_reset_mailer() -> ResetMailer:
    return _reset_mailer()
