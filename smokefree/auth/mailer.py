from abc import ABC, abstractmethod
import logging

logger = logging.getLogger(__name__)


class ResetMailer(ABC):
    @abstractmethod
    def send_reset(self, email: str, token: str) -> None:
        """Delivers a password reset token to the account's e-mail address."""


class LoggingResetMailer(ResetMailer):
    """Stand-in used until an e-mail provider is configured. The token itself is never logged."""

    def send_reset(self, email: str, token: str) -> None:
        logger.warning(f"No e-mail provider configured; password reset for {email} was not delivered")
