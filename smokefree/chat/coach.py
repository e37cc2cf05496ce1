from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple
import logging

from openai import OpenAI

from smokefree.core.config import OPENAI_API_KEY, OPENAI_CHAT_MODEL

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are an empathetic AI coach helping people quit smoking. Your role is to:
- Provide emotional support and encouragement
- Offer evidence-based coping strategies for cravings
- Celebrate milestones and progress
- Provide health information about quitting smoking
- Guide users through breathing exercises and relaxation techniques
- Detect crisis language and recommend professional help when needed

Be warm, supportive, and non-judgmental. Keep responses concise (2-3 paragraphs max).
If you detect crisis language (suicidal thoughts, severe depression), immediately recommend contacting a crisis hotline."""

TONE_INSTRUCTIONS = {
    "empathetic": "Lead with understanding. Acknowledge how the user feels before suggesting anything.",
    "motivational": "Be upbeat and energizing. Celebrate wins and push the user toward their next goal.",
    "direct": "Be brief and practical. Skip the pep talk and give clear, concrete steps.",
}

EMPTY_REPLY = "I apologize, but I encountered an error. Please try again."


def build_system_prompt(tone: str) -> str:
    instruction = TONE_INSTRUCTIONS.get(tone, TONE_INSTRUCTIONS["empathetic"])
    return f"{SYSTEM_PROMPT}\n\nTone: {instruction}"


class CoachService(ABC):
    model_tag: str

    @abstractmethod
    def reply(self, messages: List[Dict[str, str]]) -> Tuple[str, Dict[str, Any]]:
        """
        Generates the assistant's answer to a chat transcript.

        Returns:
            Tuple[str, Dict[str, Any]]: Reply text and metadata to store with it.
        """


class OpenAICoachService(CoachService):
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key or OPENAI_API_KEY
        self.model_tag = model or OPENAI_CHAT_MODEL
        self._client: Optional[OpenAI] = None

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            if not self.api_key:
                raise RuntimeError("Missing OPENAI_API_KEY in environment")
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def reply(self, messages: List[Dict[str, str]]) -> Tuple[str, Dict[str, Any]]:
        resp = self.client.chat.completions.create(
            model=self.model_tag,
            messages=messages,
            max_tokens=500,
            temperature=0.7,
        )
        choice = resp.choices[0]
        tokens_used = resp.usage.total_tokens if resp.usage else None
        logger.info(f"OpenAI chat completion used {tokens_used} tokens")
        return choice.message.content or EMPTY_REPLY, {
            "model": resp.model,
            "tokens_used": tokens_used,
            "finish_reason": choice.finish_reason,
        }
