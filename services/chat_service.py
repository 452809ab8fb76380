"""
Chat service containing core chat processing logic.
Builds prompts and message lists and shapes the response payload.
"""
from datetime import datetime
from typing import List, Optional

from config import Config
from models.api_models import ChatRequest
from models.chat_models import ChatMode, GenerationResult, QuotaDecision
from services.memory_service import MemoryService
from utils.constants import BASE_SYSTEM_PROMPT, THINK_SYSTEM_PROMPT


class ChatService:
    """Service for handling chat logic."""

    @staticmethod
    def get_system_prompt(request: ChatRequest) -> str:
        """System prompt for the request's mode. Memory is only read in think mode."""
        current_date = datetime.now().strftime("%Y-%m-%d")
        if ChatMode.parse(request.mode) == ChatMode.THINK:
            return THINK_SYSTEM_PROMPT.format(
                current_date=current_date,
                memory_context=MemoryService.build_context(request.memory),
            )
        return BASE_SYSTEM_PROMPT.format(current_date=current_date)

    @staticmethod
    def prepare_messages(request: ChatRequest, system_prompt: str) -> List[dict]:
        """System prompt followed by the most recent history messages."""
        history = [
            {"role": m.role, "content": m.content}
            for m in request.messages[-Config.MAX_HISTORY_MESSAGES:]
        ]
        return [{"role": "system", "content": system_prompt}] + history

    @staticmethod
    def last_user_text(request: ChatRequest) -> str:
        """Content of the latest user message, stripped."""
        for message in reversed(request.messages):
            if message.role == "user":
                return message.content.strip()
        return ""

    @staticmethod
    def build_response(
        request: ChatRequest,
        result: GenerationResult,
        quota: QuotaDecision,
        title: Optional[str],
        memory: Optional[str]
    ) -> dict:
        """Response payload; the answer is sent as both "response" and "answer"."""
        return {
            "response": result.text,
            "answer": result.text,
            "title": title,
            "mode": ChatMode.parse(request.mode).value,
            "model": result.model,
            "memory": memory,
            "remainingToday": quota.remaining,
            "maxPerDay": quota.max,
        }
