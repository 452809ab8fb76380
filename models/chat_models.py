"""
Data models for chat processing.
Contains quota decisions, generation results and the mode enum.
"""
from dataclasses import dataclass
from enum import Enum


class ChatMode(str, Enum):
    """Caller-selected quality/latency tradeoff."""
    FAST = "fast"
    THINK = "think"

    @classmethod
    def parse(cls, value) -> "ChatMode":
        """Only the literal "think" selects deep mode; everything else is fast."""
        if isinstance(value, ChatMode):
            return value
        return cls.THINK if value == cls.THINK.value else cls.FAST


@dataclass
class QuotaDecision:
    """Outcome of a daily quota admission check."""
    admitted: bool
    remaining: int
    max: int


@dataclass
class GenerationResult:
    """Text produced by the LLM and the model that actually produced it."""
    text: str
    model: str
