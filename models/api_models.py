"""
Pydantic data models for API requests and responses.
"""
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Message(BaseModel):
    """Chat message model."""
    role: str = "user"  # "user", "assistant" or "system"
    content: str = ""

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> str:
        """The front end sends "model" for assistant turns."""
        role = str(value or "user").strip().lower()
        if role == "model":
            return "assistant"
        if role not in ("user", "assistant", "system"):
            return "user"
        return role

    @field_validator("content", mode="before")
    @classmethod
    def coerce_content(cls, value: Any) -> str:
        return "" if value is None else str(value)


class ChatRequest(BaseModel):
    """Chat request model with conversation history."""
    model_config = ConfigDict(populate_by_name=True)

    messages: List[Message] = Field(..., min_length=1)
    mode: Optional[str] = "fast"
    memory: Optional[str] = Field(None, description="Durable user facts from earlier think-mode turns")
    generate_title: bool = Field(False, alias="generateTitle")
    update_memory: bool = Field(False, alias="updateMemory")

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, value: Any) -> str:
        """Anything but the literal "think" means fast mode."""
        return "think" if value == "think" else "fast"


class TitleRequest(BaseModel):
    """Standalone title generation request."""
    model_config = ConfigDict(populate_by_name=True)

    first_message: Optional[str] = Field(None, alias="firstMessage")

    @field_validator("first_message", mode="before")
    @classmethod
    def coerce_first_message(cls, value: Any) -> str:
        """Numbers and other scalars are titled as their text."""
        return "" if value is None else str(value)
