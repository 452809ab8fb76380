"""
Route handlers for chat operations.
Handles the /chat endpoint: quota check, model routing, optional title and memory update.
"""
from typing import Optional

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
import ollama

from config import Config
from models.api_models import ChatRequest
from models.chat_models import ChatMode
from services.chat_service import ChatService
from services.memory_service import MemoryService
from services.model_router import ModelRouter
from services.quota_service import QuotaService
from services.title_service import TitleService
from utils.constants import GENERATION_FAILED_MESSAGE, QUOTA_EXCEEDED_MESSAGE
from utils.exceptions import QuotaExceededError, UpstreamGenerationError
from utils.logger import app_logger

router = APIRouter()


def send_quota_exceeded_error(e: QuotaExceededError) -> JSONResponse:
    """Daily limit reached; the client may retry tomorrow."""
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "error": "DAILY_LIMIT",
            "message": QUOTA_EXCEEDED_MESSAGE,
            "maxPerDay": e.max_per_day,
        },
    )


def send_generation_error(e: UpstreamGenerationError) -> JSONResponse:
    """Every applicable model failed."""
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={
            "error": "AI_ERROR",
            "message": GENERATION_FAILED_MESSAGE,
            "detail": e.message,
        },
    )


async def derive_title_safely(client, model: str, prompt: str) -> Optional[str]:
    """Title generation never blocks the answer."""
    if not prompt:
        return None
    try:
        return await TitleService.generate_title(client, model, prompt)
    except Exception as e:
        app_logger.error(f"Title generation failed: {e}")
        return None


@router.post("/chat")
async def chat(http_request: Request, request: ChatRequest):
    """
    Chat endpoint with daily quota, mode-based model routing and fallback.
    """
    user_id = http_request.state.user_id
    mode = ChatMode.parse(request.mode)

    try:
        quota = QuotaService().admit(user_id)
        if not quota.admitted:
            raise QuotaExceededError(quota.max)

        client = ollama.AsyncClient(host=Config.LLM_HOST, headers=Config.get_llm_headers())
        model_router = ModelRouter()
        primary = model_router.select_model(mode)

        system_prompt = ChatService.get_system_prompt(request)
        messages = ChatService.prepare_messages(request, system_prompt)

        app_logger.info(f"LLM call: {primary} ({mode.value} mode, {len(messages)} messages)")
        result = await model_router.invoke_with_fallback(client, primary, messages, mode)
        app_logger.info(f"LLM call completed by {result.model}: {len(result.text)} characters")

        title = None
        if request.generate_title:
            title = await derive_title_safely(client, result.model, ChatService.last_user_text(request))

        memory = None
        if mode == ChatMode.THINK and request.update_memory:
            memory = await MemoryService.update_memory(
                client, result.model, request.memory, messages, result.text
            )

        return ChatService.build_response(request, result, quota, title, memory)

    except QuotaExceededError as e:
        return send_quota_exceeded_error(e)
    except UpstreamGenerationError as e:
        app_logger.error(f"Generation failed: {e.message}")
        return send_generation_error(e)
