"""
Route handler for standalone title generation.
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
import ollama

from config import Config
from models.api_models import TitleRequest
from models.chat_models import ChatMode
from services.model_router import ModelRouter
from services.title_service import TitleService
from utils.constants import TITLE_REQUIRED_MESSAGE

router = APIRouter()


@router.post("/generate-title")
async def generate_title(request: TitleRequest):
    """Derive a short title from the first message of a conversation."""
    first_message = (request.first_message or "").strip()
    if not first_message:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": TITLE_REQUIRED_MESSAGE},
        )

    client = ollama.AsyncClient(host=Config.LLM_HOST, headers=Config.get_llm_headers())
    model = ModelRouter().select_model(ChatMode.FAST)
    title = await TitleService.generate_title(client, model, first_message)
    return {"title": title}
