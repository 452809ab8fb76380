import pytest
from unittest.mock import AsyncMock

from tests.helpers import VALID_TOKEN, TEST_USER_ID


@pytest.fixture
def mock_llm_client():
    """Reusable mock for ollama.AsyncClient returning a fixed answer."""
    client = AsyncMock()

    async def chat_side_effect(model, messages, **kwargs):
        return {"message": {"content": "Merhaba! Size nasıl yardımcı olabilirim?"}}

    client.chat.side_effect = chat_side_effect
    return client


@pytest.fixture
def quota_store(tmp_path):
    """QuotaStore backed by a throwaway SQLite file."""
    from utils.quota_store import QuotaStore
    return QuotaStore(db_path=str(tmp_path / "quota.db"))


@pytest.fixture
def model_config(monkeypatch):
    """Deterministic model identifiers."""
    from config import Config
    monkeypatch.setattr(Config, "LLM_MODEL", "base-model")
    monkeypatch.setattr(Config, "LLM_MODEL_FAST", "")
    monkeypatch.setattr(Config, "LLM_MODEL_THINK", "deep-model")


@pytest.fixture
def auth_headers():
    """Authentication headers for API requests."""
    return {"Authorization": f"Bearer {VALID_TOKEN}"}


@pytest.fixture
def identity_stub(monkeypatch):
    """Identity provider that accepts only VALID_TOKEN."""
    from config import Config
    from services.identity import IdentityService

    async def fake_get_user_id(token):
        return TEST_USER_ID if token == VALID_TOKEN else None

    monkeypatch.setattr(Config, "SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setattr(Config, "SUPABASE_ANON_KEY", "anon-key")
    monkeypatch.setattr(IdentityService, "get_user_id", staticmethod(fake_get_user_id))


@pytest.fixture
def configured_app(monkeypatch, mock_llm_client, quota_store, model_config, identity_stub):
    """Pre-configured app with all standard mocks."""
    from fastapi import FastAPI
    from fastapi.exceptions import RequestValidationError
    from fastapi.testclient import TestClient
    from auth import BearerAuthMiddleware, OriginGuardMiddleware
    from main import validation_exception_handler
    from routes import chat, title

    monkeypatch.delenv("MAX_REQ_PER_DAY", raising=False)
    monkeypatch.setattr("utils.quota_store._quota_store", quota_store)

    app = FastAPI()
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_middleware(BearerAuthMiddleware)
    app.add_middleware(OriginGuardMiddleware)
    app.include_router(chat.router)
    app.include_router(title.router)

    monkeypatch.setattr("routes.chat.ollama.AsyncClient", lambda **kwargs: mock_llm_client)
    monkeypatch.setattr("routes.title.ollama.AsyncClient", lambda **kwargs: mock_llm_client)

    with TestClient(app) as client:
        yield client
