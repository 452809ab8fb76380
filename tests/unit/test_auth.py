import pytest
from starlette.testclient import TestClient
from starlette.applications import Starlette
from starlette.responses import PlainTextResponse

from tests.helpers import VALID_TOKEN, TEST_USER_ID


async def whoami(request):
    return PlainTextResponse(request.state.user_id)

async def root(request):
    return PlainTextResponse("API Running")

async def preflight(request):
    return PlainTextResponse("ok")

@pytest.fixture
def app_with_middleware(identity_stub):
    from auth import BearerAuthMiddleware

    app = Starlette()
    app.add_middleware(BearerAuthMiddleware)
    app.add_route("/", root)
    app.add_route("/whoami", whoami)
    app.add_route("/preflight", preflight, methods=["OPTIONS"])
    return app

@pytest.fixture
def client(app_with_middleware):
    return TestClient(app_with_middleware)

@pytest.mark.parametrize("scheme", ["Bearer", "bearer", "BEARER"])
def test_bearer_middleware_accepts_case_insensitive_scheme(client, scheme):
    """Given a valid token, when the scheme is sent with different casings, it should be accepted."""
    response = client.get("/whoami", headers={"Authorization": f"{scheme} {VALID_TOKEN}"})
    assert response.status_code == 200
    assert response.text == TEST_USER_ID

def test_bearer_middleware_rejects_missing_header(client):
    """Given no Authorization header, when accessing a protected route, it should return 401 Unauthorized."""
    response = client.get("/whoami")
    assert response.status_code == 401
    assert response.json()["detail"] == "Missing bearer token. Include 'Authorization: Bearer <token>' in your request."
    assert response.json()["error"] == "unauthorized"

def test_bearer_middleware_rejects_invalid_token(client):
    """Given a token the identity provider rejects, it should return 401 Unauthorized."""
    response = client.get("/whoami", headers={"Authorization": "Bearer wrong-token"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired bearer token"
    assert response.json()["error"] == "unauthorized"

def test_bearer_middleware_handles_malformed_header(client):
    """Given a non-bearer Authorization header, it should be treated as missing."""
    response = client.get("/whoami", headers={"Authorization": f"Basic {VALID_TOKEN}"})
    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"

def test_bearer_middleware_skips_health_check(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "API Running"

def test_bearer_middleware_passes_preflight(client):
    """Given an OPTIONS request, the middleware should not ask for a token."""
    response = client.options("/preflight")
    assert response.status_code == 200

def test_bearer_middleware_unconfigured_provider_returns_500(client, monkeypatch):
    from config import Config
    monkeypatch.setattr(Config, "SUPABASE_URL", "")

    response = client.get("/whoami", headers={"Authorization": f"Bearer {VALID_TOKEN}"})
    assert response.status_code == 500
    assert response.json()["error"] == "server_error"
