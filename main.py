"""
Sohbet Bridge - FastAPI application proxying a Turkish chat front end to a hosted LLM.
Featuring per-user daily quotas, fast/think model routing with fallback, and heuristic title generation.
"""
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from config import Config
from routes import chat, title
from auth import BearerAuthMiddleware, OriginGuardMiddleware
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown events."""
    yield
    await HTTPClientManager.close_all()


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed bodies with 400 and a readable message."""
    errors = exc.errors()
    app_logger.error(f"Validation error for {request.url}")
    app_logger.error(f"Errors: {errors}")

    if errors:
        first_error = errors[0]
        error_type = first_error.get('type', '')
        field = first_error.get('loc', [])[-1] if first_error.get('loc') else 'body'

        if error_type == 'json_invalid':
            message = "Request body must be valid JSON"
        elif error_type == 'too_short':
            message = f"Field '{field}' must not be empty"
        else:
            message = f"{field}: {first_error.get('msg', 'Validation error')}"

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "detail": [{
                    "msg": message,
                    "type": error_type,
                    "loc": list(first_error.get('loc', []))
                }],
                "error": "bad_request"
            },
        )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": [], "error": "bad_request"},
    )


app = FastAPI(title=Config.APP_TITLE, lifespan=lifespan)

app.add_exception_handler(RequestValidationError, validation_exception_handler)

# Added first so the CORS layer wraps auth and answers preflights itself;
# the origin guard runs before auth so a foreign origin never reaches quota
app.add_middleware(BearerAuthMiddleware)
app.add_middleware(OriginGuardMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=86400,
)

#root endpoint
@app.get("/")
async def root():
    """Root endpoint - health check."""
    return {"message": "Sohbet Bridge Server is running"}

app.include_router(chat.router, tags=["chat"])
app.include_router(title.router, tags=["title"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
