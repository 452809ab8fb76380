"""
Authentication middleware for origin checks and bearer token verification.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from config import Config
from services.identity import IdentityService
from utils.logger import app_logger


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """
    Resolves the Authorization bearer token to a user id via the identity provider
    and stores it on request.state.user_id.
    """

    EXCLUDED_PATHS = {"/", "/docs", "/openapi.json", "/redoc"}

    @staticmethod
    def extract_token(request: Request) -> str:
        """Token from an "Authorization: Bearer <token>" header, or ""."""
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer":
            return ""
        return token.strip()

    async def dispatch(self, request: Request, call_next):
        """
        Process each request and verify its bearer token.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response from next handler or error response
        """
        if request.method == "OPTIONS" or request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        if not IdentityService.is_configured():
            app_logger.error("CRITICAL: SUPABASE_URL / SUPABASE_ANON_KEY not set in .env file!")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "detail": "Server misconfiguration: identity provider not configured.",
                    "error": "server_error"
                },
            )

        client_host = request.client.host if request.client else "unknown"
        token = self.extract_token(request)

        if not token:
            app_logger.warning(f"Unauthorized request from {client_host} - Missing bearer token")
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={
                    "detail": "Missing bearer token. Include 'Authorization: Bearer <token>' in your request.",
                    "error": "unauthorized"
                },
                headers={"WWW-Authenticate": "Bearer"},
            )

        user_id = await IdentityService.get_user_id(token)
        if not user_id:
            app_logger.warning(f"Unauthorized request from {client_host} - Invalid bearer token")
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={
                    "detail": "Invalid or expired bearer token",
                    "error": "unauthorized"
                },
                headers={"WWW-Authenticate": "Bearer"},
            )

        request.state.user_id = user_id
        response = await call_next(request)
        return response


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """
    Rejects browser requests from origins outside ALLOWED_ORIGINS before auth and quota run.
    Requests without an Origin header (curl, server-to-server) pass.
    """

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("Origin")
        allowed = Config.get_allowed_origins()

        if origin and "*" not in allowed and origin not in allowed:
            app_logger.warning(f"Forbidden request from origin {origin}")
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={
                    "detail": "Forbidden (bad origin)",
                    "error": "forbidden"
                },
            )

        return await call_next(request)
