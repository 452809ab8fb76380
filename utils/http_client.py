"""
HTTP client utilities with connection pooling.
Provides reusable httpx clients.
"""
import httpx
from config import Config


class HTTPClientManager:
    """Manages shared clients with connection pooling."""

    _identity_client: httpx.AsyncClient | None = None

    @classmethod
    def get_identity_client(cls) -> httpx.AsyncClient:
        """
        Get or create a shared httpx client for identity provider calls.

        Features:
        - Connection pooling (reuses TCP connections to the auth endpoint)

        Returns:
            Configured httpx.AsyncClient
        """
        if cls._identity_client is None:
            limits = httpx.Limits(
                max_connections=20,
                max_keepalive_connections=10,
                keepalive_expiry=60.0
            )

            cls._identity_client = httpx.AsyncClient(
                timeout=Config.IDENTITY_TIMEOUT,
                limits=limits,
                http2=True
            )

        return cls._identity_client

    @classmethod
    async def close_all(cls) -> None:
        """
        Close all managed clients and clean up connections.
        """
        if cls._identity_client is not None:
            await cls._identity_client.aclose()
            cls._identity_client = None
