"""
Identity service that resolves a bearer token to a user id via the Supabase auth API.
"""
from typing import Optional

import httpx

from config import Config
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


class IdentityService:
    """Validates access tokens against the external identity provider."""

    @staticmethod
    def is_configured() -> bool:
        return bool(Config.SUPABASE_URL and Config.SUPABASE_ANON_KEY)

    @staticmethod
    async def get_user_id(access_token: str) -> Optional[str]:
        """
        Look up the user behind an access token.

        Args:
            access_token: Bearer token sent by the client

        Returns:
            The user id, or None if the provider rejects the token or cannot be reached
        """
        client = HTTPClientManager.get_identity_client()
        try:
            response = await client.get(
                f"{Config.SUPABASE_URL}/auth/v1/user",
                headers={
                    "apikey": Config.SUPABASE_ANON_KEY,
                    "Authorization": f"Bearer {access_token}",
                },
            )
        except httpx.HTTPError as e:
            app_logger.error(f"Identity provider request failed: {e}")
            return None

        if not response.is_success:
            app_logger.debug(f"Identity provider rejected token (status {response.status_code})")
            return None

        try:
            data = response.json()
        except ValueError:
            app_logger.error("Identity provider returned a non-JSON body")
            return None

        user_id = data.get("id") if isinstance(data, dict) else None
        return str(user_id) if user_id else None
