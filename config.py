"""
Configuration module for the Sohbet Bridge application.
Handles environment variables and application settings.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Application configuration class."""

    # Identity provider (Supabase auth)
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "").rstrip("/")
    SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")

    # CORS
    ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", "")

    # LLM API
    LLM_HOST: str = os.getenv("LLM_HOST", "http://localhost:11434")
    LLM_API_KEY: str = os.getenv("LLM_API_KEY", "")
    LLM_MODEL: str = os.getenv("LLM_MODEL", "llama3.1:8b")
    LLM_MODEL_FAST: str = os.getenv("LLM_MODEL_FAST", "")
    LLM_MODEL_THINK: str = os.getenv("LLM_MODEL_THINK", "")

    # Application Settings
    APP_TITLE: str = "Sohbet Bridge"
    MAX_HISTORY_MESSAGES: int = 30
    DEFAULT_MAX_REQ_PER_DAY: int = 40
    QUOTA_DB_PATH: str = os.getenv("QUOTA_DB_PATH", "data/quota.db")
    TITLE_USE_MODEL: bool = _env_bool("TITLE_USE_MODEL", True)
    TITLE_VOCABULARY_PATH: str = os.getenv("TITLE_VOCABULARY_PATH", "")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_COLOR: bool = _env_bool("LOG_COLOR", True)

    # Timeouts (in seconds)
    IDENTITY_TIMEOUT: float = 10.0

    @classmethod
    def get_max_requests_per_day(cls) -> int:
        """Daily per-user request budget, never less than 1."""
        raw = os.getenv("MAX_REQ_PER_DAY", "")
        try:
            value = int(raw) if raw.strip() else cls.DEFAULT_MAX_REQ_PER_DAY
        except ValueError:
            value = cls.DEFAULT_MAX_REQ_PER_DAY
        return max(1, value)

    @classmethod
    def get_allowed_origins(cls) -> list[str]:
        """Parse the comma separated origin allow-list. Empty means any origin."""
        origins = [o.strip() for o in cls.ALLOWED_ORIGINS.split(",") if o.strip()]
        return origins or ["*"]

    @classmethod
    def get_llm_headers(cls) -> dict:
        """Headers sent with every LLM API call."""
        if cls.LLM_API_KEY:
            return {"Authorization": f"Bearer {cls.LLM_API_KEY}"}
        return {}

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and print warnings for missing settings."""
        if not cls.SUPABASE_URL or not cls.SUPABASE_ANON_KEY:
            print("   WARNING: SUPABASE_URL / SUPABASE_ANON_KEY not found in .env file")
            print("   Every authenticated request will be rejected until they are configured.")

        if not cls.LLM_MODEL:
            print("   WARNING: LLM_MODEL is empty")
            print("   Model selection will rely on LLM_MODEL_FAST / LLM_MODEL_THINK only.")

Config.validate()
