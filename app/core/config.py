from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()

PLACEHOLDER_MARKERS = ("your-project", "your_", "placeholder", "changeme")
PLACEHOLDER_AI_KEYS = ("test-key", "your_google_api_key_here")


class Settings(BaseSettings):
    SUPABASE_URL: str = ""
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""
    GOOGLE_API_KEY: str = ""
    GOOGLE_MODEL: str = "gemini-2.5-flash"
    ANALYTICS_HOST: str = ""
    ANALYTICS_API_KEY: str = ""
    SCRAPER_TIMEOUT_SECONDS: float = 10.0
    GENERATE_RATE_LIMIT: int = 10
    GENERATE_RATE_PERIOD_SECONDS: int = 60
    LOGIN_PATH: str = "/login"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()


class ConfigCheck(BaseModel):
    """Outcome of a dependency configuration check."""
    ok: bool
    error: Optional[str] = None


def _looks_like_placeholder(value: str) -> bool:
    lowered = value.lower()
    return any(marker in lowered for marker in PLACEHOLDER_MARKERS)


def validate_supabase_config(config: Optional[Settings] = None) -> ConfigCheck:
    """Check that the Supabase URL and key are set and not template values."""
    config = config or settings
    url = config.SUPABASE_URL
    key = config.SUPABASE_SERVICE_ROLE_KEY or config.SUPABASE_ANON_KEY

    if not url or not key:
        return ConfigCheck(ok=False, error="Supabase configuration incomplete")
    if _looks_like_placeholder(url):
        return ConfigCheck(ok=False, error="Supabase URL is using placeholder value")
    if _looks_like_placeholder(key):
        return ConfigCheck(ok=False, error="Supabase key is using placeholder value")
    return ConfigCheck(ok=True)


def validate_ai_config(config: Optional[Settings] = None) -> ConfigCheck:
    config = config or settings
    key = config.GOOGLE_API_KEY
    if not key:
        return ConfigCheck(ok=False, error="Google API key not configured")
    if key in PLACEHOLDER_AI_KEYS or _looks_like_placeholder(key):
        return ConfigCheck(ok=False, error="Google API key is using placeholder value")
    return ConfigCheck(ok=True)


def validate_analytics_config(config: Optional[Settings] = None) -> ConfigCheck:
    config = config or settings
    if not config.ANALYTICS_HOST or not config.ANALYTICS_API_KEY:
        return ConfigCheck(ok=False, error="Analytics not configured")
    return ConfigCheck(ok=True)
