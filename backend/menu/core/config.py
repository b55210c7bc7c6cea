# backend/menu/core/config.py
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    app_name: str = "Menu"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "postgresql+asyncpg://localhost:5432/menu"
    database_echo: bool = False
    auto_create_tables: bool = False

    # LLM Providers
    anthropic_api_key: str | None = None
    openai_api_key: str | None = None
    anthropic_model: str = "claude-sonnet-4-20250514"
    openai_model: str = "gpt-4-turbo-preview"

    # Auth
    allowed_email_domain: str = "@danielokita.com"
    session_cookie_name: str = "auth-session"
    session_expire_days: int = 30
    session_renew_days: int = 15

    # Recipe generation cache
    recipe_cache_ttl_hours: int = 24

    # OpenFoodFacts ingredient lookup
    openfoodfacts_base_url: str = "https://world.openfoodfacts.org"
    openfoodfacts_user_agent: str = "MenuApp/1.0 (https://github.com/okita-dev/menu)"
    openfoodfacts_timeout_seconds: float = 10.0

    # Frontend
    frontend_url: str = "http://localhost:5173"

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
