"""Application configuration."""
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenAI
    openai_api_key: Optional[str] = None  # required when text_generator is openai
    openai_model: str = "gpt-4o-mini"
    text_generator: str = "openai"  # openai, canned
    generation_timeout_seconds: float = 20.0

    # Bot
    bot_name: str = "Quick Eats Bot"
    payment_methods: List[str] = ["Cash on Delivery", "Online Payment"]

    # Orders
    order_backend: str = "memory"  # memory, sql
    strict_agent_assignment: bool = True
    toast_timeout_seconds: float = 6.0

    # Data files (bundled defaults are used when unset)
    agents_file: Optional[str] = None
    menu_file: Optional[str] = None

    # Database
    database_url: str = "sqlite+aiosqlite:///./quickorder.db"

    # Admin dashboard
    dashboard_password: str = "admin"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


settings = Settings()
