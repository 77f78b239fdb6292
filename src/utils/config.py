"""Configuration management for the application."""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings."""

    # Store identity (used in the system prompt)
    store_name: str = "Gurtoy"
    store_domain: str = "thegurtoys.com"
    purchase_phone: str = "8300000086"
    support_phone: str = "9592020898"

    # LLM Configuration (OpenAI-compatible chat completions endpoint)
    llm_base_url: str = "https://api.a4f.co/v1"
    llm_api_key: str = ""  # Empty key disables the LLM call, a fallback reply is used
    llm_model: str = "provider-6/kimi-k2-instruct"
    llm_temperature: float = 0.2  # Low temperature for consistent support answers
    llm_max_tokens: int = 150
    llm_top_p: float = 0.7
    llm_frequency_penalty: float = 0.4
    llm_presence_penalty: float = 0.3
    llm_timeout: float = 30.0

    # Database
    database_url: str = "sqlite:///./support_assistant.db"

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 3565

    # Rate Limiting
    rate_limit_per_minute: int = 60

    # Redis Cache (chat history read-through cache)
    redis_url: str = "redis://localhost:6379/0"
    cache_enabled: bool = True
    cache_history_ttl: int = 300  # 5 minutes

    # In-process caches (in seconds)
    context_cache_ttl: int = 300  # 5 minutes
    product_index_ttl: int = 600  # 10 minutes
    context_load_timeout: Optional[float] = 15.0

    # Context documents
    context_source: str = "auto"  # Options: "auto", "local", "storage"
    context_files_dir: str = "."
    storage_url: Optional[str] = None  # e.g. https://<project>.supabase.co
    storage_key: Optional[str] = None
    storage_bucket: str = "ai-context"

    # Product catalog
    catalog_url_prefix: str = "https://thegurtoys.com/products/"
    catalog_brand_prefix: str = "gurtoy-"
    product_context_limit: int = 8

    # Conversation memory
    chat_history_limit: int = 6  # Turns loaded per chat request

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = "logs/app.log"

    # Environment Configuration
    environment: str = "development"  # development, staging, production

    # Production Settings
    production_mode: bool = False  # Auto-detected from environment

    # CORS Configuration (for production)
    cors_origins: str = "*"  # Comma-separated list of allowed origins

    class Config:
        env_file = ".env"
        case_sensitive = False

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Auto-detect production mode
        self.production_mode = (
            self.environment.lower() == "production" or
            self.environment.lower() == "prod"
        )

        if self.production_mode:
            # More restrictive logging in production
            if self.log_level == "INFO":
                self.log_level = "WARNING"

            if not self.llm_api_key:
                import warnings
                warnings.warn(
                    "WARNING: LLM_API_KEY is not set in production! "
                    "Every chat reply will be the fallback message."
                )

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev")


settings = Settings()
