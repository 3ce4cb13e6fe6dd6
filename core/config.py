from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # AI provider (OpenRouter, OpenAI-compatible)
    openrouter_api_key: str | None = Field(None, alias="OPENROUTER_API_KEY")
    openrouter_model: str = Field("qwen/qwen3-4b:free", alias="OPENROUTER_MODEL")
    openrouter_base_url: str = Field("https://openrouter.ai/api/v1", alias="OPENROUTER_BASE_URL")
    # OpenRouter attribution headers
    openrouter_referer: str = Field("https://replit.com", alias="OPENROUTER_REFERER")
    openrouter_title: str = Field("MetabolicAI", alias="OPENROUTER_TITLE")

    # HTTP server
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(5000, alias="PORT")
    static_dir: str = Field("dist", alias="STATIC_DIR")

    # CORS / Web
    allowed_origins: str = Field("http://localhost:5173,http://localhost:3000", alias="ALLOWED_ORIGINS")

    # History persistence
    history_backend: str = Field("file", alias="HISTORY_BACKEND")  # file|memory|redis
    history_dir: str = Field("data", alias="HISTORY_DIR")
    history_key: str = Field("health_history", alias="HISTORY_KEY")
    redis_url: str = Field("redis://localhost:6379/0", alias="REDIS_URL")

    # Relay base for the command-line client
    api_base_url: str = Field("http://127.0.0.1:5000", alias="API_BASE")
    api_timeout_seconds: float = Field(60.0, alias="API_TIMEOUT_SECONDS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
