from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # CORS
    cors_origins: list[str] = ["http://localhost:5173"]

    # Extraction
    extraction_provider: str = "gemini"  # "gemini"

    # Gemini API
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash"
    gemini_timeout: int = 120

    # Session
    max_sessions: int = 1000


@lru_cache
def get_settings() -> Settings:
    return Settings()
