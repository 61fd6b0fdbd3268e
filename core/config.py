from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    DATABASE_URL: str = "sqlite+aiosqlite:///suggestions.db"
    OPENAI_API_KEY: str | None = None
    OPENAI_URL: str = "https://api.openai.com/v1/chat/completions"
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_TIMEOUT_SECONDS: float = 30.0
    SUGGESTION_BATCH_SIZE: int = 10
    SUGGESTION_CONTEXT_WORDS: int = 3
    GENERATION_TIMEOUT_SECONDS: float | None = None
    REFRESH_INTERVAL_SECONDS: int = 86400
    LOG_LEVEL: str = "INFO"


settings = Settings()
