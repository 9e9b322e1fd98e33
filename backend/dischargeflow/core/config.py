from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    APP_NAME: str = "DischargeFlow"
    VERSION: str = "1.0.0"
    API_PREFIX: str = "/api/v1"

    DATABASE_URL: str = "sqlite:///./database.sqlite"

    LOG_LEVEL: str = "INFO"
    HOST: str = "localhost"
    PORT: int = 3000

    # External text-generation service (chat-completions style endpoint)
    GENERATION_API_ENDPOINT: Optional[str] = None
    GENERATION_API_KEY: Optional[str] = None
    GENERATION_MODEL: str = "gemini-1.5-flash"
    GENERATION_MAX_TOKENS: int = 1024
    GENERATION_TIMEOUT: float = 60.0
    GENERATION_MOCK_MODE: bool = False  # Echo-style drafts when no endpoint is reachable

    # 1 = fail on first upstream error
    GENERATION_MAX_ATTEMPTS: int = 1
    GENERATION_RETRY_WAIT: float = 2.0

    class Config:
        env_file = ".env"


settings = Settings()
