from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dev.db"
    DATABASE_ECHO: bool = False
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    SECRET_KEY: str = "change-this-secret"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30 * 24 * 60
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    PRODUCTS_PER_PAGE: int = 12
    RESET_DB: bool = False
    SEED_DEMO_DATA: bool = False
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
