# finance_app/core/config.py
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import List, Optional

class Settings(BaseSettings):
    PROJECT_NAME: str = "Finance Tracker Backend"
    API_V1_STR: str = "/api/v1"

    # Database
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "finance"

    DATABASE_URL: Optional[str] = None # Full override, takes precedence over POSTGRES_*
    DB_CREATE_TABLES: bool = False # Only for local development, migrations own the schema otherwise

    # Sessions are issued by the auth service, we only verify them
    SESSION_SECRET: str
    SESSION_MAX_AGE_HOURS: int = 24

    # Zone used to decide what "this month" / "this week" means for budgets
    BUDGET_TIMEZONE: str = "UTC"

    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: List[str] = []

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True

    @property
    def ASYNC_DATABASE_URL(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def SYNC_DATABASE_URL(self) -> str: # For Alembic
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"


@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
