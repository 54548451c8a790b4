from pydantic_settings import BaseSettings
from pydantic import field_validator
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/directorio"

    @field_validator('DATABASE_URL', mode='before')
    @classmethod
    def convert_database_url(cls, v: str) -> str:
        """Convert postgresql:// to postgresql+asyncpg:// for async support."""
        if v and v.startswith('postgresql://'):
            return v.replace('postgresql://', 'postgresql+asyncpg://', 1)
        return v

    # CORS
    FRONTEND_URL: str = "http://localhost:5173"

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Statistics
    NEW_REGISTRATION_WINDOW_DAYS: int = 30

    # Bulk import
    IMPORT_MAX_ROWS: int = 5000

    # Insert default categories and plans into an empty database on startup
    SEED_DEFAULT_DATA: bool = True

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str | None = None
    DOCS_ENABLED_IN_PRODUCTION: bool = False

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def docs_enabled(self) -> bool:
        """API docs are served outside production unless explicitly enabled."""
        return not self.is_production or self.DOCS_ENABLED_IN_PRODUCTION

    @property
    def sqlalchemy_echo(self) -> bool:
        # Never echo SQL in production, statements may carry personal data
        return self.DEBUG and not self.is_production

    @property
    def log_level(self) -> str:
        if self.LOG_LEVEL:
            return self.LOG_LEVEL.upper()
        return "DEBUG" if self.DEBUG else "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
