from typing import List, Union
import logging

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    PROJECT_NAME: str = "PocketBooks"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", description="development / production")
    API_PREFIX: str = "/api"

    # CORS
    BACKEND_CORS_ORIGINS: List[Union[str, AnyHttpUrl]] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    # Database
    DATABASE_URI: str = "sqlite:///./pocketbooks.db"
    SQL_DEBUG: bool = False

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Nightly database backup
    AUTO_BACKUP_ENABLED: bool = True
    AUTO_BACKUP_HOUR: int = 3
    AUTO_BACKUP_MINUTE: int = 0
    AUTO_BACKUP_KEEP_COUNT: int = 7

    # Nightly asset payment recalculation
    ASSET_RECALC_ENABLED: bool = True
    ASSET_RECALC_HOUR: int = 2

    DEFAULT_COUNTRY: str = "India"

    @property
    def async_database_uri(self) -> str:
        """DATABASE_URI with the async driver swapped in."""
        if self.DATABASE_URI.startswith("sqlite:///"):
            return self.DATABASE_URI.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
        return self.DATABASE_URI

    @property
    def scheduler_enabled(self) -> bool:
        return self.AUTO_BACKUP_ENABLED or self.ASSET_RECALC_ENABLED

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
logger.info(f"Loaded settings: API_PREFIX={settings.API_PREFIX}, CORS={settings.BACKEND_CORS_ORIGINS}")
