from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Database
    DB_HOST: str = "127.0.0.1"
    DB_PORT: int = 3306
    DB_USERNAME: str = "root"
    DB_PASSWORD: str = ""
    DB_DRIVER: str = "mysql+pymysql"
    DB_DATABASE: str = ""
    DB_QUERY_TIMEOUT: int = 30
    DB_POOL_SIZE: int = 5

    # Posts table lives in this schema/database when set
    POSTS_SCHEMA: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"

    @property
    def backend_params(self) -> dict:
        return {
            "host": self.DB_HOST,
            "port": self.DB_PORT,
            "username": self.DB_USERNAME,
            "password": self.DB_PASSWORD,
        }


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
