# oauth_store/adapters/configuration/config.py

from typing import Optional, List
from pydantic import PostgresDsn, field_validator, ConfigDict
from pydantic_settings import BaseSettings

from oauth_store.application.dtos.client_dto import ClientDescriptor

SUPPORTED_DRIVERS = ("memory", "sql")


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"

    # Environment
    ENVIRONMENT: str = "development"  # "development", "production", "testing"
    DEBUG: bool = False

    # Store selection: "memory" or "sql"
    DB_DRIVER: str = "memory"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 20

    # Relational store
    POSTGRES_USER: Optional[str] = None
    POSTGRES_PASSWORD: Optional[str] = None
    POSTGRES_DB: Optional[str] = None
    POSTGRES_HOST: Optional[str] = None
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None

    # Tokens
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 14

    # Pre-defined OAuth clients, JSON encoded when read from the environment
    CLIENTS: List[ClientDescriptor] = []

    @field_validator("DATABASE_URL", mode="before")
    def assemble_db_url(cls, value, info):
        if value:
            return str(value)

        data = info.data
        if not data.get("POSTGRES_HOST"):
            return None

        return str(PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=data.get("POSTGRES_USER"),
            password=data.get("POSTGRES_PASSWORD"),
            host=data["POSTGRES_HOST"],
            port=data.get("POSTGRES_PORT"),
            path=data.get("POSTGRES_DB"),
        ))

    @field_validator("DB_DRIVER", mode="before")
    def validate_driver(cls, v: str) -> str:
        driver = str(v).lower()
        if driver not in SUPPORTED_DRIVERS:
            raise ValueError(f"Invalid DB_DRIVER: {v!r}, expected one of {SUPPORTED_DRIVERS}")
        return driver

    @field_validator("LOG_LEVEL", mode="before")
    def validate_log_level(cls, v: str) -> str:
        """Normalizes the level name; VERBOSE is registered by oauth_store.shared.logging."""
        lvl = v.upper()
        return lvl

    model_config = ConfigDict(env_file=".env", validate_default=True)


settings = Settings()
