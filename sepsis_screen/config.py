"""
Configuration loaded from environment variables (and an optional .env file).
"""

import os
from functools import lru_cache
from typing import Literal, cast

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Environment = Literal["development", "staging", "production"]


class DatabaseConfig(BaseModel):
    url: str = Field(default="sqlite:///./sepsis_screening.db", description="SQLAlchemy database URL")


class APIConfig(BaseModel):
    host: str = Field(default="0.0.0.0", description="API server host")
    port: int = Field(default=4000, gt=0, lt=65536, description="API server port")
    allowed_origins: list[str] = Field(default_factory=lambda: ["*"], description="Allowed origins for CORS")


class LoggingConfig(BaseModel):
    level: LogLevel = Field(default="INFO", description="Logging level")
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    environment: Environment = Field(default="development")
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    api: APIConfig = Field(default_factory=APIConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _env_to_literal(val: str) -> Environment:
    v = val.strip().lower()
    if v in {"dev", "development"}:
        return "development"
    if v in {"stage", "staging"}:
        return "staging"
    return "production"


def _level_to_literal(val: str) -> LogLevel:
    v = val.strip().upper()
    return cast(LogLevel, v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "INFO")


def load_config_from_env() -> AppConfig:
    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    default_format = "console" if environment == "development" else "json"
    log_format = os.getenv("LOG_FORMAT", default_format).strip().lower()

    return AppConfig(
        environment=environment,
        database=DatabaseConfig(url=os.getenv("DATABASE_URL", "sqlite:///./sepsis_screening.db")),
        api=APIConfig(
            host=os.getenv("API_HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "4000")),
            allowed_origins=[o.strip() for o in os.getenv("API_ALLOWED_ORIGINS", "*").split(",") if o.strip()],
        ),
        logging=LoggingConfig(
            level=_level_to_literal(os.getenv("LOG_LEVEL", "INFO")),
            format="console" if log_format == "console" else "json",
        ),
    )


@lru_cache
def get_config() -> AppConfig:
    """Cached application configuration."""
    return load_config_from_env()
