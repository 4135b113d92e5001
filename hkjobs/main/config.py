from functools import lru_cache
import logging
import os
from pathlib import Path
from typing import Any, Literal

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class ApiConfig(BaseModel):
    API_BASE_URL: str = "http://localhost:3001/api"
    API_TIMEOUT_SECONDS: float = Field(30.0, gt=0)
    API_REFRESH_PATH: str = "/auth/refresh"

    model_config = ConfigDict(extra="ignore")

    @field_validator("API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class RetryConfig(BaseModel):
    RETRY_ATTEMPTS: int = Field(3, ge=1)
    RETRY_BASE_DELAY_SECONDS: float = Field(1.0, ge=0)
    RETRY_MAX_DELAY_SECONDS: float = Field(30.0, ge=0)

    model_config = ConfigDict(extra="ignore")


class StorageConfig(BaseModel):
    TOKEN_STORAGE_BACKEND: Literal["memory", "file", "redis"] = "file"
    TOKEN_STORAGE_PATH: str = "~/.hkjobs/tokens.json"
    TOKEN_KEY_PREFIX: str = "hkjf"

    model_config = ConfigDict(extra="ignore")

    @property
    def storage_path(self) -> Path:
        return Path(self.TOKEN_STORAGE_PATH).expanduser()


class CacheConfig(BaseModel):
    CACHE_ENABLED: bool = True
    CACHE_BACKEND: Literal["memory", "redis"] = "memory"
    CACHE_TTL_SECONDS: int = Field(300, gt=0)

    model_config = ConfigDict(extra="ignore")


class RedisConfig(BaseModel):
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str = ""
    REDIS_DATABASE: str = "0"

    model_config = ConfigDict(extra="ignore")

    @property
    def dsn(self) -> str:
        auth = f":{self.REDIS_PASSWORD}@" if self.REDIS_PASSWORD else ""
        return (
            f"redis://"
            f"{auth}"
            f"{self.REDIS_HOST}:"
            f"{self.REDIS_PORT}/"
            f"{self.REDIS_DATABASE}"
        )


class SentryConfig(BaseModel):
    SENTRY_DSN: str | None = None
    SENTRY_ENV: str = "development"
    SENTRY_ENABLED: bool = False

    model_config = ConfigDict(extra="ignore")


class AppConfig(BaseModel):
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    TESTING: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_LEVEL_FILE: str = "WARNING"
    LOG_TO_FILE: bool = False
    LOG_DIR: str | None = None

    PROJECT_NAME: str = "hkjobs-client"

    model_config = ConfigDict(extra="ignore")

    @field_validator("LOG_LEVEL", "LOG_LEVEL_FILE")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        return value.strip().upper()


class Config(BaseModel):
    app: AppConfig
    api: ApiConfig
    retry: RetryConfig
    storage: StorageConfig
    cache: CacheConfig
    redis: RedisConfig
    sentry: SentryConfig

    model_config = ConfigDict(extra="ignore")


def build_config(values: dict[str, Any]) -> Config:
    """Build every config section from one flat mapping of env-style keys."""
    return Config(
        app=AppConfig(**values),
        api=ApiConfig(**values),
        retry=RetryConfig(**values),
        storage=StorageConfig(**values),
        cache=CacheConfig(**values),
        redis=RedisConfig(**values),
        sentry=SentryConfig(**values),
    )


@lru_cache
def get_settings() -> Config:
    """
    Cached settings factory. Override in tests via monkeypatching or by passing
    an explicit Config to JobBoardClient.from_config.
    """
    env_filename = ".env.test" if os.getenv("TESTING") == "true" else ".env"
    env_file_values = dotenv_values(env_filename)
    merged_env: dict[str, Any] = {
        k: v
        for k, v in {**env_file_values, **dict(os.environ)}.items()
        if v is not None
    }
    logger.debug("Loading settings (env file: %s)", env_filename)

    return build_config(merged_env)


config = get_settings()
