"""Application configuration with environment variables and K8s secrets support."""
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError


# =============================================================================
# LOCAL DEBUG OVERRIDE - Change this to test other environments locally
# =============================================================================
LOCAL_ENV_OVERRIDE: "Environment | None" = None  # e.g., Environment.DEV


# =============================================================================
# K8s Secrets Config
# =============================================================================
# Secret path: /etc/{SECRETS_FOLDER_NAME}/{PROJECT_KEY}_{secret_name}
# e.g., /etc/secrets/image_dock_database-url
SECRETS_FOLDER_NAME: str = os.getenv("SECRETS_FOLDER_NAME", "secrets")
PROJECT_KEY: str = os.getenv("PROJECT_KEY", "image_dock")
SECRETS_BASE_PATH: str = f"/etc/{SECRETS_FOLDER_NAME}" if SECRETS_FOLDER_NAME else ""

DEFAULT_UPLOAD_MAX_BYTES = 10 * 1024 * 1024  # 10 MiB


class Environment(str, Enum):
    LOCAL = "local"
    DEV = "dev"
    UAT = "uat"
    PREPROD = "preprod"
    PROD = "prod"


class ConfigurationError(Exception):
    """Raised when required configuration is missing or malformed at startup."""


def read_secret_from_file(secret_name: str, base_path: str | None) -> str | None:
    """Read secret from K8s mounted file."""
    if not base_path:
        return None
    secret_path = Path(base_path) / secret_name
    if not secret_path.is_file():
        return None
    try:
        return secret_path.read_text().strip()
    except OSError:
        return None


def get_k8s_secret_name(secret_name: str) -> str:
    """Get K8s secret filename: {PROJECT_KEY}_{secret_name}"""
    return f"{PROJECT_KEY}_{secret_name}"


def get_secret(env_var: str, secret_file_name: str | None = None, default: str | None = None) -> str | None:
    """Get secret: K8s file > env var > {env_var}_FILE > default."""
    if secret_file_name and SECRETS_BASE_PATH:
        k8s_name = get_k8s_secret_name(secret_file_name)
        if value := read_secret_from_file(k8s_name, SECRETS_BASE_PATH):
            return value
    if value := os.getenv(env_var):
        return value
    if file_path := os.getenv(f"{env_var}_FILE"):
        if value := read_secret_from_file(Path(file_path).name, str(Path(file_path).parent)):
            return value
    return default


def get_env_file(override: Environment | None = None) -> str:
    """Get .env file path. Override only works when ENV=local."""
    env = os.getenv("ENV", Environment.LOCAL.value)
    if env == Environment.LOCAL.value and override:
        env = override.value
    return f".env_{env}"


# Later files win: shared .env first, then the environment-specific one
ENV_FILES = (".env", get_env_file(LOCAL_ENV_OVERRIDE))


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# =============================================================================
# Config Classes
# =============================================================================

class StorageConfig(BaseSettings):
    """Object storage and public URL settings.

    Variable names are unprefixed (``S3_BUCKET``, ``UPLOAD_DIR``,
    ``PUBLIC_URL_BASE``) to stay compatible with existing deployments.
    """
    model_config = SettingsConfigDict(env_file=ENV_FILES, extra="ignore")

    s3_bucket: str = ""
    upload_dir: str = ""
    public_url_base: str | None = None
    s3_endpoint: str | None = None
    s3_region: str | None = Field(default=None, validation_alias=AliasChoices("s3_region", "aws_region"))
    aws_access_key_id: str | None = None
    aws_secret_access_key: SecretStr | None = Field(default=None)
    upload_max_bytes: int = Field(default=DEFAULT_UPLOAD_MAX_BYTES, gt=0)

    @model_validator(mode="before")
    @classmethod
    def _load_secrets(cls, data: dict[str, Any]) -> dict[str, Any]:
        if not data.get("aws_secret_access_key"):
            data["aws_secret_access_key"] = get_secret("AWS_SECRET_ACCESS_KEY", "aws-secret-access-key")
        return data

    @property
    def list_prefix(self) -> str:
        """Upload prefix as used for listing, with forward slashes only."""
        return self.upload_dir.replace("\\", "/")


class DatabaseConfig(BaseSettings):
    """Database connection string plus connection pooling settings."""
    model_config = SettingsConfigDict(env_file=ENV_FILES, env_prefix="DATABASE_", extra="ignore")

    url: SecretStr | None = Field(default=None)
    driver: str = "postgresql+asyncpg"
    ssl_mode: str = "require"
    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 15
    pool_recycle: int = 900
    pool_pre_ping: bool = True
    echo: bool = False

    @model_validator(mode="before")
    @classmethod
    def _load_secrets(cls, data: dict[str, Any]) -> dict[str, Any]:
        if not data.get("url"):
            data["url"] = get_secret("DATABASE_URL", "database-url")
        return data

    @property
    def async_url(self) -> URL:
        """Parse DATABASE_URL, switch it to the async driver and force TLS.

        Raises:
            ConfigurationError: If DATABASE_URL is missing or cannot be parsed
        """
        if self.url is None:
            raise ConfigurationError("DATABASE_URL environment variable is required")

        try:
            url = make_url(self.url.get_secret_value())
        except ArgumentError as e:
            raise ConfigurationError(f"Failed to parse database URL: {e}") from e

        if url.get_backend_name() not in ("postgres", "postgresql"):
            return url

        url = url.set(drivername=self.driver)
        # libpq-style sslmode is not understood by asyncpg; ssl replaces it
        url = url.difference_update_query(["sslmode"])
        if self.ssl_mode:
            url = url.update_query_dict({"ssl": self.ssl_mode})
        return url


class CORSConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILES, env_prefix="CORS_", extra="ignore")

    allow_origins: str = "*"
    allow_credentials: bool = True
    allow_methods: str = "GET,POST,OPTIONS"
    allow_headers: str = "Content-Type,Authorization"

    @property
    def origins_list(self) -> list[str]:
        return _split_csv(self.allow_origins)

    @property
    def methods_list(self) -> list[str]:
        return ["*"] if self.allow_methods == "*" else _split_csv(self.allow_methods)

    @property
    def headers_list(self) -> list[str]:
        return ["*"] if self.allow_headers == "*" else _split_csv(self.allow_headers)


class LoggingConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILES, env_prefix="LOG_", extra="ignore")

    level: str = "INFO"
    format: str = "console"  # console | json
    level_sqlalchemy: str = "WARNING"
    level_botocore: str = "WARNING"
    level_uvicorn_access: str = "INFO"


class FastAPIConfig(BaseSettings):
    """FastAPI application configuration."""
    model_config = SettingsConfigDict(env_file=ENV_FILES, env_prefix="FASTAPI_", extra="ignore")

    title: str = "Image Dock API"
    description: str = "Image upload and catalog service"
    version: str = "0.1.0"
    docs_url: str | None = "/docs"
    redoc_url: str | None = "/redoc"
    openapi_url: str | None = "/openapi.json"
    debug: bool = False

    @field_validator("docs_url", "redoc_url", "openapi_url")
    @classmethod
    def _disable_empty_urls(cls, v: str | None) -> str | None:
        # Docs URLs can be disabled by setting to empty string in env
        return v if v else None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=ENV_FILES, extra="ignore")

    env: Environment = Field(default=Environment.LOCAL)
    app_name: str = Field(default="Image Dock API")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)
    reload: bool = Field(default=False)
    workers: int = Field(default=1)

    @field_validator("reload")
    @classmethod
    def _no_reload_in_prod(cls, v: bool, info) -> bool:
        if info.data.get("env") == Environment.PROD and v:
            raise ValueError(f"{info.field_name} cannot be True in production")
        return v

    @property
    def is_production(self) -> bool:
        return self.env == Environment.PROD

    @property
    def is_local(self) -> bool:
        return self.env == Environment.LOCAL


# =============================================================================
# Lazy Loaders (cached)
# =============================================================================

@lru_cache
def get_settings() -> Settings:
    return Settings()

@lru_cache
def get_storage_config() -> StorageConfig:
    return StorageConfig()

@lru_cache
def get_database_config() -> DatabaseConfig:
    return DatabaseConfig()

@lru_cache
def get_cors_config() -> CORSConfig:
    return CORSConfig()

@lru_cache
def get_logging_config() -> LoggingConfig:
    return LoggingConfig()

@lru_cache
def get_fastapi_config() -> FastAPIConfig:
    return FastAPIConfig()


# =============================================================================
# Global Instances (core configs only)
# =============================================================================

settings = get_settings()
cors_config = get_cors_config()
logging_config = get_logging_config()
fastapi_config = get_fastapi_config()
