"""Storefront configuration.

Every group of settings is a ``BaseSettings`` class with its own env prefix,
read from the process environment and from ``.env_<ENV>`` (``ENV`` defaults
to ``local``). Credentials are never committed to env files: they come from
K8s mounted secrets, an env var, or a file named by ``<VAR>_FILE``.

    DATABASE_*   remote product store
    STORAGE_*    object storage for images
    CATALOG_*    mirror location and fallback policy
    LOG_*        logging
    CORS_*       allowed origins
    FASTAPI_*    OpenAPI metadata and docs URLs
"""
import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, TypeVar
from urllib.parse import quote_plus

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.models.enums import ImageFallbackPolicy

ConfigT = TypeVar("ConfigT", bound=BaseSettings)

# K8s secrets are mounted as /etc/<SECRETS_FOLDER_NAME>/<PROJECT_KEY>_<name>
SECRETS_DIR = Path("/etc") / os.getenv("SECRETS_FOLDER_NAME", "secrets")
PROJECT_KEY = os.getenv("PROJECT_KEY", "storefront")

PLACEHOLDER_IMAGES: list[str] = [
    "https://images.pexels.com/photos/6786894/pexels-photo-6786894.jpeg?auto=compress&cs=tinysrgb&w=800",
    "https://images.pexels.com/photos/3253490/pexels-photo-3253490.jpeg?auto=compress&cs=tinysrgb&w=800",
    "https://images.pexels.com/photos/10481315/pexels-photo-10481315.jpeg?auto=compress&cs=tinysrgb&w=800",
    "https://images.pexels.com/photos/6276009/pexels-photo-6276009.jpeg?auto=compress&cs=tinysrgb&w=800",
]


class Environment(str, Enum):
    LOCAL = "local"
    DEV = "dev"
    UAT = "uat"
    PROD = "prod"


ENV_FILE = f".env_{os.getenv('ENV', Environment.LOCAL.value)}"


def _read_text(path: Path) -> str | None:
    try:
        return path.read_text().strip() or None
    except OSError:
        return None


def read_secret(env_var: str, secret_name: str) -> str | None:
    """Resolve a credential: K8s secret file, then ``env_var``, then ``{env_var}_FILE``."""
    if value := _read_text(SECRETS_DIR / f"{PROJECT_KEY}_{secret_name}"):
        return value
    if value := os.getenv(env_var):
        return value
    if file_path := os.getenv(f"{env_var}_FILE"):
        return _read_text(Path(file_path))
    return None


def settings_config(env_prefix: str = "") -> SettingsConfigDict:
    return SettingsConfigDict(env_file=ENV_FILE, env_prefix=env_prefix, extra="ignore")


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# =============================================================================
# Config Classes
# =============================================================================

class DatabaseConfig(BaseSettings):
    """Remote product store connection and pool settings."""
    model_config = settings_config("DATABASE_")

    driver: str = "postgresql+asyncpg"
    host: str = "localhost"
    port: int = 5432
    user: str | None = None
    password: SecretStr | None = None
    name: str = "storefront"
    dsn: str | None = Field(default=None, description="Full URL, wins over the fields above")

    pool_size: int = 5
    max_overflow: int = 10
    pool_timeout: int = 15
    pool_recycle: int = 900
    pool_pre_ping: bool = True
    echo: bool = False
    create_tables: bool = True

    @model_validator(mode="before")
    @classmethod
    def _load_credentials(cls, data: dict[str, Any]) -> dict[str, Any]:
        data.setdefault("user", None)
        data.setdefault("password", None)
        data["user"] = data["user"] or read_secret("DATABASE_USER", "database-user")
        data["password"] = data["password"] or read_secret("DATABASE_PASSWORD", "database-password")
        return data

    @property
    def url(self) -> str:
        if self.dsn:
            return self.dsn
        password = quote_plus(self.password.get_secret_value()) if self.password else ""
        return f"{self.driver}://{self.user or ''}:{password}@{self.host}:{self.port}/{self.name}"

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class ObjectStorageConfig(BaseSettings):
    """Object storage endpoint used for product images."""
    model_config = settings_config("STORAGE_")

    upload_url: str = "http://localhost:9000/storefront"
    public_base_url: str = "http://localhost:9000/storefront"
    token: SecretStr | None = None
    upload_timeout: float = Field(default=30.0, gt=0, description="Seconds before an upload counts as failed")
    connect_timeout: float = Field(default=5.0, gt=0)
    max_retries: int = Field(default=3, ge=0)
    http2: bool = False

    @model_validator(mode="before")
    @classmethod
    def _load_token(cls, data: dict[str, Any]) -> dict[str, Any]:
        data["token"] = data.get("token") or read_secret("STORAGE_TOKEN", "storage-token")
        return data

    @field_validator("upload_url", "public_base_url")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class CatalogConfig(BaseSettings):
    """Local mirror and fallback policy of the product catalog."""
    model_config = settings_config("CATALOG_")

    mirror_path: str = "var/products_mirror.json"
    seed_samples: bool = False
    image_fallback: ImageFallbackPolicy = ImageFallbackPolicy.STRICT
    placeholder_images: list[str] = Field(default_factory=lambda: list(PLACEHOLDER_IMAGES), min_length=1)
    max_image_bytes: int = Field(default=10 * 1024 * 1024, gt=0)


class CORSConfig(BaseSettings):
    model_config = settings_config("CORS_")

    allow_origins: str = "http://localhost:5173,http://localhost:3000"
    allow_credentials: bool = True
    allow_methods: str = "*"
    allow_headers: str = "*"

    @property
    def origins_list(self) -> list[str]:
        return _split(self.allow_origins)

    @property
    def methods_list(self) -> list[str]:
        return _split(self.allow_methods)

    @property
    def headers_list(self) -> list[str]:
        return _split(self.allow_headers)


class LoggingConfig(BaseSettings):
    model_config = settings_config("LOG_")

    log_level: str = "INFO"
    log_format: str = "console"  # console | json
    log_level_sqlalchemy: str = "WARNING"
    log_level_httpx: str = "WARNING"
    log_level_uvicorn_access: str = "INFO"


class FastAPIConfig(BaseSettings):
    """OpenAPI metadata; an empty docs URL in env disables that page."""
    model_config = settings_config("FASTAPI_")

    title: str = "Storefront API"
    description: str = "Product catalog with remote store and local mirror fallback"
    version: str = "0.1.0"
    docs_url: str | None = "/docs"
    redoc_url: str | None = "/redoc"
    openapi_url: str | None = "/openapi.json"
    debug: bool = False

    @field_validator("docs_url", "redoc_url", "openapi_url")
    @classmethod
    def _empty_is_disabled(cls, v: str | None) -> str | None:
        return v or None


class Settings(BaseSettings):
    """Process settings (no prefix)."""
    model_config = settings_config()

    env: Environment = Environment.LOCAL
    app_name: str = "storefront-api"
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    @field_validator("reload")
    @classmethod
    def _no_reload_in_prod(cls, v: bool, info) -> bool:
        if v and info.data.get("env") == Environment.PROD:
            raise ValueError("reload cannot be enabled in production")
        return v


@lru_cache
def load_config(config_class: type[ConfigT]) -> ConfigT:
    """Build a config class once per process."""
    return config_class()


# =============================================================================
# Global Instances
# =============================================================================

settings = load_config(Settings)
database_config = load_config(DatabaseConfig)
storage_config = load_config(ObjectStorageConfig)
catalog_config = load_config(CatalogConfig)
cors_config = load_config(CORSConfig)
logging_config = load_config(LoggingConfig)
fastapi_config = load_config(FastAPIConfig)
