from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load .env if present
load_dotenv()


def _split_csv(raw: Optional[str], default: str = "*") -> List[str]:
    return [item.strip() for item in (raw or default).split(",") if item.strip()]


def _env_bool(raw: Optional[str], default: bool = False) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class APISettings(BaseModel):
    """FastAPI application settings."""

    API_TITLE: str = Field(default="Transaction Vault Backend", description="API title for OpenAPI")
    API_DESCRIPTION: str = Field(
        default="Encrypts JSON payloads under a party-derived key and stores them as opaque transaction tokens.",
        description="API description",
    )
    API_VERSION: str = Field(default="0.1.0", description="API version")
    CORS_ALLOW_ORIGINS: List[str] = Field(default_factory=lambda: ["*"], description="CORS allowed origins")
    CORS_ALLOW_METHODS: List[str] = Field(default_factory=lambda: ["*"], description="CORS allowed methods")
    CORS_ALLOW_HEADERS: List[str] = Field(default_factory=lambda: ["*"], description="CORS allowed headers")


class ServerSettings(BaseModel):
    """Bind address and uvicorn runtime options."""

    HOST: str = Field(default="0.0.0.0", description="Bind host")
    PORT: int = Field(default=4000, description="Bind port")
    LOG_LEVEL: str = Field(default="info", description="uvicorn and root logger level")
    RELOAD: bool = Field(default=False, description="Enable uvicorn auto-reload (development only)")
    ENV: str = Field(default="development", description="Environment name")


class LogSettings(BaseModel):
    """Structured logging output settings."""

    LOG_FORMAT: str = Field(default="json", description="'json' for single-line JSON records or 'plain'")


class Settings(BaseModel):
    """Application configuration bundle."""

    api: APISettings
    server: ServerSettings
    log: LogSettings

    @staticmethod
    def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
        return os.getenv(name, default)

    # PUBLIC_INTERFACE
    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables."""
        api = APISettings(
            API_TITLE=cls._get_env("API_TITLE", "Transaction Vault Backend"),
            API_DESCRIPTION=cls._get_env(
                "API_DESCRIPTION",
                "Encrypts JSON payloads under a party-derived key and stores them as opaque transaction tokens.",
            ),
            API_VERSION=cls._get_env("API_VERSION", "0.1.0"),
            CORS_ALLOW_ORIGINS=_split_csv(cls._get_env("CORS_ALLOW_ORIGINS")),
            CORS_ALLOW_METHODS=_split_csv(cls._get_env("CORS_ALLOW_METHODS")),
            CORS_ALLOW_HEADERS=_split_csv(cls._get_env("CORS_ALLOW_HEADERS")),
        )
        try:
            port = int(cls._get_env("PORT", "4000") or "4000")
        except ValueError:
            port = 4000
        server = ServerSettings(
            HOST=cls._get_env("HOST", "0.0.0.0"),
            PORT=port,
            LOG_LEVEL=(cls._get_env("LOG_LEVEL", "info") or "info").lower(),
            RELOAD=_env_bool(cls._get_env("RELOAD")),
            ENV=cls._get_env("ENV", "development"),
        )
        log = LogSettings(LOG_FORMAT=(cls._get_env("LOG_FORMAT", "json") or "json").lower())
        return cls(api=api, server=server, log=log)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton access to application settings loaded from environment."""
    return Settings.from_env()
