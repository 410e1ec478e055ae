"""Configuration management for the HTTP data proxy."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProxyConfig(BaseModel):
    """Settings applied to the default transport and blocking calls."""

    model_config = ConfigDict(frozen=True)

    # Transport
    base_url: str = Field(default="")
    bearer_token: Optional[str] = Field(default=None)
    follow_redirects: bool = Field(default=False)
    verify_tls: bool = Field(default=True)

    # Timeouts (seconds)
    timeout_read: float = Field(default=30.0, gt=0)
    timeout_connect: float = Field(default=10.0, gt=0)
    timeout_write: float = Field(default=30.0, gt=0)
    timeout_pool: float = Field(default=30.0, gt=0)

    # Blocking calls: "wait" or "task"
    sync_strategy: str = Field(default="wait")

    @field_validator("sync_strategy")
    @classmethod
    def _check_strategy(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in ("wait", "task"):
            raise ValueError("sync_strategy must be 'wait' or 'task'")
        return value

    @classmethod
    def from_environment(cls) -> "ProxyConfig":
        """Create configuration from environment variables."""
        config_data = {
            "base_url": os.getenv("DATAPROXY_BASE_URL", ""),
            "bearer_token": os.getenv("DATAPROXY_TOKEN") or None,
            "follow_redirects": _get_bool("DATAPROXY_FOLLOW_REDIRECTS", False),
            "verify_tls": _get_bool("DATAPROXY_VERIFY_TLS", True),
            "sync_strategy": os.getenv("DATAPROXY_SYNC_STRATEGY", "wait"),
        }
        for phase in ("read", "connect", "write", "pool"):
            if value := os.getenv(f"DATAPROXY_TIMEOUT_{phase.upper()}"):
                config_data[f"timeout_{phase}"] = float(value)

        return cls(**config_data)


def _get_bool(key: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


# Global configuration instance
_config: Optional[ProxyConfig] = None


def get_config(*, reload: bool = False) -> ProxyConfig:
    """Get the global configuration instance."""
    global _config

    if _config is None or reload:
        _config = ProxyConfig.from_environment()

    return _config


def load_dotenv_for_proxy(path: Optional[Path] = None, *, override: bool = False) -> None:
    """Load environment variables from .env file."""
    if path is None:
        mode = os.getenv("MODE", "development").lower()
        env_files = {
            "local": ".env.local",
            "development": ".env.development",
            "dev": ".env.development",
            "production": ".env.production",
            "prod": ".env.production",
        }
        path = Path.cwd() / env_files.get(mode, ".env")

        # If the environment-specific file doesn't exist, try the default .env file
        if not path.exists():
            default_env = Path.cwd() / ".env"
            if default_env.exists():
                path = default_env

    if path.exists():
        load_dotenv(path, override=override)
