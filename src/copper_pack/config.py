"""Adapter settings: credentials, endpoint, paging, and cache windows."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from copper_pack.constants import (
    BASE_URL,
    DEFAULT_SORT_BY,
    DEFAULT_SORT_DIRECTION,
    PAGE_SIZE,
    REFERENCE_TTL,
    USERS_TTL,
)
from copper_pack.errors import ConfigurationError


class CopperSettings(BaseModel):
    """
    Immutable configuration built once at startup and handed to the client.
    api_key and email are the two secrets Copper expects on every request.
    """

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(..., repr=False, description="Copper API key (Settings > Integrations > API Keys)")
    email: str = Field(..., description="Email of the Copper user that owns the API key")

    base_url: str = BASE_URL
    page_size: int = Field(default=PAGE_SIZE, ge=1, le=200)
    timeout: float = Field(default=30.0, gt=0)

    reference_ttl: int = Field(default=REFERENCE_TTL, ge=0, description="Seconds to cache pipelines, loss reasons, ...")
    users_ttl: int = Field(default=USERS_TTL, ge=0, description="Seconds to cache the user list")

    sort_by: str = DEFAULT_SORT_BY
    sort_direction: str = DEFAULT_SORT_DIRECTION

    @field_validator("base_url")
    @classmethod
    def _trailing_slash(cls, value: str) -> str:
        return value if value.endswith("/") else value + "/"

    @field_validator("sort_direction")
    @classmethod
    def _check_direction(cls, value: str) -> str:
        value = value.lower()
        if value not in ("asc", "desc"):
            raise ValueError("sort_direction must be 'asc' or 'desc'")
        return value

    @classmethod
    def from_env(cls, **overrides) -> "CopperSettings":
        """Build from COPPER_* environment variables; overrides win."""
        data: dict = {
            "api_key": os.environ.get("COPPER_API_KEY"),
            "email": os.environ.get("COPPER_EMAIL"),
        }
        if os.environ.get("COPPER_BASE_URL"):
            data["base_url"] = os.environ["COPPER_BASE_URL"]
        if os.environ.get("COPPER_PAGE_SIZE"):
            data["page_size"] = os.environ["COPPER_PAGE_SIZE"]
        data.update({k: v for k, v in overrides.items() if v is not None})
        return cls._build(data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "CopperSettings":
        """
        Load from YAML. Supports nested (auth/sync/cache) or flat structure.
        Secrets missing from the file fall back to the environment.
        """
        try:
            data = yaml.safe_load(Path(path).read_text()) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Could not read config {path}: {e}") from e

        auth = data.get("auth", {})
        sync = data.get("sync", {})
        cache = data.get("cache", {})

        def _get(key: str, nested: dict, default=None):
            return nested.get(key, data.get(key, default))

        flat: dict = {
            "api_key": _get("api_key", auth) or os.environ.get("COPPER_API_KEY"),
            "email": _get("email", auth) or os.environ.get("COPPER_EMAIL"),
            "base_url": _get("base_url", data),
            "timeout": _get("timeout", data),
            "page_size": _get("page_size", sync),
            "sort_by": _get("sort_by", sync),
            "sort_direction": _get("sort_direction", sync),
            "reference_ttl": _get("reference_ttl", cache),
            "users_ttl": _get("users_ttl", cache),
        }
        return cls._build({k: v for k, v in flat.items() if v is not None})

    @classmethod
    def _build(cls, data: dict) -> "CopperSettings":
        missing = [k for k in ("api_key", "email") if not data.get(k)]
        if missing:
            raise ConfigurationError(
                f"Missing Copper credentials: {', '.join(missing)}. "
                "Set COPPER_API_KEY and COPPER_EMAIL or provide them in the config file."
            )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e


def load_settings(config_path: Optional[Path] = None) -> CopperSettings:
    """Settings from a YAML file when given, else from the environment."""
    if config_path is not None:
        return CopperSettings.from_yaml(config_path)
    return CopperSettings.from_env()
