"""Runtime configuration read from the environment once and injected via Depends."""

import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_RAPIDAPI_HOST = "youtube-media-downloader.p.rapidapi.com"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid {name}: {raw}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid {name}: {raw}")


def _env_str(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw and raw.strip():
        return raw.strip()
    return None


class ResolverSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    validate_id_format: bool = True
    try_alternative_endpoint: bool = True
    enable_fallback_formats: bool = True
    primary_timeout_ms: int = Field(default=10000, gt=0)
    secondary_timeout_ms: int = Field(default=15000, gt=0)


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    rapidapi_key: Optional[str] = None
    rapidapi_host: str = DEFAULT_RAPIDAPI_HOST
    service_api_key: Optional[str] = None
    resolver: ResolverSettings = ResolverSettings()


def load_settings() -> Settings:
    resolver = ResolverSettings(
        validate_id_format=_env_flag("VALIDATE_VIDEO_ID", True),
        try_alternative_endpoint=_env_flag("TRY_ALTERNATIVE_ENDPOINT", True),
        enable_fallback_formats=_env_flag("ENABLE_FALLBACK_FORMATS", True),
        primary_timeout_ms=_env_int("PRIMARY_TIMEOUT_MS", 10000),
        secondary_timeout_ms=_env_int("SECONDARY_TIMEOUT_MS", 15000),
    )
    return Settings(
        rapidapi_key=_env_str("RAPIDAPI_KEY"),
        rapidapi_host=_env_str("RAPIDAPI_HOST") or DEFAULT_RAPIDAPI_HOST,
        service_api_key=_env_str("VIDEO_PROXY_API_KEY"),
        resolver=resolver,
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
