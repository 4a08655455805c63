import importlib

import pytest

from app.core.config import DEFAULT_RAPIDAPI_HOST, get_settings, load_settings

ENV_VARS = (
    "RAPIDAPI_KEY",
    "RAPIDAPI_HOST",
    "VIDEO_PROXY_API_KEY",
    "VALIDATE_VIDEO_ID",
    "TRY_ALTERNATIVE_ENDPOINT",
    "ENABLE_FALLBACK_FORMATS",
    "PRIMARY_TIMEOUT_MS",
    "SECONDARY_TIMEOUT_MS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings()
    assert settings.rapidapi_key is None
    assert settings.rapidapi_host == DEFAULT_RAPIDAPI_HOST
    assert settings.service_api_key is None
    assert settings.resolver.validate_id_format is True
    assert settings.resolver.try_alternative_endpoint is True
    assert settings.resolver.enable_fallback_formats is True
    assert settings.resolver.primary_timeout_ms == 10000
    assert settings.resolver.secondary_timeout_ms == 15000


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("RAPIDAPI_KEY", "  abc  ")
    monkeypatch.setenv("VIDEO_PROXY_API_KEY", "shared")
    monkeypatch.setenv("VALIDATE_VIDEO_ID", "off")
    monkeypatch.setenv("ENABLE_FALLBACK_FORMATS", "0")
    monkeypatch.setenv("PRIMARY_TIMEOUT_MS", "5000")

    settings = load_settings()
    assert settings.rapidapi_key == "abc"
    assert settings.service_api_key == "shared"
    assert settings.resolver.validate_id_format is False
    assert settings.resolver.enable_fallback_formats is False
    assert settings.resolver.primary_timeout_ms == 5000


def test_blank_key_is_missing(monkeypatch):
    monkeypatch.setenv("RAPIDAPI_KEY", "   ")
    assert load_settings().rapidapi_key is None


def test_invalid_flag_raises(monkeypatch):
    monkeypatch.setenv("TRY_ALTERNATIVE_ENDPOINT", "maybe")
    with pytest.raises(ValueError, match="TRY_ALTERNATIVE_ENDPOINT"):
        load_settings()


def test_invalid_timeout_raises(monkeypatch):
    monkeypatch.setenv("SECONDARY_TIMEOUT_MS", "fast")
    with pytest.raises(ValueError, match="SECONDARY_TIMEOUT_MS"):
        load_settings()


def test_non_positive_timeout_rejected(monkeypatch):
    monkeypatch.setenv("PRIMARY_TIMEOUT_MS", "0")
    with pytest.raises(ValueError):
        load_settings()


def test_app_refuses_to_start_with_bad_config(monkeypatch):
    import app.main

    monkeypatch.setenv("PRIMARY_TIMEOUT_MS", "fast")
    get_settings.cache_clear()
    try:
        with pytest.raises(ValueError, match="PRIMARY_TIMEOUT_MS"):
            importlib.reload(app.main)
    finally:
        get_settings.cache_clear()
