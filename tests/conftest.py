"""Shared fixtures for the video details proxy test suite.

No test touches the network: the upstream client is replaced either by a
``MagicMock`` (resolver and endpoint tests) or by patching ``requests.get``
(client tests).
"""

from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app.api.video_details import get_video_api
from app.core.config import ResolverSettings, Settings, get_settings
from app.main import app

VIDEO_ID = "dQw4w9WgXcQ"


def make_settings(
    rapidapi_key: Optional[str] = "test-key",
    service_api_key: Optional[str] = None,
    **resolver: Any,
) -> Settings:
    return Settings(
        rapidapi_key=rapidapi_key,
        service_api_key=service_api_key,
        resolver=ResolverSettings(**resolver),
    )


def fake_api(details: Any = None, formats: Any = None) -> MagicMock:
    """Mock upstream client.

    Each argument is either a payload dict returned by the call or an
    exception raised by it. ``None`` means an empty payload.
    """
    api = MagicMock()
    for method, outcome in (("get_video_details", details), ("get_video_formats", formats)):
        if isinstance(outcome, Exception):
            getattr(api, method).side_effect = outcome
        else:
            getattr(api, method).return_value = outcome if outcome is not None else {}
    return api


def muxed_payload(**extra: Any) -> Dict[str, Any]:
    payload = {
        "title": "Never Gonna Give You Up",
        "thumbnails": [{"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"}],
        "duration": 213,
        "viewCount": 1500000000,
        "videos": {
            "formats": [
                {"itag": 18, "qualityLabel": "360p", "url": "https://cdn.example/18"},
                {"itag": 22, "qualityLabel": "720p", "url": "https://cdn.example/22", "hasAudio": False},
            ]
        },
    }
    payload.update(extra)
    return payload


@pytest.fixture
def configure():
    """Install settings and upstream client overrides, return a TestClient."""

    def _configure(settings: Settings, api: MagicMock) -> TestClient:
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_video_api] = lambda: api
        return TestClient(app)

    yield _configure
    app.dependency_overrides.clear()
