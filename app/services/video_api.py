"""Client for the RapidAPI youtube-media-downloader service.

Every failure is raised as a classified ``UpstreamError`` so callers can
fold it into the next waterfall step or map it to an HTTP status.
"""

import logging
from typing import Any, Dict

import requests

from app.core.errors import (
    UpstreamError,
    UpstreamHTTPError,
    UpstreamNetworkError,
    UpstreamTimeoutError,
)

logger = logging.getLogger(__name__)

DETAILS_ENDPOINT = "v2/video/details"
FORMATS_ENDPOINT = "v2/video/formats"


class VideoDetailsAPI:
    """Thin wrapper over the upstream video metadata endpoints."""

    def __init__(self, api_key: str, host: str):
        self.api_key = api_key
        self.host = host
        self.base_url = f"https://{host}"

    def _headers(self) -> Dict[str, str]:
        return {
            "X-RapidAPI-Key": self.api_key,
            "X-RapidAPI-Host": self.host,
        }

    def make_request(self, endpoint: str, params: Dict[str, Any], timeout_ms: int) -> Dict:
        """GET an upstream endpoint and return its JSON object body."""
        url = f"{self.base_url}/{endpoint}"
        try:
            response = requests.get(
                url,
                params=params,
                headers=self._headers(),
                timeout=timeout_ms / 1000,
            )
        except requests.Timeout:
            logger.warning(f"[VIDEO_API] {endpoint} timed out after {timeout_ms}ms")
            raise UpstreamTimeoutError(f"YouTube API did not respond within {timeout_ms}ms")
        except requests.RequestException as e:
            logger.warning(f"[VIDEO_API] {endpoint} unreachable: {e}")
            raise UpstreamNetworkError("No response from YouTube API")

        if response.status_code >= 400:
            logger.error(f"[VIDEO_API] {endpoint} returned {response.status_code}: {response.text}")
            raise UpstreamHTTPError(response.status_code, _error_message(response))

        try:
            data = response.json()
        except ValueError:
            raise UpstreamError("YouTube API returned a non-JSON body")

        if not isinstance(data, dict):
            raise UpstreamError("YouTube API returned an unexpected payload")
        return data

    def get_video_details(self, video_id: str, timeout_ms: int) -> Dict:
        return self.make_request(
            DETAILS_ENDPOINT,
            {
                "videoId": video_id,
                "urlAccess": "normal",
                "videos": "auto",
                "audios": "auto",
            },
            timeout_ms,
        )

    def get_video_formats(self, video_id: str, timeout_ms: int) -> Dict:
        return self.make_request(
            FORMATS_ENDPOINT,
            {"videoId": video_id, "includeFormats": "true"},
            timeout_ms,
        )


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"API returned {response.status_code}"
