"""Video details endpoint: validates the id, runs the format waterfall, renders JSON."""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.auth import verify_api_key
from app.core.config import Settings, get_settings
from app.core.errors import ConfigurationError, InvalidRequestError, ServiceError
from app.schemas.video_details import VideoDetailsRequest, VideoDetailsResponse
from app.services.format_resolver import FormatResolver
from app.services.video_api import VideoDetailsAPI

logger = logging.getLogger(__name__)

VIDEO_ID_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{11}$")

router = APIRouter(
    prefix="/api",
    tags=["video-details"],
    dependencies=[Depends(verify_api_key)],
)


def get_video_api(settings: Settings = Depends(get_settings)) -> VideoDetailsAPI:
    return VideoDetailsAPI(api_key=settings.rapidapi_key or "", host=settings.rapidapi_host)


def get_resolver(
    api: VideoDetailsAPI = Depends(get_video_api),
    settings: Settings = Depends(get_settings),
) -> FormatResolver:
    return FormatResolver(api, settings.resolver)


def _video_details(
    video_id: Optional[str], settings: Settings, resolver: FormatResolver
) -> VideoDetailsResponse:
    video_id = (video_id or "").strip()
    if not video_id:
        raise InvalidRequestError(
            "Please provide a videoId query parameter",
            error="Missing videoId parameter",
        )
    if settings.resolver.validate_id_format and not VIDEO_ID_PATTERN.match(video_id):
        raise InvalidRequestError(
            "videoId must be 11 characters of letters, digits, '-' or '_'",
            error="Invalid videoId format",
        )
    if not settings.rapidapi_key:
        logger.error("RAPIDAPI_KEY is not configured")
        raise ConfigurationError("Set RAPIDAPI_KEY in the server environment")

    try:
        resolution = resolver.resolve(video_id)
    except Exception as e:
        logger.exception(f"Resolving formats for {video_id} failed")
        raise ServiceError(str(e))

    if not resolution.formats and resolution.upstream_error is not None:
        raise resolution.upstream_error

    info = resolution.info
    return VideoDetailsResponse(
        title=info.title,
        thumbnail=info.thumbnail,
        duration=info.duration,
        view_count=info.view_count,
        formats=resolution.formats,
        message=resolution.message,
    )


@router.get("/get-video-details", response_model=VideoDetailsResponse)
def get_video_details(
    video_id: Optional[str] = Query(default=None, alias="videoId"),
    settings: Settings = Depends(get_settings),
    resolver: FormatResolver = Depends(get_resolver),
):
    """Resolve title, thumbnail and downloadable formats for a YouTube video."""
    return _video_details(video_id, settings, resolver)


@router.post("/get-video-details", response_model=VideoDetailsResponse)
def post_video_details(
    request: Optional[VideoDetailsRequest] = None,
    settings: Settings = Depends(get_settings),
    resolver: FormatResolver = Depends(get_resolver),
):
    return _video_details(request.video_id if request else None, settings, resolver)
