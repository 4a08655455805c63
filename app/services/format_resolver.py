"""Normalize the upstream API's inconsistent payloads into a stable contract.

Formats are resolved through a short-circuiting waterfall:

1. ``videos.formats`` of the details payload
2. ``videos.adaptiveFormats`` of the details payload (video MIME types only)
3. top-level ``formats`` of the details payload
4. ``formats`` of the alternative formats endpoint
5. two synthesized fallback descriptors pointing at mirror sites

Upstream failures never escape ``FormatResolver.resolve``; they are logged
and treated like an empty step.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from app.core.config import ResolverSettings
from app.core.errors import UpstreamError
from app.schemas.video_details import FormatDescriptor, VideoInfo
from app.services.video_api import VideoDetailsAPI

logger = logging.getLogger(__name__)

ALTERNATIVE_SOURCE = "alternative.formats"
FALLBACK_SOURCE = "fallback"

DEFAULT_THUMBNAIL = "https://img.youtube.com/vi/{video_id}/hqdefault.jpg"
UNKNOWN = "Unknown"

FALLBACK_SOURCES = (
    ("Best Available (External)", "https://www.y2mate.com/youtube/{video_id}"),
    (
        "HD Mirror (External)",
        "https://en.savefrom.net/#url=https://www.youtube.com/watch?v={video_id}",
    ),
)


def _entries(value: Any) -> List[Dict]:
    if not isinstance(value, list):
        return []
    return [entry for entry in value if isinstance(entry, dict)]


def _videos_section(payload: Dict) -> Dict:
    videos = payload.get("videos")
    return videos if isinstance(videos, dict) else {}


def _text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _itag(entry: Dict):
    itag = entry.get("itag")
    if itag is None:
        return "unknown"
    if isinstance(itag, (int, str)) and not isinstance(itag, bool):
        return itag
    return str(itag)


def _quality(entry: Dict) -> str:
    return _text(entry.get("qualityLabel")) or f"Quality {_itag(entry)}"


def _is_video(entry: Dict) -> bool:
    mime_type = entry.get("mimeType")
    return isinstance(mime_type, str) and mime_type.lower().startswith("video/")


def _muxed_descriptor(entry: Dict) -> FormatDescriptor:
    return FormatDescriptor(
        quality=_quality(entry),
        container=_text(entry.get("container")) or "mp4",
        url=_text(entry.get("url")),
        itag=_itag(entry),
        has_audio=entry.get("hasAudio") is not False,
    )


def _adaptive_descriptor(entry: Dict) -> FormatDescriptor:
    return FormatDescriptor(
        quality=_quality(entry),
        container="mp4",
        url=_text(entry.get("url")),
        itag=_itag(entry),
        has_audio=bool(entry.get("audioQuality")),
    )


def map_video_formats(entries: Any) -> List[FormatDescriptor]:
    """Map adaptive-style entries, keeping only video MIME types."""
    return [_adaptive_descriptor(entry) for entry in _entries(entries) if _is_video(entry)]


def extract_muxed_formats(payload: Dict) -> List[FormatDescriptor]:
    return [_muxed_descriptor(entry) for entry in _entries(_videos_section(payload).get("formats"))]


def extract_adaptive_formats(payload: Dict) -> List[FormatDescriptor]:
    return map_video_formats(_videos_section(payload).get("adaptiveFormats"))


def extract_listed_formats(payload: Dict) -> List[FormatDescriptor]:
    return map_video_formats(payload.get("formats"))


# Recognized payload shapes, in precedence order.
PAYLOAD_SHAPES: List[Tuple[str, Callable[[Dict], List[FormatDescriptor]]]] = [
    ("videos.formats", extract_muxed_formats),
    ("videos.adaptiveFormats", extract_adaptive_formats),
    ("formats", extract_listed_formats),
]


def extract_formats(payload: Any) -> Tuple[Optional[str], List[FormatDescriptor]]:
    """Return the first recognized shape with formats, or ``(None, [])``."""
    if not isinstance(payload, dict):
        return None, []

    for shape, extractor in PAYLOAD_SHAPES:
        formats = extractor(payload)
        if formats:
            logger.info(f"[RESOLVER] {len(formats)} formats found under {shape}")
            return shape, formats
        logger.debug(f"[RESOLVER] No formats under {shape}")
    return None, []


def fallback_formats(video_id: str) -> List[FormatDescriptor]:
    return [
        FormatDescriptor(
            quality=quality,
            container="mp4",
            url=template.format(video_id=video_id),
            itag=f"fallback-{index}",
            has_audio=True,
            is_fallback=True,
        )
        for index, (quality, template) in enumerate(FALLBACK_SOURCES, start=1)
    ]


def _first_thumbnail(payload: Dict) -> Optional[str]:
    for thumbnail in _entries(payload.get("thumbnails")):
        if thumbnail.get("url"):
            return str(thumbnail["url"])
    return None


def _first_value(payloads: List[Dict], getter: Callable[[Dict], Any]) -> Optional[str]:
    for payload in payloads:
        value = getter(payload)
        if value is not None and value != "":
            return str(value)
    return None


def resolve_video_info(video_id: str, payloads: List[Dict]) -> VideoInfo:
    """Merge metadata across payloads; each field falls back independently."""
    payloads = [payload for payload in payloads if isinstance(payload, dict)]
    return VideoInfo(
        title=_first_value(payloads, lambda p: p.get("title")) or f"YouTube Video - {video_id}",
        thumbnail=_first_value(payloads, _first_thumbnail) or DEFAULT_THUMBNAIL.format(video_id=video_id),
        duration=_first_value(payloads, lambda p: p.get("duration")) or UNKNOWN,
        view_count=_first_value(payloads, lambda p: p.get("viewCount")) or UNKNOWN,
    )


def summary_message(formats: List[FormatDescriptor]) -> str:
    if not formats:
        return "No downloadable formats found"
    if all(fmt.is_fallback for fmt in formats):
        return "Direct download links unavailable, alternative download sources provided"
    if len(formats) == 1:
        return "1 format available"
    return f"{len(formats)} formats available"


class Resolution(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    info: VideoInfo
    formats: List[FormatDescriptor]
    message: str
    source: Optional[str] = None
    # First classified failure, set only when no upstream call succeeded.
    upstream_error: Optional[UpstreamError] = None


class FormatResolver:
    def __init__(self, api: VideoDetailsAPI, settings: ResolverSettings):
        self.api = api
        self.settings = settings

    def _fetch(
        self,
        call: Callable[[str, int], Dict],
        video_id: str,
        timeout_ms: int,
        failures: List[UpstreamError],
    ) -> Optional[Dict]:
        try:
            return call(video_id, timeout_ms)
        except UpstreamError as e:
            logger.warning(f"[RESOLVER] {e.error} for {video_id}: {e.message}")
            failures.append(e)
            return None

    def resolve(self, video_id: str) -> Resolution:
        payloads: List[Dict] = []
        failures: List[UpstreamError] = []

        logger.info(f"[RESOLVER] Fetching details for {video_id}")
        details = self._fetch(
            self.api.get_video_details, video_id, self.settings.primary_timeout_ms, failures
        )
        if details is not None:
            payloads.append(details)
        source, formats = extract_formats(details)

        if not formats and self.settings.try_alternative_endpoint:
            logger.info(f"[RESOLVER] No formats in details for {video_id}, trying alternative endpoint")
            alternative = self._fetch(
                self.api.get_video_formats, video_id, self.settings.secondary_timeout_ms, failures
            )
            if alternative is not None:
                payloads.append(alternative)
                formats = extract_listed_formats(alternative)
                if formats:
                    source = ALTERNATIVE_SOURCE
                    logger.info(f"[RESOLVER] {len(formats)} formats found via alternative endpoint")

        if not formats and self.settings.enable_fallback_formats:
            logger.info(f"[RESOLVER] Using fallback download sources for {video_id}")
            formats = fallback_formats(video_id)
            source = FALLBACK_SOURCE

        return Resolution(
            info=resolve_video_info(video_id, payloads),
            formats=formats,
            message=summary_message(formats),
            source=source,
            upstream_error=failures[0] if failures and not payloads else None,
        )
