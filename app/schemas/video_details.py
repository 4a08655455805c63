"""Client-facing schemas for the video details endpoint.

Wire names are camelCase to stay compatible with existing frontends.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FormatDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    quality: str
    container: str = "mp4"
    url: Optional[str] = None
    itag: Union[int, str]
    has_audio: bool = Field(default=True, alias="hasAudio")
    is_fallback: bool = Field(default=False, alias="isFallback")


class VideoInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    thumbnail: str
    duration: str = "Unknown"
    view_count: str = Field(default="Unknown", alias="viewCount")


class VideoDetailsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    video_id: Optional[str] = Field(default=None, alias="videoId")


class VideoDetailsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    title: str
    thumbnail: str
    duration: str
    view_count: str = Field(alias="viewCount")
    formats: List[FormatDescriptor]
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: Optional[str] = None
