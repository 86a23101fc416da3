from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

class Category(str, Enum):
    BRAND_NEW = "brand_new"
    NEWLY_POPULAR = "newly_popular"

    @property
    def label(self) -> str:
        if self is Category.BRAND_NEW:
            return "✨ Brand New"
        return "📈 Newly Popular"

class VideoResult(BaseModel):
    video_id: str = Field(min_length=1)
    title: str
    channel_title: str
    published_at: datetime

    @field_validator("published_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def url(self) -> str:
        return WATCH_URL.format(video_id=self.video_id)

class VideoNotice(BaseModel):
    video: VideoResult
    category: Category

class NotificationResult(BaseModel):
    sent: bool = False
    skipped: bool = False
    status_code: Optional[int] = None
    detail: Optional[str] = None

    @property
    def failed(self) -> bool:
        return not self.sent and not self.skipped

class RunSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    videos_found: int = Field(0, alias="videosFound")
    new_videos: int = Field(0, alias="newVideos")
    popular_videos: int = Field(0, alias="popularVideos")

class TriggerResponse(BaseModel):
    status: Literal["success", "error"]
    message: str
    details: Optional[Union[RunSummary, str]] = None

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
