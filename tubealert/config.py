import os
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from .errors import ConfigurationError

load_dotenv()

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

class Settings:
    YOUTUBE_API_KEY = os.getenv("YOUTUBE_API_KEY", "")
    SEARCH_QUERY = os.getenv("SEARCH_QUERY", "")
    MAX_RESULTS = os.getenv("MAX_RESULTS", "")

    # Leave empty to run without Slack notifications
    SLACK_WEBHOOK_URL = os.getenv("SLACK_WEBHOOK_URL", "")
    NEWNESS_WINDOW_HOURS = os.getenv("NEWNESS_WINDOW_HOURS", "24")

    # Empty path keeps the seen-set in memory only
    STORE_PATH = os.getenv("STORE_PATH", os.path.join(PROJECT_ROOT, "seen_videos.json"))

    # Timer trigger period; 0 disables the background poller
    POLL_INTERVAL_MINUTES = int(os.getenv("POLL_INTERVAL_MINUTES", "60"))
    HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

settings = Settings()


class WatchConfig(BaseModel):
    """Everything one search-and-notify invocation needs, fixed for its duration."""
    model_config = ConfigDict(frozen=True)

    youtube_api_key: str = Field(min_length=1)
    search_query: str = Field(min_length=1)
    max_results: int = Field(gt=0)
    slack_webhook_url: Optional[str] = None
    newness_window_hours: int = Field(default=24, ge=0)


def _whole_hours(raw):
    # Fractional windows are truncated, so "1.5" means one hour
    if not raw:
        return 24
    try:
        return int(float(raw))
    except (ValueError, OverflowError):
        return raw


def build_watch_config(source: Settings = settings) -> WatchConfig:
    """Snapshot the current settings into a validated WatchConfig."""
    try:
        return WatchConfig(
            youtube_api_key=source.YOUTUBE_API_KEY.strip(),
            search_query=source.SEARCH_QUERY.strip(),
            max_results=source.MAX_RESULTS,
            slack_webhook_url=source.SLACK_WEBHOOK_URL.strip() or None,
            newness_window_hours=_whole_hours(source.NEWNESS_WINDOW_HOURS),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
