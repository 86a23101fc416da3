import asyncio
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
import httpx
from ..config import WatchConfig
from ..models import Category, RunSummary, VideoNotice
from .slack import send_notification
from .storage import load_seen_ids, save_seen_ids
from .youtube import get_youtube_client, search_recent_videos

logger = logging.getLogger(__name__)

def newness_threshold(now: datetime, window_hours: int) -> datetime:
    return now - timedelta(hours=window_hours)

def classify(published_at: datetime, threshold: datetime) -> Category:
    # The threshold instant itself still counts as brand new
    if published_at >= threshold:
        return Category.BRAND_NEW
    return Category.NEWLY_POPULAR

async def run_search(config: WatchConfig, store, http_client: httpx.AsyncClient, youtube=None, now: Optional[datetime] = None) -> RunSummary:
    """Search, diff against the seen-set, notify for each new video, persist.

    Videos are handled one at a time in the order the API returned them.
    A video is marked seen even when its notification fails. The seen-set
    is read and written without any locking, so overlapping runs can race
    and the last save wins.
    """
    if youtube is None:
        youtube = get_youtube_client(config.youtube_api_key)

    videos = await search_recent_videos(youtube, config)

    seen_ids = await asyncio.to_thread(load_seen_ids, store)
    logger.info(f"Loaded {len(seen_ids)} seen videos from storage")

    now = now or datetime.now(timezone.utc)
    threshold = newness_threshold(now, config.newness_window_hours)
    logger.info(f"Newness threshold set to: {threshold.isoformat()}")

    new_ids = set()
    summary = RunSummary(videos_found=len(videos))

    for video in videos:
        if video.video_id in seen_ids:
            continue

        category = classify(video.published_at, threshold)
        if category is Category.BRAND_NEW:
            summary.new_videos += 1
            logger.info(f"Found Brand New video: {video.title}")
        else:
            summary.popular_videos += 1
            logger.info(f"Found Newly Popular video: {video.title} (Published: {video.published_at.isoformat()})")
        logger.info(f"Video URL: {video.url}")

        result = await send_notification(http_client, config.slack_webhook_url, VideoNotice(video=video, category=category))
        if result.failed:
            logger.error(f"Failed to send Slack notification for {video.video_id}: {result.status_code} {result.detail}")
        new_ids.add(video.video_id)

    logger.info(f"Found {summary.new_videos} Brand New videos")
    logger.info(f"Found {summary.popular_videos} Newly Popular videos")

    if new_ids:
        await asyncio.to_thread(save_seen_ids, store, seen_ids | new_ids)
        logger.info(f"Saved {len(new_ids)} new video IDs to storage")

    logger.info("Search completed successfully")
    return summary

async def run_scheduled(config: WatchConfig, store, http_client: httpx.AsyncClient, youtube=None) -> None:
    """Timer-trigger entry: nobody is waiting on the result, so errors end here."""
    try:
        summary = await run_search(config, store, http_client, youtube=youtube)
        logger.info(f"Scheduled search finished: {summary.model_dump(by_alias=True)}")
    except Exception:
        logger.exception("Scheduled search failed")
