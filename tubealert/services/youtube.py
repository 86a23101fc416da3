import asyncio
import logging
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from pydantic import ValidationError
from ..config import WatchConfig
from ..errors import MalformedResponseError, ProviderError
from ..models import VideoResult

logger = logging.getLogger(__name__)

def get_youtube_client(api_key: str):
    # API-key access only; search.list needs no OAuth scopes
    return build('youtube', 'v3', developerKey=api_key, cache_discovery=False)

def parse_search_response(response) -> list[VideoResult]:
    """Turns a search.list response body into VideoResults, keeping provider order."""
    if not isinstance(response, dict) or not isinstance(response.get("items"), list):
        raise MalformedResponseError("YouTube API response has no 'items' list")

    videos = []
    for index, item in enumerate(response["items"]):
        try:
            snippet = item["snippet"]
            videos.append(VideoResult(
                video_id=item["id"]["videoId"],
                title=snippet["title"],
                channel_title=snippet["channelTitle"],
                published_at=snippet["publishedAt"],
            ))
        except (KeyError, TypeError, ValidationError) as e:
            raise MalformedResponseError(f"Unexpected shape for search item {index}: {e}") from e
    return videos

async def search_recent_videos(youtube, config: WatchConfig) -> list[VideoResult]:
    """Fetches the newest videos matching the configured query."""
    request = youtube.search().list(
        part="snippet",
        q=config.search_query,
        type="video",
        order="date",
        maxResults=config.max_results
    )
    logger.info(f"Searching YouTube for '{config.search_query}' (maxResults={config.max_results})")
    try:
        response = await asyncio.to_thread(request.execute)
    except HttpError as e:
        raise ProviderError(e.resp.status, e.resp.reason or "") from e

    videos = parse_search_response(response)
    logger.info(f"Found {len(videos)} videos in API response")
    return videos
