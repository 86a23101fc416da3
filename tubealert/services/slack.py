import logging
from typing import Optional
import httpx
from ..errors import NotificationError
from ..models import NotificationResult, VideoNotice

logger = logging.getLogger(__name__)

def build_message(notice: VideoNotice) -> dict:
    """Slack webhook payload: fallback text plus a three-block layout."""
    video = notice.video
    label = notice.category.label
    published = video.published_at.strftime("%Y-%m-%d")
    return {
        "text": f"{label} YouTube Video: {video.title}",
        "blocks": [
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"*{label} YouTube Video*\n*{video.title}*"
                }
            },
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": f"📅 Published: {published} by {video.channel_title}"
                }
            },
            {
                "type": "actions",
                "elements": [
                    {
                        "type": "button",
                        "text": {
                            "type": "plain_text",
                            "text": "Watch Video",
                            "emoji": True
                        },
                        "url": video.url
                    }
                ]
            }
        ]
    }

async def _post_message(client: httpx.AsyncClient, webhook_url: str, message: dict) -> int:
    try:
        resp = await client.post(webhook_url, json=message)
    except httpx.HTTPError as e:
        raise NotificationError(None, f"{e.__class__.__name__}: {e}") from e
    if not resp.is_success:
        raise NotificationError(resp.status_code, f"{resp.reason_phrase}\n{resp.text}")
    return resp.status_code

async def send_notification(client: httpx.AsyncClient, webhook_url: Optional[str], notice: VideoNotice) -> NotificationResult:
    """Posts one video to Slack. Failures are returned, never raised."""
    if not webhook_url:
        logger.debug("Slack webhook URL not configured, skipping notification")
        return NotificationResult(skipped=True)

    logger.info(f"Sending Slack notification for {notice.category.label} video...")
    try:
        status_code = await _post_message(client, webhook_url, build_message(notice))
    except NotificationError as e:
        return NotificationResult(sent=False, status_code=e.status_code, detail=e.detail)

    logger.info("Slack notification sent successfully")
    return NotificationResult(sent=True, status_code=status_code)
