import pytest
import httpx
from unittest.mock import MagicMock
from fastapi.testclient import TestClient
from tubealert.main import app, get_http_client, get_store, get_watch_config
from tubealert.config import WatchConfig, settings
from tubealert.services.storage import MemoryStore

WEBHOOK_URL = "https://hooks.slack.test/services/T000/B000/XXXX"

def make_item(video_id, published_at, title=None, channel="RunPod"):
    """A search.list item as the YouTube Data API returns it."""
    return {
        "kind": "youtube#searchResult",
        "id": {"kind": "youtube#video", "videoId": video_id},
        "snippet": {
            "title": title or f"Video {video_id}",
            "channelTitle": channel,
            "publishedAt": published_at.isoformat().replace("+00:00", "Z"),
        }
    }

def make_youtube(items):
    youtube = MagicMock()
    youtube.search().list().execute.return_value = {"kind": "youtube#searchListResponse", "items": items}
    return youtube

class WebhookRecorder:
    """httpx.MockTransport handler that records every POST."""

    def __init__(self, status_code=200, text="ok"):
        self.status_code = status_code
        self.text = text
        self.requests = []

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text)

@pytest.fixture
def watch_config():
    return WatchConfig(
        youtube_api_key="test-key",
        search_query="RunPod",
        max_results=10,
        slack_webhook_url=WEBHOOK_URL,
    )

@pytest.fixture
def store():
    return MemoryStore()

@pytest.fixture
def webhook():
    return WebhookRecorder()

@pytest.fixture
def client(watch_config, store, webhook, monkeypatch):
    # No background poller during tests
    monkeypatch.setattr(settings, "POLL_INTERVAL_MINUTES", 0)

    async def http_client_override():
        async with httpx.AsyncClient(transport=httpx.MockTransport(webhook)) as c:
            yield c

    app.dependency_overrides[get_watch_config] = lambda: watch_config
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_http_client] = http_client_override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
