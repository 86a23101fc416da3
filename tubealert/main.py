import asyncio
import logging
from contextlib import asynccontextmanager, suppress
import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from tubealert.config import WatchConfig, build_watch_config, settings
from tubealert.errors import ConfigurationError
from tubealert.models import TriggerResponse
from tubealert.services.storage import clear_seen_ids, open_store
from tubealert.services.watcher import run_scheduled, run_search

logger = logging.getLogger(__name__)

def _error(message: str, status_code: int, details: str = None) -> JSONResponse:
    body = TriggerResponse(status="error", message=message, details=details)
    return JSONResponse(body.to_payload(), status_code=status_code)

async def timer_loop(interval_minutes: int):
    """Runs the scheduled search every interval_minutes until cancelled."""
    while True:
        await asyncio.sleep(interval_minutes * 60)
        logger.info("Starting scheduled YouTube search...")
        try:
            config = build_watch_config()
        except ConfigurationError as e:
            logger.error(f"Skipping scheduled search: {e}")
            continue
        async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
            await run_scheduled(config, open_store(settings.STORE_PATH), client)

@asynccontextmanager
async def lifespan(app: FastAPI):
    timer = None
    if settings.POLL_INTERVAL_MINUTES > 0:
        logger.info(f"Timer trigger enabled: every {settings.POLL_INTERVAL_MINUTES} minutes")
        timer = asyncio.create_task(timer_loop(settings.POLL_INTERVAL_MINUTES))
    yield
    if timer is not None:
        timer.cancel()
        with suppress(asyncio.CancelledError):
            await timer

app = FastAPI(lifespan=lifespan)

def get_watch_config() -> WatchConfig:
    return build_watch_config()

def get_store():
    return open_store(settings.STORE_PATH)

async def get_http_client():
    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS) as client:
        yield client

@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return _error("Method not allowed", 405)
    return _error(str(exc.detail), exc.status_code)

@app.exception_handler(ConfigurationError)
async def config_error_handler(request: Request, exc: ConfigurationError):
    logger.error(f"Rejected trigger: {exc}")
    return _error("Invalid configuration", 500, str(exc))

@app.post("/")
async def manual_run(
    config: WatchConfig = Depends(get_watch_config),
    store=Depends(get_store),
    http_client: httpx.AsyncClient = Depends(get_http_client)
):
    logger.info("Starting manual YouTube search...")
    try:
        summary = await run_search(config, store, http_client)
    except Exception as e:
        logger.exception("Manual search failed")
        return _error("Search failed", 500, str(e))

    body = TriggerResponse(status="success", message="Search completed successfully", details=summary)
    return JSONResponse(body.to_payload())

@app.delete("/")
def clear_seen_videos(store=Depends(get_store)):
    try:
        clear_seen_ids(store)
    except Exception as e:
        return _error("Failed to clear seen-video storage", 500, str(e))

    body = TriggerResponse(status="success", message="Seen-video storage cleared successfully")
    return JSONResponse(body.to_payload())
