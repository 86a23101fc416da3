import json
import os
import logging
import tempfile
from typing import Optional
from ..errors import CorruptStateError, PersistenceError

SEEN_VIDEOS_KEY = "seen_videos"

logger = logging.getLogger(__name__)

class MemoryStore:
    """Key-value store held in process memory."""

    def __init__(self, data: Optional[dict] = None):
        self.data = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def put(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

class JsonFileStore:
    """Key-value store persisted as a single JSON object file.

    Every value is stored as a string, the same way a hosted KV namespace
    would hold it. Writes go through a temp file and an atomic replace.
    """

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        with open(self.path, 'r', encoding='utf-8') as f:
            content = f.read().strip()
        if not content:
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            logger.warning(f"Corrupted store file found at {self.path}. Treating it as empty.")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Store file {self.path} does not hold a JSON object. Treating it as empty.")
            return {}
        return data

    def _write_all(self, data: dict) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        with tempfile.NamedTemporaryFile('w', dir=directory, delete=False, encoding='utf-8') as tmp:
            tmp_path = tmp.name
            try:
                json.dump(data, tmp, indent=2)
            except Exception:
                tmp.close()
                os.remove(tmp_path)
                raise
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def put(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

def open_store(path: str):
    if not path:
        logger.warning("STORE_PATH is empty; seen videos will not survive a restart")
        return MemoryStore()
    return JsonFileStore(path)

def parse_seen_ids(raw: str) -> set:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise CorruptStateError(f"Seen videos value is not JSON: {e}") from e
    if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
        raise CorruptStateError("Seen videos value is not a list of strings")
    return set(data)

def load_seen_ids(store) -> set:
    """Loads the seen video IDs. Missing or unreadable state yields an empty set."""
    try:
        raw = store.get(SEEN_VIDEOS_KEY)
        if raw is None:
            return set()
        return parse_seen_ids(raw)
    except CorruptStateError as e:
        logger.error(f"Corrupt seen videos state, starting from an empty set: {e}")
        return set()
    except Exception as e:
        logger.error(f"Error loading seen videos, starting from an empty set: {e}")
        return set()

def save_seen_ids(store, video_ids: set) -> None:
    """Overwrites the stored seen-set with video_ids."""
    try:
        store.put(SEEN_VIDEOS_KEY, json.dumps(list(video_ids)))
    except Exception as e:
        logger.error(f"Error saving seen videos: {e}")
        raise PersistenceError(f"Failed to save seen videos: {e}") from e

def clear_seen_ids(store) -> None:
    try:
        store.delete(SEEN_VIDEOS_KEY)
    except Exception as e:
        logger.error(f"Error clearing seen videos: {e}")
        raise PersistenceError(f"Failed to clear seen videos: {e}") from e
