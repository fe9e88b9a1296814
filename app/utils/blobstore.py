# app/utils/blobstore.py
from __future__ import annotations
import os
import json
import hashlib
from pathlib import Path
from typing import Any, Dict, Optional

from app.config.settings import COMPARE_STATE_DIR
from app.utils.logger import logger


def resolve_state_dir(base: str | None = None) -> str:
    """
    Pick a writable directory for persisted compare state, trying:
      1) explicit base (if passed)
      2) $COMPARE_STATE_DIR
      3) ~/.laptop-compare
      4) /tmp/laptop-compare
      5) ./state
    Returns the absolute path (str). Raises only if every base fails.
    """
    candidates = []
    if base:
        candidates.append(base)
    if COMPARE_STATE_DIR:
        candidates.append(COMPARE_STATE_DIR)
    candidates += [os.path.join(os.path.expanduser("~"), ".laptop-compare"), "/tmp/laptop-compare", "./state"]

    last_err = None
    for root in candidates:
        try:
            p = Path(root).resolve()
            p.mkdir(parents=True, exist_ok=True)
            return str(p)
        except OSError as e:
            last_err = e
            continue

    raise RuntimeError(f"Could not create state directory: {last_err}")


class JsonBlobStore:
    """
    Key-value store of JSON blobs on disk, one file per key.
    Plays the part browser local storage plays for the web client:
    get() returns None for missing or unreadable blobs, set()/delete()
    report failure with False. Nothing here raises.
    """
    def __init__(self, state_dir: str) -> None:
        self.state_dir = state_dir
        try:
            os.makedirs(self.state_dir, exist_ok=True)
        except OSError as e:
            logger.warning(f"State dir {self.state_dir} unavailable: {e}")

    def _path_for(self, key: str) -> str:
        h = hashlib.sha1(key.encode("utf-8")).hexdigest()
        return os.path.join(self.state_dir, f"{h}.json")

    def get(self, key: str) -> Optional[Any]:
        path = self._path_for(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                obj = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable blob {key!r}: {e}")
            return None
        if not isinstance(obj, dict) or obj.get("key") != key:
            logger.warning(f"Ignoring malformed blob {key!r}")
            return None
        return obj.get("value")

    def set(self, key: str, value: Any) -> bool:
        path = self._path_for(key)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump({"key": key, "value": value}, f, ensure_ascii=False)
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Failed to write blob {key!r}: {e}")
            return False

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            if os.path.exists(path):
                os.remove(path)
            return True
        except OSError as e:
            logger.warning(f"Failed to delete blob {key!r}: {e}")
            return False


class MemoryBlobStore:
    """Same interface as JsonBlobStore, kept in a dict. Values are stored as JSON text."""
    def __init__(self) -> None:
        self._blobs: Dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        raw = self._blobs.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Ignoring malformed blob {key!r}")
            return None

    def set(self, key: str, value: Any) -> bool:
        try:
            self._blobs[key] = json.dumps(value, ensure_ascii=False)
            return True
        except (TypeError, ValueError) as e:
            logger.warning(f"Failed to write blob {key!r}: {e}")
            return False

    def delete(self, key: str) -> bool:
        self._blobs.pop(key, None)
        return True

    def put_raw(self, key: str, raw: str) -> None:
        """Store text as-is (used to simulate corrupted storage)."""
        self._blobs[key] = raw

    def __contains__(self, key: str) -> bool:
        return key in self._blobs
