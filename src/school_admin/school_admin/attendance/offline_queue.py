from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Union

from ..common.datetime_utils import now_local
from ..core.exceptions import RemoteError, TransportError
from ..remote.connection import ApiConnection
from ..remote.http_base import api_post

logger = logging.getLogger(__name__)


class OfflineQueue:
    """JSON-file queue of bulk-mark writes that could not reach the API.

    Replaying is safe because a bulk-mark overwrites the session's records.
    """

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def pending(self) -> list[dict[str, Any]]:
        with self._lock:
            return self._load()

    def enqueue(self, api_path: str, body: Any) -> None:
        """Queue a write, replacing any older write queued for the same path."""
        with self._lock:
            items = [i for i in self._load() if i.get("path") != api_path]
            items.append({"path": api_path, "body": body, "queued_at": now_local().isoformat(timespec="seconds")})
            self._save(items)
        logger.info("Queued offline write to %s (%d pending)", api_path, len(items))

    def discard(self, api_path: str) -> int:
        """Drop queued writes for a path that a live write has superseded."""
        with self._lock:
            items = self._load()
            keep = [i for i in items if i.get("path") != api_path]
            dropped = len(items) - len(keep)
            if dropped:
                self._save(keep)
        if dropped:
            logger.info("Discarded %d stale offline write(s) to %s", dropped, api_path)
        return dropped

    def flush(self, conn: ApiConnection) -> int:
        """Replay queued writes in order. Returns how many were delivered.

        Items that fail on transport stay queued; items the API rejects are
        dropped since replaying them cannot succeed.
        """
        with self._lock:
            items = self._load()
            keep: list[dict[str, Any]] = []
            sent = 0
            for item in items:
                try:
                    api_post(conn, item["path"], item["body"])
                    sent += 1
                except TransportError:
                    keep.append(item)
                except RemoteError as e:
                    logger.error("Dropping queued write to %s: %s", item["path"], e)
            self._save(keep)
        return sent

    def _load(self) -> list[dict[str, Any]]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "[]")
        except ValueError:
            logger.error("Offline queue %s is corrupt, starting empty", self._path)
            return []
        return data if isinstance(data, list) else []

    def _save(self, items: list[dict[str, Any]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(items), encoding="utf-8")
