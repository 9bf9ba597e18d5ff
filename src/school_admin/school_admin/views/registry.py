from __future__ import annotations

import threading
import uuid
from typing import Generic, Optional, Protocol, TypeVar

from ..core.exceptions import NotFoundError


class Closable(Protocol):
    def close(self) -> None:
        raise NotImplementedError


W = TypeVar("W", bound=Closable)


class ViewRegistry(Generic[W]):
    """Open workbenches keyed by view id.

    Each workbench belongs to exactly one view; removing the view tears it
    down, which abandons any pending autosave.
    """

    def __init__(self, kind: str):
        self._kind = kind
        self._views: dict[str, W] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._views)

    def add(self, workbench: W) -> str:
        view_id = uuid.uuid4().hex
        with self._lock:
            self._views[view_id] = workbench
        return view_id

    def get(self, view_id: str) -> W:
        with self._lock:
            wb: Optional[W] = self._views.get(view_id)
        if wb is None:
            raise NotFoundError(f"Unknown {self._kind} view {view_id}")
        return wb

    def close(self, view_id: str) -> None:
        with self._lock:
            wb = self._views.pop(view_id, None)
        if wb is None:
            raise NotFoundError(f"Unknown {self._kind} view {view_id}")
        wb.close()

    def close_all(self) -> None:
        with self._lock:
            views = list(self._views.values())
            self._views.clear()
        for wb in views:
            wb.close()
