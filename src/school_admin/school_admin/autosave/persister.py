from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Protocol

from ..core.constants import DEFAULT_AUTOSAVE_SECONDS
from .gate import FinalizationGate
from .scheduler import Scheduler, ThreadingScheduler, TimerHandle

logger = logging.getLogger(__name__)


class PersistableBuffer(Protocol):
    def __len__(self) -> int:
        raise NotImplementedError

    def to_payload(self) -> list[dict[str, Any]]:
        raise NotImplementedError


class DebouncedPersister:
    """Coalesce buffer edits into full-overwrite writes.

    Every `schedule()` replaces the single pending timer, so only the buffer
    state at fire time is written. `flush()` is the explicit Save: it skips
    the timer and lets errors reach the caller. Errors from timer-fired writes
    go to `on_error` and never touch the buffer.

    A manual flush and a firing timer are not mutually excluded; both send the
    whole buffer, and whichever write the server sees last wins.
    """

    def __init__(
        self,
        buffer: PersistableBuffer,
        sink: Callable[[list[dict[str, Any]]], Any],
        *,
        gate: FinalizationGate,
        delay: float = DEFAULT_AUTOSAVE_SECONDS,
        scheduler: Optional[Scheduler] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        label: str = "",
    ):
        self._buffer = buffer
        self._sink = sink
        self._gate = gate
        self._delay = float(delay)
        self._scheduler = scheduler or ThreadingScheduler()
        self._on_error = on_error
        self._label = label
        self._handle: Optional[TimerHandle] = None
        # Bumped on every schedule/cancel; a timer only acts if its generation is current.
        self._generation = 0
        self._lock = threading.Lock()
        self.last_error: Optional[Exception] = None
        self.writes = 0

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> bool:
        if self._gate.is_finalized:
            return False
        with self._lock:
            self._cancel_locked()
            generation = self._generation
            self._handle = self._scheduler.call_later(self._delay, lambda: self._fire(generation))
        return True

    def flush(self) -> bool:
        """Write now. Returns False when the buffer is empty."""
        self._gate.ensure_open()
        self.cancel()
        return self._write()

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def _cancel_locked(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._handle = None
        if self._gate.is_finalized:
            return
        try:
            self._write()
        except Exception as e:
            logger.warning("Autosave of %s failed: %s", self._label or "buffer", e)
            self.last_error = e
            if self._on_error:
                self._on_error(e)

    def _write(self) -> bool:
        if not len(self._buffer):
            return False
        payload = self._buffer.to_payload()
        self._sink(payload)
        self.writes += 1
        self.last_error = None
        logger.debug("Persisted %d entries of %s", len(payload), self._label or "buffer")
        return True
