from __future__ import annotations

import logging
import threading
from typing import Callable, TypeVar

from ..core.enums import GateState
from ..core.exceptions import FinalizedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FinalizationGate:
    """OPEN -> FINALIZING -> FINALIZED, one way.

    FINALIZING covers the remote finalize/submit call: edits are refused but
    the final flush may still write. A failed commit goes back to OPEN.
    """

    def __init__(self, state: GateState = GateState.OPEN, *, label: str = ""):
        self._state = GateState(state)
        self._label = label
        self._lock = threading.Lock()

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state == GateState.OPEN

    @property
    def is_finalized(self) -> bool:
        return self._state == GateState.FINALIZED

    def ensure_open(self) -> None:
        if self.is_finalized:
            raise FinalizedError(f"{self._label or 'Resource'} is finalized")

    def finalize(self, commit: Callable[[], T]) -> T:
        with self._lock:
            self.ensure_open()
            if self._state == GateState.FINALIZING:
                raise FinalizedError(f"{self._label or 'Resource'} is being finalized")
            self._state = GateState.FINALIZING
        try:
            result = commit()
        except Exception:
            with self._lock:
                self._state = GateState.OPEN
            raise
        with self._lock:
            self._state = GateState.FINALIZED
        logger.info("%s finalized", self._label or "Resource")
        return result
