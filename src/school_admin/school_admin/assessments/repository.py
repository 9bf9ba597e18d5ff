from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from .model import AttemptContent, AttemptResult


class AttemptRepository(Protocol):
    def start_attempt(self, quiz_id: str) -> str:
        raise NotImplementedError

    def get_attempt(self, attempt_id: str, *, locale: Optional[str] = None) -> AttemptContent:
        raise NotImplementedError

    def save_answers(self, attempt_id: str, answers: Sequence[dict[str, Any]]) -> None:
        """Overwrite the selection of every question listed in `answers`."""

        raise NotImplementedError

    def submit_attempt(self, attempt_id: str) -> AttemptResult:
        raise NotImplementedError
