from __future__ import annotations

import logging
from typing import Callable, Optional

from ..autosave.gate import FinalizationGate
from ..autosave.persister import DebouncedPersister
from ..autosave.scheduler import Scheduler
from ..common.validators import require_locale, require_non_empty
from ..core.constants import DEFAULT_AUTOSAVE_SECONDS
from ..core.enums import GateState
from .buffer import AnswerBuffer
from .model import AttemptContent, AttemptResult
from .repository import AttemptRepository

logger = logging.getLogger(__name__)


class AttemptWorkbench:
    """A student's open attempt: selections, autosave and submit gate."""

    def __init__(
        self,
        attempt: AttemptContent,
        attempts: AttemptRepository,
        *,
        delay: float = DEFAULT_AUTOSAVE_SECONDS,
        scheduler: Optional[Scheduler] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        self._attempt = attempt
        self._attempts = attempts
        self.result: Optional[AttemptResult] = None
        self.buffer = AnswerBuffer(attempt)
        self.gate = FinalizationGate(
            GateState.FINALIZED if attempt.status.is_closed else GateState.OPEN,
            label=f"Attempt {attempt.attempt_id}",
        )
        self.persister = DebouncedPersister(
            self.buffer,
            lambda answers: self._attempts.save_answers(attempt.attempt_id, answers),
            gate=self.gate,
            delay=delay,
            scheduler=scheduler,
            on_error=on_error,
            label=f"attempt {attempt.attempt_id}",
        )

    @property
    def attempt(self) -> AttemptContent:
        return self._attempt

    @property
    def is_submitted(self) -> bool:
        return self.gate.is_finalized

    def toggle(self, question_id: str, option_id: str) -> bool:
        if not self.gate.is_open:
            logger.info("Ignoring answer change on submitted attempt %s", self._attempt.attempt_id)
            return False
        question = self.buffer.question(question_id)
        self.buffer.toggle_option(question_id, option_id, question.question_type)
        self.persister.schedule()
        return True

    def selected(self, question_id: str) -> frozenset[str]:
        return self.buffer.selected(question_id)

    def save(self) -> bool:
        return self.persister.flush()

    def submit(self) -> AttemptResult:
        def commit() -> AttemptResult:
            # Push pending edits before grading.
            self.persister.flush()
            return self._attempts.submit_attempt(self._attempt.attempt_id)

        self.result = self.gate.finalize(commit)
        self.persister.cancel()
        return self.result

    def close(self) -> None:
        self.persister.cancel()


class AssessmentService:
    def __init__(
        self,
        attempts: AttemptRepository,
        *,
        autosave_seconds: float = DEFAULT_AUTOSAVE_SECONDS,
        scheduler: Optional[Scheduler] = None,
        locale: Optional[str] = None,
    ):
        self._attempts = attempts
        self._autosave_seconds = float(autosave_seconds)
        self._scheduler = scheduler
        self._locale = locale

    def start_attempt(self, quiz_id: str) -> str:
        return self._attempts.start_attempt(require_non_empty(quiz_id, "Quiz"))

    def open_attempt(
        self,
        attempt_id: str,
        *,
        locale: Optional[str] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> AttemptWorkbench:
        locale = require_locale(locale) if locale else self._locale
        attempt = self._attempts.get_attempt(require_non_empty(attempt_id, "Attempt"), locale=locale)
        return AttemptWorkbench(
            attempt,
            self._attempts,
            delay=self._autosave_seconds,
            scheduler=self._scheduler,
            on_error=on_error,
        )
