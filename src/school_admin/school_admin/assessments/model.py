from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import AttemptStatus, QuestionType


@dataclass(frozen=True)
class Option:
    option_id: str
    text: str


@dataclass(frozen=True)
class Question:
    question_id: str
    question_type: QuestionType
    prompt: str
    points: float
    options: tuple[Option, ...] = ()

    def has_option(self, option_id: str) -> bool:
        return any(o.option_id == option_id for o in self.options)


@dataclass(frozen=True)
class AttemptContent:
    """What the quiz player needs: questions in sealed order plus saved answers."""

    attempt_id: str
    status: AttemptStatus
    questions: tuple[Question, ...]
    answers: dict[str, tuple[str, ...]] = field(default_factory=dict)
    time_limit_sec: Optional[int] = None
    started_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttemptResult:
    score: float
    max_score: float
