from __future__ import annotations

import threading
from typing import Any

from ..core.enums import QuestionType
from ..core.exceptions import ValidationError
from .model import AttemptContent, Question


class AnswerBuffer:
    """Selected options per question for one attempt.

    Every question of the attempt has an entry (possibly empty) from hydration
    on; entries are only mutated afterwards.
    """

    def __init__(self, attempt: AttemptContent):
        self._questions: dict[str, Question] = {q.question_id: q for q in attempt.questions}
        self._selected: dict[str, set[str]] = {
            qid: set(attempt.answers.get(qid, ())) for qid in self._questions
        }
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._selected)

    def question(self, question_id: str) -> Question:
        try:
            return self._questions[question_id]
        except KeyError:
            raise ValidationError(f"Question {question_id} is not part of this attempt") from None

    def selected(self, question_id: str) -> frozenset[str]:
        with self._lock:
            self.question(question_id)
            return frozenset(self._selected[question_id])

    def toggle_option(self, question_id: str, option_id: str, question_type: QuestionType | str) -> frozenset[str]:
        """Apply a click on an option.

        Single-choice questions hold at most one option: picking another one
        replaces it, picking the selected one clears it. Multi-choice questions
        flip the option's membership.
        """
        question = self.question(question_id)
        if not question.has_option(option_id):
            raise ValidationError(f"Option {option_id} does not belong to question {question_id}")
        try:
            qtype = QuestionType(question_type)
        except ValueError:
            raise ValidationError(f"Unknown question type: {question_type}") from None

        with self._lock:
            current = self._selected[question_id]
            if qtype.is_single_choice:
                had = option_id in current
                current.clear()
                if not had:
                    current.add(option_id)
            elif option_id in current:
                current.remove(option_id)
            else:
                current.add(option_id)
            return frozenset(current)

    def to_payload(self) -> list[dict[str, Any]]:
        with self._lock:
            return [
                {"questionId": qid, "selectedOptionIds": sorted(self._selected[qid])}
                for qid in self._questions
            ]
