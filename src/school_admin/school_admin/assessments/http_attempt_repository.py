from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Sequence

from ..core.enums import AttemptStatus, QuestionType
from ..core.exceptions import RemoteStoreError
from ..remote.connection import ApiConnection
from ..remote.http_base import api_get, api_post
from .model import AttemptContent, AttemptResult, Option, Question
from .repository import AttemptRepository


def _parse_started_at(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def attempt_from_json(data: dict[str, Any]) -> AttemptContent:
    questions = tuple(
        Question(
            question_id=str(q["questionId"]),
            question_type=QuestionType(q["type"]),
            prompt=q.get("prompt") or "",
            points=float(q.get("points") or 0),
            options=tuple(Option(option_id=str(o["id"]), text=o.get("text") or "") for o in q.get("options") or []),
        )
        for q in data.get("questions") or []
    )
    answers = {str(qid): tuple(str(i) for i in ids or []) for qid, ids in (data.get("answers") or {}).items()}
    return AttemptContent(
        attempt_id=str(data["attemptId"]),
        status=AttemptStatus.parse(data.get("status")),
        questions=questions,
        answers=answers,
        time_limit_sec=data.get("timeLimitSec"),
        started_at=_parse_started_at(data.get("startedAt")),
    )


class HttpAttemptRepository(AttemptRepository):
    base = "assessments"

    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def start_attempt(self, quiz_id: str) -> str:
        data = api_post(self._conn, f"{self.base}/attempts/start", {"quizId": quiz_id}) or {}
        if "attemptId" not in data:
            raise RemoteStoreError("Attempt was not created")
        return str(data["attemptId"])

    def get_attempt(self, attempt_id: str, *, locale: Optional[str] = None) -> AttemptContent:
        params = {"locale": locale} if locale else None
        return attempt_from_json(api_get(self._conn, f"{self.base}/attempts/{attempt_id}", params))

    def save_answers(self, attempt_id: str, answers: Sequence[dict[str, Any]]) -> None:
        api_post(self._conn, f"{self.base}/attempts/{attempt_id}/answers", {"answers": list(answers)})

    def submit_attempt(self, attempt_id: str) -> AttemptResult:
        data = api_post(self._conn, f"{self.base}/attempts/{attempt_id}/submit") or {}
        return AttemptResult(
            score=float(data.get("score") or 0),
            max_score=float(data.get("maxScore") or 0),
        )
