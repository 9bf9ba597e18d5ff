from __future__ import annotations

from typing import Any

from flask import Flask, jsonify, request

from ..common.validators import require_non_empty
from ..container import Container
from .service import AttemptWorkbench


def register(app: Flask, container: Container) -> None:
    views = container.attempt_views
    service = container.assessment_service

    def _body() -> dict[str, Any]:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    def _view_json(view_id: str, wb: AttemptWorkbench) -> dict[str, Any]:
        attempt = wb.attempt
        err = wb.persister.last_error
        return {
            "success": True,
            "viewId": view_id,
            "attemptId": attempt.attempt_id,
            "submitted": wb.is_submitted,
            "timeLimitSec": attempt.time_limit_sec,
            "startedAt": attempt.started_at.isoformat() if attempt.started_at else None,
            "questions": [
                {
                    "questionId": q.question_id,
                    "type": q.question_type.value,
                    "prompt": q.prompt,
                    "points": q.points,
                    "options": [{"id": o.option_id, "text": o.text} for o in q.options],
                    "selectedOptionIds": sorted(wb.selected(q.question_id)),
                }
                for q in attempt.questions
            ],
            "autosavePending": wb.persister.pending,
            "lastError": str(err) if err else None,
        }

    @app.route("/api/assessments/attempts", methods=["POST"], endpoint="api_assess_start")
    def start_attempt():
        attempt_id = service.start_attempt(_body().get("quizId"))
        return jsonify({"success": True, "attemptId": attempt_id}), 201

    @app.route("/api/assessments/attempts/<attempt_id>/open", methods=["POST"], endpoint="api_assess_open")
    def open_attempt(attempt_id: str):
        wb = service.open_attempt(attempt_id, locale=request.args.get("locale") or None)
        view_id = views.add(wb)
        return jsonify(_view_json(view_id, wb)), 201

    @app.route("/api/assessments/views/<view_id>", methods=["GET"], endpoint="api_assess_view")
    def get_view(view_id: str):
        return jsonify(_view_json(view_id, views.get(view_id)))

    @app.route("/api/assessments/views/<view_id>", methods=["DELETE"], endpoint="api_assess_close")
    def close_view(view_id: str):
        views.close(view_id)
        return jsonify({"success": True})

    @app.route("/api/assessments/views/<view_id>/toggle", methods=["POST"], endpoint="api_assess_toggle")
    def toggle(view_id: str):
        wb = views.get(view_id)
        data = _body()
        question_id = require_non_empty(data.get("questionId"), "Question")
        option_id = require_non_empty(data.get("optionId"), "Option")
        applied = wb.toggle(question_id, option_id)
        return jsonify(
            {
                "success": applied,
                "questionId": question_id,
                "selectedOptionIds": sorted(wb.selected(question_id)),
                "message": None if applied else "Attempt is already submitted",
            }
        ), (200 if applied else 409)

    @app.route("/api/assessments/views/<view_id>/save", methods=["POST"], endpoint="api_assess_save")
    def save(view_id: str):
        sent = views.get(view_id).save()
        return jsonify({"success": True, "saved": sent})

    @app.route("/api/assessments/views/<view_id>/submit", methods=["POST"], endpoint="api_assess_submit")
    def submit(view_id: str):
        result = views.get(view_id).submit()
        return jsonify({"success": True, "score": result.score, "maxScore": result.max_score})
