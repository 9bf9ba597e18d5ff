from __future__ import annotations

from dataclasses import asdict
from datetime import date
from typing import Any, Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..remote.http_base import as_id
from ..container import Container
from .model import Session
from .service import AttendanceWorkbench


def session_to_json(s: Session) -> dict[str, Any]:
    return {
        "id": s.session_id,
        "classSectionId": s.section_id,
        "subjectId": s.subject_id,
        "date": s.session_date.isoformat(),
        "startsAt": s.starts_at,
        "endsAt": s.ends_at,
        "isFinalized": s.is_finalized,
    }


def register(app: Flask, container: Container) -> None:
    views = container.attendance_views
    service = container.attendance_service

    def _body() -> dict[str, Any]:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    def _parse_date(value: Optional[str], field_name: str) -> Optional[date]:
        if not value:
            return None
        try:
            return parse_iso_date(value)
        except ValueError:
            raise ValidationError(f"{field_name} must be YYYY-MM-DD") from None

    def _view_json(view_id: str, wb: AttendanceWorkbench) -> dict[str, Any]:
        err = wb.persister.last_error
        return {
            "success": True,
            "viewId": view_id,
            "session": {**session_to_json(wb.session), "isFinalized": wb.is_finalized},
            "rows": [asdict(r) for r in wb.rows()],
            "summary": wb.summary(),
            "autosavePending": wb.persister.pending,
            "lastError": str(err) if err else None,
        }

    @app.route("/api/attendance/roster", methods=["POST"], endpoint="api_attendance_open_roster")
    def open_roster():
        data = _body()
        section_id = require_non_empty(data.get("classSectionId"), "Class section")
        subject_id = as_id(data.get("subjectId"))
        session_date = _parse_date(require_non_empty(data.get("date"), "Date"), "Date")

        wb = service.open_roster(section_id, subject_id, session_date)
        view_id = views.add(wb)
        return jsonify(_view_json(view_id, wb)), 201

    @app.route("/api/attendance/views/<view_id>", methods=["GET"], endpoint="api_attendance_view")
    def get_view(view_id: str):
        return jsonify(_view_json(view_id, views.get(view_id)))

    @app.route("/api/attendance/views/<view_id>", methods=["DELETE"], endpoint="api_attendance_close_view")
    def close_view(view_id: str):
        views.close(view_id)
        return jsonify({"success": True})

    @app.route("/api/attendance/views/<view_id>/marks/<student_id>", methods=["PATCH"], endpoint="api_attendance_mark")
    def update_mark(view_id: str, student_id: str):
        wb = views.get(view_id)
        data = _body()
        fields = {"status": "status", "comment": "comment", "minutesLate": "minutes_late"}
        changes = {name: data[key] for key, name in fields.items() if key in data}
        applied = wb.update_mark(student_id, **changes)
        mark = wb.mark(student_id)
        return jsonify(
            {
                "success": applied,
                "studentId": student_id,
                "status": mark.status.value,
                "comment": mark.comment,
                "minutesLate": mark.minutes_late,
                "message": None if applied else "Session is finalized",
            }
        ), (200 if applied else 409)

    @app.route("/api/attendance/views/<view_id>/save", methods=["POST"], endpoint="api_attendance_save")
    def save(view_id: str):
        wb = views.get(view_id)
        sent = wb.save()
        return jsonify({"success": True, "saved": sent, "summary": wb.summary()})

    @app.route("/api/attendance/views/<view_id>/finalize", methods=["POST"], endpoint="api_attendance_finalize")
    def finalize(view_id: str):
        wb = views.get(view_id)
        wb.finalize()
        return jsonify(_view_json(view_id, wb))

    @app.route("/api/attendance/sessions", methods=["GET"], endpoint="api_attendance_sessions")
    def list_sessions():
        rows = service.list_sessions(
            section_id=request.args.get("classSectionId") or None,
            subject_id=request.args.get("subjectId") or None,
            date_from=_parse_date(request.args.get("dateFrom"), "dateFrom"),
            date_to=_parse_date(request.args.get("dateTo"), "dateTo"),
        )
        return jsonify([session_to_json(s) for s in rows])

    @app.route("/api/attendance/offline/flush", methods=["POST"], endpoint="api_attendance_offline_flush")
    def flush_offline():
        queue = container.offline_queue
        if queue is None:
            return jsonify({"success": True, "sent": 0, "pending": 0})
        sent = queue.flush(container.conn)
        return jsonify({"success": True, "sent": sent, "pending": len(queue.pending())})
