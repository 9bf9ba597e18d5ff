from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..core.enums import MarkStatus
from ..core.exceptions import RemoteStoreError
from ..remote.connection import ApiConnection
from ..remote.http_base import api_get, api_patch, api_post, as_id
from .model import SavedRecord, Session
from .repository import AttendanceRepository


def session_from_json(r: dict[str, Any]) -> Session:
    return Session(
        session_id=str(r["id"]),
        section_id=str(r["classSectionId"]),
        subject_id=as_id(r.get("subjectId")),
        session_date=parse_iso_date(r.get("date") or r["sessionDate"]),
        starts_at=r.get("startsAt") or r.get("startTime"),
        ends_at=r.get("endsAt") or r.get("endTime"),
        is_finalized=bool(r.get("isFinalized")),
        academic_year_id=as_id(r.get("academicYearId")),
    )


def record_from_json(r: dict[str, Any]) -> SavedRecord:
    minutes = r.get("minutesLate")
    try:
        status = MarkStatus(r.get("status"))
    except ValueError:
        raise RemoteStoreError(f"Unknown attendance status from API: {r.get('status')}") from None
    return SavedRecord(
        enrollment_id=as_id(r.get("enrollmentId")),
        student_id=as_id(r.get("studentProfileId")),
        status=status,
        comment=r.get("comment") or r.get("remarks"),
        minutes_late=int(minutes) if minutes is not None else None,
    )


class HttpAttendanceRepository(AttendanceRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def find_sessions(
        self,
        *,
        section_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        session_date: Optional[date] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[Session]:
        params = {
            "classSectionId": section_id,
            "subjectId": subject_id,
            "date": session_date.isoformat() if session_date else None,
            "dateFrom": date_from.isoformat() if date_from else None,
            "dateTo": date_to.isoformat() if date_to else None,
        }
        rows = api_get(self._conn, "attendance/sessions", {k: v for k, v in params.items() if v}) or []
        return [session_from_json(r) for r in rows]

    def create_session(
        self,
        *,
        section_id: str,
        subject_id: Optional[str],
        academic_year_id: str,
        session_date: date,
        starts_at: str,
        ends_at: str,
    ) -> Session:
        row = api_post(
            self._conn,
            "attendance/sessions",
            {
                "classSectionId": section_id,
                "subjectId": subject_id,
                "academicYearId": academic_year_id,
                "date": session_date.isoformat(),
                "startsAt": starts_at,
                "endsAt": ends_at,
            },
        )
        return session_from_json(row)

    def list_records(self, session_id: str) -> Sequence[SavedRecord]:
        rows = api_get(self._conn, f"attendance/sessions/{session_id}/records") or []
        return [record_from_json(r) for r in rows]

    def bulk_mark(self, session_id: str, records: Sequence[dict[str, Any]]) -> None:
        api_post(self._conn, f"attendance/sessions/{session_id}/bulk-mark", {"records": list(records)})

    def finalize_session(self, session_id: str) -> None:
        api_patch(self._conn, f"attendance/sessions/{session_id}/finalize", {"isFinalized": True})
