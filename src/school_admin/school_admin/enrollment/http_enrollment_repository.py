from __future__ import annotations

from typing import Sequence

from ..remote.connection import ApiConnection
from ..remote.http_base import api_get, as_id
from .model import Student
from .repository import EnrollmentRepository


class HttpEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def list_section_students(self, section_id: str) -> Sequence[Student]:
        rows = api_get(self._conn, f"enrollment/class-sections/{section_id}/students") or []
        return [
            Student(
                student_id=str(r.get("id") or r["studentProfileId"]),
                first_name=r.get("firstName") or "",
                last_name=r.get("lastName") or "",
                roll_no=r.get("rollNo"),
                enrollment_id=as_id(r.get("enrollmentId")),
                user_id=as_id(r.get("userId")),
            )
            for r in rows
        ]
