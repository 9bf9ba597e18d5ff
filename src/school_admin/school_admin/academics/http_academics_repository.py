from __future__ import annotations

from typing import Sequence

from ..remote.connection import ApiConnection
from ..remote.http_base import api_get
from .model import AcademicYear
from .repository import AcademicsRepository


class HttpAcademicsRepository(AcademicsRepository):
    def __init__(self, conn: ApiConnection):
        self._conn = conn

    def list_academic_years(self) -> Sequence[AcademicYear]:
        rows = api_get(self._conn, "academics/academic-years") or []
        return [
            AcademicYear(
                year_id=str(r["id"]),
                name=r.get("name"),
                is_active=bool(r.get("isActive")),
            )
            for r in rows
        ]
