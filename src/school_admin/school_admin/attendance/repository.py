from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from .model import SavedRecord, Session


class AttendanceRepository(Protocol):
    def find_sessions(
        self,
        *,
        section_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        session_date: Optional[date] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[Session]:
        raise NotImplementedError

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
        raise NotImplementedError

    def list_records(self, session_id: str) -> Sequence[SavedRecord]:
        """Raises NotFoundError when nothing has been recorded for the session."""

        raise NotImplementedError

    def bulk_mark(self, session_id: str, records: Sequence[dict[str, Any]]) -> None:
        """Overwrite every record of the session listed in `records`."""

        raise NotImplementedError

    def finalize_session(self, session_id: str) -> None:
        raise NotImplementedError
