from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional

from ..academics.repository import AcademicsRepository
from ..common.datetime_utils import default_session_window, now_local
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_SESSION_MINUTES
from ..core.exceptions import NoActiveYearError
from .model import Session
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class SessionResolver:
    """Find the session for (section, subject, date), creating it on first use.

    Two callers racing on the same triple can both create a session; the API
    decides whether duplicates are allowed.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        academics: AcademicsRepository,
        *,
        session_minutes: int = DEFAULT_SESSION_MINUTES,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._academics = academics
        self._session_minutes = int(session_minutes)
        self._clock = clock

    def resolve(self, section_id: str, subject_id: Optional[str], session_date: date) -> Session:
        section_id = require_non_empty(section_id, "Class section")

        candidates = self._attendance.find_sessions(
            section_id=section_id,
            subject_id=subject_id,
            session_date=session_date,
        )
        for s in candidates:
            if s.matches(section_id, subject_id, session_date):
                return s

        active = next((y for y in self._academics.list_academic_years() if y.is_active), None)
        if not active:
            raise NoActiveYearError("No active academic year found")

        starts_at, ends_at = default_session_window(self._clock(), minutes=self._session_minutes)
        session = self._attendance.create_session(
            section_id=section_id,
            subject_id=subject_id,
            academic_year_id=active.year_id,
            session_date=session_date,
            starts_at=starts_at,
            ends_at=ends_at,
        )
        logger.info(
            "Created attendance session %s for section=%s subject=%s date=%s",
            session.session_id, section_id, subject_id, session_date,
        )
        return session
