from __future__ import annotations

from datetime import date
from typing import Any, Optional

import pytest

from src.school_admin.school_admin.academics.model import AcademicYear
from src.school_admin.school_admin.attendance.model import SavedRecord, Session
from src.school_admin.school_admin.core.enums import MarkStatus
from src.school_admin.school_admin.core.exceptions import NotFoundError
from src.school_admin.school_admin.enrollment.model import Student


class ManualTimer:
    def __init__(self, due: float, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by `advance()` instead of wall-clock time."""

    def __init__(self):
        self.now = 0.0
        self.timers: list[ManualTimer] = []

    def call_later(self, delay: float, callback) -> ManualTimer:
        t = ManualTimer(self.now + delay, callback)
        self.timers.append(t)
        return t

    @property
    def active(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self.active if t.due <= target + 1e-9]
            if not due:
                break
            t = min(due, key=lambda x: x.due)
            t.cancelled = True
            self.now = t.due
            t.callback()
        self.now = target


class InMemoryAcademics:
    def __init__(self, years: Optional[list[AcademicYear]] = None):
        self.years = years if years is not None else [AcademicYear(year_id="y-2024", name="2023-2024", is_active=True)]

    def list_academic_years(self):
        return list(self.years)


class InMemoryEnrollment:
    def __init__(self, students_by_section: Optional[dict[str, list[Student]]] = None):
        self.students_by_section = students_by_section or {}

    def list_section_students(self, section_id: str):
        return list(self.students_by_section.get(section_id, []))


class InMemoryAttendance:
    """Fake API: bulk-mark upserts by (session, enrollment) like the server does."""

    def __init__(self, clock: Optional[ManualScheduler] = None):
        self.sessions: list[Session] = []
        self.records: dict[tuple[str, str], dict[str, Any]] = {}
        self.bulk_calls: list[tuple[float, str, list[dict[str, Any]]]] = []
        self.created: list[dict[str, Any]] = []
        self.finalized: list[str] = []
        self.records_error: Optional[Exception] = None
        self.bulk_error: Optional[Exception] = None
        self.on_finalize = None
        self._clock = clock
        self._next_id = 0

    def find_sessions(self, *, section_id=None, subject_id=None, session_date=None, date_from=None, date_to=None):
        rows = self.sessions
        if section_id:
            rows = [s for s in rows if s.section_id == section_id]
        if subject_id:
            rows = [s for s in rows if s.subject_id == subject_id]
        if date_from:
            rows = [s for s in rows if s.session_date >= date_from]
        if date_to:
            rows = [s for s in rows if s.session_date <= date_to]
        return list(rows)

    def create_session(self, *, section_id, subject_id, academic_year_id, session_date, starts_at, ends_at):
        self._next_id += 1
        s = Session(
            session_id=f"s-{self._next_id}",
            section_id=section_id,
            subject_id=subject_id,
            session_date=session_date,
            starts_at=starts_at,
            ends_at=ends_at,
            academic_year_id=academic_year_id,
        )
        self.created.append({"academic_year_id": academic_year_id, "starts_at": starts_at, "ends_at": ends_at})
        self.sessions.append(s)
        return s

    def list_records(self, session_id: str):
        if self.records_error is not None:
            raise self.records_error
        rows = [r for (sid, _), r in self.records.items() if sid == session_id]
        if not rows:
            raise NotFoundError("No records")
        return [
            SavedRecord(
                enrollment_id=r["enrollmentId"],
                status=MarkStatus(r["status"]),
                comment=r.get("comment"),
                minutes_late=r.get("minutesLate"),
            )
            for r in rows
        ]

    def bulk_mark(self, session_id: str, records):
        if self.bulk_error is not None:
            raise self.bulk_error
        if session_id in self.finalized:
            raise AssertionError("write reached a finalized session")
        now = self._clock.now if self._clock else 0.0
        self.bulk_calls.append((now, session_id, [dict(r) for r in records]))
        for r in records:
            self.records[(session_id, r["enrollmentId"])] = dict(r)

    def finalize_session(self, session_id: str):
        if self.on_finalize is not None:
            self.on_finalize()
        self.finalized.append(session_id)


def make_students(count: int, prefix: str = "st") -> list[Student]:
    return [
        Student(
            student_id=f"{prefix}-{i}",
            first_name=f"First{i}",
            last_name=f"Last{i}",
            roll_no=str(i),
            enrollment_id=f"enr-{i}",
        )
        for i in range(1, count + 1)
    ]


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def attendance_repo(scheduler) -> InMemoryAttendance:
    return InMemoryAttendance(clock=scheduler)


@pytest.fixture
def academics_repo() -> InMemoryAcademics:
    return InMemoryAcademics()


@pytest.fixture
def enrollment_repo() -> InMemoryEnrollment:
    return InMemoryEnrollment({"6A": make_students(25)})


@pytest.fixture
def session_6a() -> Session:
    return Session(session_id="s-existing", section_id="6A", subject_id="MATH", session_date=date(2024, 3, 1))


@pytest.fixture
def make_roster_students():
    return make_students
