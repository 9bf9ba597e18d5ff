from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..core.enums import MarkStatus


@dataclass(frozen=True)
class Session:
    """Domain entity: attendance session for (class section, subject, date)."""

    session_id: str
    section_id: str
    subject_id: Optional[str]
    session_date: date
    starts_at: Optional[str] = None
    ends_at: Optional[str] = None
    is_finalized: bool = False
    academic_year_id: Optional[str] = None

    def matches(self, section_id: str, subject_id: Optional[str], session_date: date) -> bool:
        return (
            self.section_id == section_id
            and self.subject_id == subject_id
            and self.session_date == session_date
        )


@dataclass(frozen=True)
class AttendanceMark:
    status: MarkStatus = MarkStatus.PRESENT
    comment: str = ""
    minutes_late: Optional[int] = None


@dataclass(frozen=True)
class RosterEntry:
    student_id: str
    display_name: str
    roll_no: Optional[str] = None
    enrollment_id: Optional[str] = None


@dataclass(frozen=True)
class SavedRecord:
    """A mark already stored server-side for a session.

    The API keys records by enrollment; some deployments also echo the student
    profile id.
    """

    enrollment_id: Optional[str]
    status: MarkStatus
    student_id: Optional[str] = None
    comment: Optional[str] = None
    minutes_late: Optional[int] = None

    def to_mark(self) -> AttendanceMark:
        return AttendanceMark(
            status=self.status,
            comment=self.comment or "",
            minutes_late=self.minutes_late,
        )


@dataclass(frozen=True)
class Roster:
    """Roster students (in API order) and one mark per student."""

    entries: tuple[RosterEntry, ...]
    marks: dict[str, AttendanceMark] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.entries)
