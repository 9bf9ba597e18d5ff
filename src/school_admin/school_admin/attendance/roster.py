from __future__ import annotations

import logging
from typing import Sequence

from ..core.exceptions import NotFoundError
from ..enrollment.repository import EnrollmentRepository
from .model import AttendanceMark, Roster, RosterEntry, SavedRecord, Session
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class RosterMaterializer:
    """Build the editable working set for a session: one mark per enrolled student."""

    def __init__(self, enrollment: EnrollmentRepository, attendance: AttendanceRepository):
        self._enrollment = enrollment
        self._attendance = attendance

    def materialize(self, section_id: str, session: Session) -> Roster:
        students = self._enrollment.list_section_students(section_id)

        entries: list[RosterEntry] = []
        marks: dict[str, AttendanceMark] = {}
        for st in students:
            if st.student_id in marks:
                continue
            entries.append(
                RosterEntry(
                    student_id=st.student_id,
                    display_name=st.display_name,
                    roll_no=st.roll_no,
                    enrollment_id=st.enrollment_id,
                )
            )
            marks[st.student_id] = AttendanceMark()

        for student_id, record in self._match(entries, self._saved_records(session)):
            marks[student_id] = record.to_mark()

        return Roster(entries=tuple(entries), marks=marks)

    def _saved_records(self, session: Session) -> Sequence[SavedRecord]:
        try:
            return self._attendance.list_records(session.session_id)
        except NotFoundError:
            # Nothing recorded yet for this session: keep the defaults.
            logger.debug("No saved records for session %s", session.session_id)
            return []

    @staticmethod
    def _match(entries: Sequence[RosterEntry], records: Sequence[SavedRecord]):
        by_student = {e.student_id for e in entries}
        by_enrollment = {e.enrollment_id: e.student_id for e in entries if e.enrollment_id}
        for r in records:
            if r.student_id and r.student_id in by_student:
                yield r.student_id, r
            elif r.enrollment_id and r.enrollment_id in by_enrollment:
                yield by_enrollment[r.enrollment_id], r
            else:
                logger.debug("Ignoring record for enrollment %s: not on roster", r.enrollment_id)
