from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional, Sequence

from ..academics.repository import AcademicsRepository
from ..autosave.gate import FinalizationGate
from ..autosave.persister import DebouncedPersister
from ..autosave.scheduler import Scheduler
from ..core.constants import DEFAULT_AUTOSAVE_SECONDS
from ..core.enums import GateState, MarkStatus
from ..core.exceptions import TransportError
from ..enrollment.repository import EnrollmentRepository
from .buffer import AttendanceBuffer
from .model import AttendanceMark, Roster, Session
from .offline_queue import OfflineQueue
from .repository import AttendanceRepository
from .resolver import SessionResolver
from .roster import RosterMaterializer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkRowUI:
    student_id: str
    display_name: str
    roll_no: Optional[str]
    status: str
    comment: str
    minutes_late: Optional[int]


class AttendanceWorkbench:
    """One open roster: session, local marks, autosave and finalization gate."""

    def __init__(
        self,
        session: Session,
        roster: Roster,
        attendance: AttendanceRepository,
        *,
        delay: float = DEFAULT_AUTOSAVE_SECONDS,
        scheduler: Optional[Scheduler] = None,
        offline_queue: Optional[OfflineQueue] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        self._session = session
        self._attendance = attendance
        self._offline_queue = offline_queue
        self.buffer = AttendanceBuffer(roster)
        self.gate = FinalizationGate(
            GateState.FINALIZED if session.is_finalized else GateState.OPEN,
            label=f"Session {session.session_id}",
        )
        self.persister = DebouncedPersister(
            self.buffer,
            self._bulk_mark,
            gate=self.gate,
            delay=delay,
            scheduler=scheduler,
            on_error=on_error,
            label=f"session {session.session_id}",
        )

    @property
    def session(self) -> Session:
        return self._session

    @property
    def is_finalized(self) -> bool:
        return self.gate.is_finalized

    def set_status(self, student_id: str, status: MarkStatus | str) -> bool:
        return self.update_mark(student_id, status=status)

    def set_comment(self, student_id: str, text: Optional[str]) -> bool:
        return self.update_mark(student_id, comment=text)

    def set_minutes_late(self, student_id: str, minutes: Optional[int]) -> bool:
        return self.update_mark(student_id, minutes_late=minutes)

    def update_mark(self, student_id: str, **changes: Any) -> bool:
        """Apply status/comment/minutes_late together; all or nothing."""
        if not self.gate.is_open:
            logger.info("Ignoring edit of %s: session %s is %s", student_id, self._session.session_id, self.gate.state.value.lower())
            return False
        if changes:
            self.buffer.update(student_id, **changes)
            self.persister.schedule()
        return True

    def save(self) -> bool:
        return self.persister.flush()

    def finalize(self) -> None:
        def commit():
            self.persister.flush()
            self._attendance.finalize_session(self._session.session_id)

        self.gate.finalize(commit)
        self.persister.cancel()

    def close(self) -> None:
        self.persister.cancel()

    def summary(self) -> dict[str, int]:
        return self.buffer.summary()

    def rows(self) -> list[MarkRowUI]:
        marks = self.buffer.marks()
        return [
            MarkRowUI(
                student_id=e.student_id,
                display_name=e.display_name,
                roll_no=e.roll_no,
                status=marks[e.student_id].status.value,
                comment=marks[e.student_id].comment,
                minutes_late=marks[e.student_id].minutes_late,
            )
            for e in self.buffer.entries
        ]

    def mark(self, student_id: str) -> AttendanceMark:
        return self.buffer.get(student_id)

    def _bulk_mark(self, records: list[dict[str, Any]]) -> None:
        queue_path = f"attendance/sessions/{self._session.session_id}/bulk-mark"
        try:
            self._attendance.bulk_mark(self._session.session_id, records)
        except TransportError:
            if self._offline_queue is not None:
                self._offline_queue.enqueue(queue_path, {"records": records})
            raise
        if self._offline_queue is not None:
            self._offline_queue.discard(queue_path)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        enrollment: EnrollmentRepository,
        academics: AcademicsRepository,
        *,
        autosave_seconds: float = DEFAULT_AUTOSAVE_SECONDS,
        scheduler: Optional[Scheduler] = None,
        offline_queue: Optional[OfflineQueue] = None,
        resolver: Optional[SessionResolver] = None,
    ):
        self._attendance = attendance
        self._resolver = resolver or SessionResolver(attendance, academics)
        self._materializer = RosterMaterializer(enrollment, attendance)
        self._autosave_seconds = float(autosave_seconds)
        self._scheduler = scheduler
        self._offline_queue = offline_queue

    @property
    def offline_queue(self) -> Optional[OfflineQueue]:
        return self._offline_queue

    def open_roster(
        self,
        section_id: str,
        subject_id: Optional[str],
        session_date: date,
        *,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> AttendanceWorkbench:
        session = self._resolver.resolve(section_id, subject_id, session_date)
        roster = self._materializer.materialize(section_id, session)
        logger.debug("Loaded %d students for session %s", len(roster), session.session_id)
        return AttendanceWorkbench(
            session,
            roster,
            self._attendance,
            delay=self._autosave_seconds,
            scheduler=self._scheduler,
            offline_queue=self._offline_queue,
            on_error=on_error,
        )

    def list_sessions(
        self,
        *,
        section_id: Optional[str] = None,
        subject_id: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> Sequence[Session]:
        return self._attendance.find_sessions(
            section_id=section_id,
            subject_id=subject_id,
            date_from=date_from,
            date_to=date_to,
        )
