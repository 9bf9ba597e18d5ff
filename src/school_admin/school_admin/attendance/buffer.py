from __future__ import annotations

import threading
from dataclasses import replace
from typing import Any, Optional

from ..common.validators import require_int_range, require_max_length
from ..core.constants import MAX_COMMENT_LENGTH, MAX_MINUTES_LATE
from ..core.enums import MarkStatus
from ..core.exceptions import ValidationError
from .model import AttendanceMark, Roster, RosterEntry


class AttendanceBuffer:
    """Local edits for one session roster.

    Hydrated once from a Roster; afterwards entries are only mutated, never
    added or removed. The lock makes snapshots safe from the autosave timer
    thread.
    """

    def __init__(self, roster: Roster):
        self._entries: tuple[RosterEntry, ...] = roster.entries
        self._marks: dict[str, AttendanceMark] = {e.student_id: roster.marks.get(e.student_id, AttendanceMark()) for e in roster.entries}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._marks)

    def __contains__(self, student_id: str) -> bool:
        return student_id in self._marks

    @property
    def entries(self) -> tuple[RosterEntry, ...]:
        return self._entries

    def get(self, student_id: str) -> AttendanceMark:
        with self._lock:
            return self._marks[self._known(student_id)]

    def set_status(self, student_id: str, status: MarkStatus | str) -> AttendanceMark:
        return self.update(student_id, status=status)

    def set_comment(self, student_id: str, text: Optional[str]) -> AttendanceMark:
        return self.update(student_id, comment=text)

    def set_minutes_late(self, student_id: str, minutes: Optional[int]) -> AttendanceMark:
        return self.update(student_id, minutes_late=minutes)

    def update(self, student_id: str, **changes: Any) -> AttendanceMark:
        """Apply several field edits at once.

        Every field is validated before any is applied, so a rejected edit
        leaves the mark untouched.
        """
        clean: dict[str, Any] = {}
        for name, value in changes.items():
            if name == "status":
                try:
                    clean[name] = MarkStatus(value)
                except ValueError:
                    raise ValidationError(f"Unknown attendance status: {value}") from None
            elif name == "comment":
                clean[name] = require_max_length(value, "Comment", MAX_COMMENT_LENGTH)
            elif name == "minutes_late":
                clean[name] = (
                    None if value is None else require_int_range(value, "Minutes late", low=0, high=MAX_MINUTES_LATE)
                )
            else:
                raise ValidationError(f"Unknown attendance field: {name}")
        return self._update(student_id, **clean)

    def marks(self) -> dict[str, AttendanceMark]:
        with self._lock:
            return dict(self._marks)

    def summary(self) -> dict[str, int]:
        with self._lock:
            counts = {s.value: 0 for s in MarkStatus}
            for m in self._marks.values():
                counts[m.status.value] += 1
            return counts

    def to_payload(self) -> list[dict[str, Any]]:
        """Serialize every entry as a bulk-mark record, in roster order."""
        with self._lock:
            records = []
            for e in self._entries:
                m = self._marks[e.student_id]
                rec: dict[str, Any] = {
                    "enrollmentId": e.enrollment_id or e.student_id,
                    "status": m.status.value,
                }
                if m.comment:
                    rec["comment"] = m.comment
                if m.status == MarkStatus.LATE:
                    rec["minutesLate"] = m.minutes_late or 0
                records.append(rec)
            return records

    def _known(self, student_id: str) -> str:
        if student_id not in self._marks:
            raise ValidationError(f"Student {student_id} is not on this roster")
        return student_id

    def _update(self, student_id: str, **changes) -> AttendanceMark:
        with self._lock:
            key = self._known(student_id)
            mark = replace(self._marks[key], **changes)
            self._marks[key] = mark
            return mark
