from __future__ import annotations

from enum import Enum


class MarkStatus(str, Enum):
    """Attendance status for one student in one session."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"


class QuestionType(str, Enum):
    MCQ_SINGLE = "MCQ_SINGLE"
    MCQ_MULTI = "MCQ_MULTI"
    TRUE_FALSE = "TRUE_FALSE"

    @property
    def is_single_choice(self) -> bool:
        return self in (QuestionType.MCQ_SINGLE, QuestionType.TRUE_FALSE)


class AttemptStatus(str, Enum):
    """Lifecycle of a quiz attempt as reported by the API."""

    CREATED = "CREATED"
    IN_PROGRESS = "IN_PROGRESS"
    SUBMITTED = "SUBMITTED"
    GRADED = "GRADED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> "AttemptStatus":
        try:
            return cls(str(value or "").upper())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_closed(self) -> bool:
        return self in (AttemptStatus.SUBMITTED, AttemptStatus.GRADED)


class GateState(str, Enum):
    OPEN = "OPEN"
    FINALIZING = "FINALIZING"
    FINALIZED = "FINALIZED"


class Locale(str, Enum):
    """Locales the API understands in Accept-Language."""

    FR = "fr"
    EN = "en"
    AR = "ar"
