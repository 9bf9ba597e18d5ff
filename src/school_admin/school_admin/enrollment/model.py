from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Student:
    """A student actively enrolled in a class section."""

    student_id: str
    first_name: str
    last_name: str
    roll_no: Optional[str] = None
    enrollment_id: Optional[str] = None
    user_id: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
