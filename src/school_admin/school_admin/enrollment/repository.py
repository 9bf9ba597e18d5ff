from __future__ import annotations

from typing import Protocol, Sequence

from .model import Student


class EnrollmentRepository(Protocol):
    def list_section_students(self, section_id: str) -> Sequence[Student]:
        raise NotImplementedError
