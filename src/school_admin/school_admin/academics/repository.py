from __future__ import annotations

from typing import Protocol, Sequence

from .model import AcademicYear


class AcademicsRepository(Protocol):
    def list_academic_years(self) -> Sequence[AcademicYear]:
        raise NotImplementedError
