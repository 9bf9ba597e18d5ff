from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AcademicYear:
    year_id: str
    name: Optional[str]
    is_active: bool
