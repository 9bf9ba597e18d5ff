from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import requests

from .academics.http_academics_repository import HttpAcademicsRepository
from .assessments.http_attempt_repository import HttpAttemptRepository
from .assessments.service import AssessmentService, AttemptWorkbench
from .attendance.http_attendance_repository import HttpAttendanceRepository
from .attendance.offline_queue import OfflineQueue
from .attendance.service import AttendanceService, AttendanceWorkbench
from .autosave.scheduler import Scheduler
from .core.constants import DEFAULT_AUTOSAVE_SECONDS, DEFAULT_LOCALE, DEFAULT_REQUEST_TIMEOUT
from .enrollment.http_enrollment_repository import HttpEnrollmentRepository
from .remote.connection import ApiConfig, ApiConnection
from .views.registry import ViewRegistry


@dataclass(frozen=True)
class Container:
    conn: ApiConnection

    academics_repo: HttpAcademicsRepository
    enrollment_repo: HttpEnrollmentRepository
    attendance_repo: HttpAttendanceRepository
    attempts_repo: HttpAttemptRepository

    offline_queue: Optional[OfflineQueue]

    attendance_service: AttendanceService
    assessment_service: AssessmentService

    attendance_views: ViewRegistry[AttendanceWorkbench]
    attempt_views: ViewRegistry[AttemptWorkbench]

    def shutdown(self) -> None:
        """Tear down open views (abandoning pending autosaves) and the HTTP session."""
        self.attendance_views.close_all()
        self.attempt_views.close_all()
        if self.conn is not None:
            self.conn.close()


def build_container(
    *,
    api_config: dict[str, Any],
    attendance_autosave_seconds: float = DEFAULT_AUTOSAVE_SECONDS,
    answers_autosave_seconds: float = DEFAULT_AUTOSAVE_SECONDS,
    offline_queue_path: Optional[str] = None,
    scheduler: Optional[Scheduler] = None,
    http_session: Optional[requests.Session] = None,
) -> Container:
    config = ApiConfig(
        base_url=str(api_config["url"]),
        locale=str(api_config.get("locale", DEFAULT_LOCALE)),
        timeout=float(api_config.get("timeout", DEFAULT_REQUEST_TIMEOUT)),
        cookies=dict(api_config.get("cookies") or {}),
    )
    conn = ApiConnection(config, session=http_session) if http_session else ApiConnection.get_instance(config)

    academics_repo = HttpAcademicsRepository(conn)
    enrollment_repo = HttpEnrollmentRepository(conn)
    attendance_repo = HttpAttendanceRepository(conn)
    attempts_repo = HttpAttemptRepository(conn)

    offline_queue = OfflineQueue(offline_queue_path) if offline_queue_path else None

    attendance_service = AttendanceService(
        attendance_repo,
        enrollment_repo,
        academics_repo,
        autosave_seconds=attendance_autosave_seconds,
        scheduler=scheduler,
        offline_queue=offline_queue,
    )
    assessment_service = AssessmentService(
        attempts_repo,
        autosave_seconds=answers_autosave_seconds,
        scheduler=scheduler,
        locale=config.locale,
    )

    return Container(
        conn=conn,
        academics_repo=academics_repo,
        enrollment_repo=enrollment_repo,
        attendance_repo=attendance_repo,
        attempts_repo=attempts_repo,
        offline_queue=offline_queue,
        attendance_service=attendance_service,
        assessment_service=assessment_service,
        attendance_views=ViewRegistry("attendance"),
        attempt_views=ViewRegistry("attempt"),
    )
