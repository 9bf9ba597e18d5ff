from __future__ import annotations

from collections import Counter
from datetime import date

import pytest

from src.school_admin.school_admin.attendance.service import AttendanceService
from src.school_admin.school_admin.core.enums import MarkStatus
from src.school_admin.school_admin.core.exceptions import FinalizedError, RemoteStoreError, ValidationError


@pytest.fixture
def service(attendance_repo, enrollment_repo, academics_repo, scheduler):
    return AttendanceService(
        attendance_repo,
        enrollment_repo,
        academics_repo,
        autosave_seconds=1.2,
        scheduler=scheduler,
    )


def _open(service):
    return service.open_roster("6A", "MATH", date(2024, 3, 1))


def test_end_to_end_mark_autosave_and_finalize(service, attendance_repo, scheduler):
    wb = _open(service)

    # No session existed: one was created and all 25 students default to PRESENT
    assert len(attendance_repo.created) == 1
    assert wb.summary()["PRESENT"] == 25

    assert wb.set_status("st-7", MarkStatus.ABSENT)
    assert wb.set_status("st-12", "LATE")
    scheduler.advance(2.0)

    assert len(attendance_repo.bulk_calls) == 1
    _, session_id, records = attendance_repo.bulk_calls[0]
    assert session_id == wb.session.session_id
    assert len(records) == 25
    assert Counter(r["status"] for r in records) == {"PRESENT": 23, "ABSENT": 1, "LATE": 1}

    wb.finalize()
    assert attendance_repo.finalized == [wb.session.session_id]

    assert wb.set_status("st-7", MarkStatus.PRESENT) is False
    assert wb.mark("st-7").status == MarkStatus.ABSENT
    assert scheduler.active == []


def test_rapid_edits_coalesce_into_one_write_with_latest_state(service, attendance_repo, scheduler):
    wb = _open(service)

    wb.set_status("st-1", MarkStatus.ABSENT)
    scheduler.advance(0.5)
    wb.set_status("st-1", MarkStatus.EXCUSED)
    scheduler.advance(1.1)
    assert attendance_repo.bulk_calls == []

    scheduler.advance(0.1)
    assert len(attendance_repo.bulk_calls) == 1
    fired_at, _, records = attendance_repo.bulk_calls[0]
    assert fired_at == pytest.approx(1.7)
    assert records[0] == {"enrollmentId": "enr-1", "status": "EXCUSED"}


def test_comment_edit_keeps_status_and_status_edit_keeps_comment(service):
    wb = _open(service)

    wb.set_status("st-3", MarkStatus.LATE)
    wb.set_comment("st-3", "train delayed")
    wb.set_status("st-3", MarkStatus.EXCUSED)

    mark = wb.mark("st-3")
    assert mark.status == MarkStatus.EXCUSED
    assert mark.comment == "train delayed"


def test_payload_sends_minutes_late_only_for_late(service):
    wb = _open(service)
    wb.set_status("st-2", MarkStatus.LATE)
    wb.set_status("st-4", MarkStatus.LATE)
    wb.set_minutes_late("st-4", 15)
    wb.set_comment("st-5", "note")

    records = {r["enrollmentId"]: r for r in wb.buffer.to_payload()}
    assert records["enr-2"] == {"enrollmentId": "enr-2", "status": "LATE", "minutesLate": 0}
    assert records["enr-4"]["minutesLate"] == 15
    assert records["enr-5"] == {"enrollmentId": "enr-5", "status": "PRESENT", "comment": "note"}
    assert "minutesLate" not in records["enr-1"]


def test_invalid_edits_are_rejected(service):
    wb = _open(service)
    with pytest.raises(ValidationError):
        wb.set_status("nobody", MarkStatus.ABSENT)
    with pytest.raises(ValidationError):
        wb.set_status("st-1", "SICK")
    with pytest.raises(ValidationError):
        wb.set_comment("st-1", "x" * 301)
    with pytest.raises(ValidationError):
        wb.set_minutes_late("st-1", 301)


def test_manual_save_skips_the_timer(service, attendance_repo, scheduler):
    wb = _open(service)
    wb.set_status("st-1", MarkStatus.ABSENT)

    assert wb.save() is True
    assert len(attendance_repo.bulk_calls) == 1
    assert wb.persister.pending is False

    scheduler.advance(5)
    assert len(attendance_repo.bulk_calls) == 1


def test_failed_write_keeps_local_edits_and_retry_sends_full_buffer(service, attendance_repo, scheduler):
    errors = []
    wb = service.open_roster("6A", "MATH", date(2024, 3, 1), on_error=errors.append)

    attendance_repo.bulk_error = RemoteStoreError("Session is locked", status=400)
    wb.set_status("st-1", MarkStatus.ABSENT)
    scheduler.advance(1.2)

    assert [str(e) for e in errors] == ["Session is locked"]
    assert str(wb.persister.last_error) == "Session is locked"
    assert wb.mark("st-1").status == MarkStatus.ABSENT

    with pytest.raises(RemoteStoreError):
        wb.save()

    attendance_repo.bulk_error = None
    wb.set_status("st-2", MarkStatus.ABSENT)
    scheduler.advance(1.2)

    _, _, records = attendance_repo.bulk_calls[-1]
    assert len(records) == 25
    assert {r["enrollmentId"] for r in records if r["status"] == "ABSENT"} == {"enr-1", "enr-2"}
    assert wb.persister.last_error is None


def test_persisting_twice_is_the_same_as_once(service, attendance_repo):
    wb = _open(service)
    wb.set_status("st-9", MarkStatus.ABSENT)

    wb.save()
    once = dict(attendance_repo.records)
    wb.save()

    assert attendance_repo.records == once
    assert len(attendance_repo.records) == 25


def test_overlapping_autosave_and_manual_save_last_write_wins(service, attendance_repo, scheduler):
    wb = _open(service)

    wb.set_status("st-1", MarkStatus.ABSENT)
    scheduler.advance(1.2)
    wb.set_status("st-1", MarkStatus.LATE)
    wb.save()

    assert len(attendance_repo.bulk_calls) == 2
    assert attendance_repo.records[(wb.session.session_id, "enr-1")]["status"] == "LATE"


def test_reopening_a_session_shows_saved_marks(service, attendance_repo):
    wb = _open(service)
    wb.set_status("st-7", MarkStatus.ABSENT)
    wb.save()
    wb.close()

    again = _open(service)
    assert again.session.session_id == wb.session.session_id
    assert again.mark("st-7").status == MarkStatus.ABSENT
    assert len(attendance_repo.created) == 1


def test_finalized_session_is_read_only_from_the_start(service, attendance_repo, session_6a):
    from dataclasses import replace

    attendance_repo.sessions.append(replace(session_6a, is_finalized=True))
    wb = _open(service)

    assert wb.is_finalized
    assert wb.set_comment("st-1", "late note") is False
    assert wb.mark("st-1").comment == ""
    with pytest.raises(FinalizedError):
        wb.save()
    with pytest.raises(FinalizedError):
        wb.finalize()
    assert attendance_repo.bulk_calls == []


def test_finalize_pushes_pending_edits_first(service, attendance_repo, scheduler):
    wb = _open(service)
    wb.set_status("st-4", MarkStatus.EXCUSED)

    wb.finalize()

    assert len(attendance_repo.bulk_calls) == 1
    assert attendance_repo.records[(wb.session.session_id, "enr-4")]["status"] == "EXCUSED"
    scheduler.advance(10)
    assert len(attendance_repo.bulk_calls) == 1


def test_failed_finalize_leaves_session_open(service, attendance_repo):
    wb = _open(service)
    wb.set_status("st-1", MarkStatus.ABSENT)
    attendance_repo.bulk_error = RemoteStoreError("down", status=503)

    with pytest.raises(RemoteStoreError):
        wb.finalize()

    assert not wb.is_finalized
    assert attendance_repo.finalized == []
    assert wb.set_status("st-2", MarkStatus.ABSENT) is True


def test_empty_roster_never_writes(attendance_repo, enrollment_repo, academics_repo, scheduler):
    service = AttendanceService(attendance_repo, enrollment_repo, academics_repo, scheduler=scheduler)
    wb = service.open_roster("EMPTY", "MATH", date(2024, 3, 1))

    assert wb.save() is False
    assert attendance_repo.bulk_calls == []


def test_close_abandons_pending_autosave(service, attendance_repo, scheduler):
    wb = _open(service)
    wb.set_status("st-1", MarkStatus.ABSENT)
    wb.close()

    scheduler.advance(5)
    assert attendance_repo.bulk_calls == []


def test_list_sessions_filters_by_range(service, attendance_repo, session_6a):
    from dataclasses import replace

    attendance_repo.sessions += [
        session_6a,
        replace(session_6a, session_id="s-later", session_date=date(2024, 3, 8)),
    ]
    rows = service.list_sessions(section_id="6A", date_from=date(2024, 3, 2))
    assert [s.session_id for s in rows] == ["s-later"]


def test_edits_are_refused_while_finalize_is_in_flight(service, attendance_repo, scheduler):
    wb = _open(service)
    wb.set_status("st-2", MarkStatus.LATE)
    results = []
    attendance_repo.on_finalize = lambda: results.append(wb.set_status("st-2", MarkStatus.ABSENT))

    wb.finalize()

    assert results == [False]
    assert wb.mark("st-2").status == MarkStatus.LATE
    assert attendance_repo.records[(wb.session.session_id, "enr-2")]["status"] == "LATE"


def test_edit_reopens_after_failed_finalize(service, attendance_repo):
    wb = _open(service)

    def reject():
        raise RemoteStoreError("locked", status=423)

    attendance_repo.on_finalize = reject

    with pytest.raises(RemoteStoreError):
        wb.finalize()

    assert wb.set_status("st-2", MarkStatus.ABSENT) is True


def test_multi_field_edit_is_all_or_nothing(service, attendance_repo, scheduler):
    wb = _open(service)

    with pytest.raises(ValidationError):
        wb.update_mark("st-5", status=MarkStatus.ABSENT, comment="x" * 301)

    assert wb.mark("st-5").status == MarkStatus.PRESENT
    assert wb.persister.pending is False
    scheduler.advance(5)
    assert attendance_repo.bulk_calls == []

    assert wb.update_mark("st-5", status="LATE", minutes_late=7, comment="bus") is True
    mark = wb.mark("st-5")
    assert (mark.status, mark.minutes_late, mark.comment) == (MarkStatus.LATE, 7, "bus")
