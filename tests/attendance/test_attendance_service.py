from __future__ import annotations

from datetime import date

import pytest

from conftest import ALICE, BOB, CARA, CLASS_ID, DAN, OTHER_CLASS_ID, TEACHER_ID
from school_attendance.attendance.model import MarkEntry
from school_attendance.core.enums import AttendanceStatus
from school_attendance.core.exceptions import NotFoundError, ValidationError

DAY = date(2024, 3, 1)


def _mark(container, entries, *, class_id=CLASS_ID, day=DAY):
    return container.attendance_service.mark_attendance(
        class_id=class_id,
        attendance_date=day,
        entries=[MarkEntry(*e) for e in entries],
        marked_by=TEACHER_ID,
    )


def test_class_day_lists_every_active_student_unmarked(container):
    day = container.attendance_service.get_attendance_for_class_and_date(CLASS_ID, DAY)

    assert [r.student.student_id for r in day.rows] == [ALICE, BOB, CARA]
    assert all(r.status is None for r in day.rows)
    assert day.unmarked == 3


def test_mark_then_query_returns_marked_statuses(container):
    updated = _mark(container, [(ALICE, "PRESENT"), (BOB, "ABSENT"), (CARA, "LATE", "bus delay")])
    assert updated == 3

    day = container.attendance_service.get_attendance_for_class_and_date(CLASS_ID, DAY)
    statuses = {r.student.student_id: r.status for r in day.rows}
    assert statuses == {ALICE: AttendanceStatus.PRESENT, BOB: AttendanceStatus.ABSENT, CARA: AttendanceStatus.LATE}
    assert day.rows[2].remarks == "bus delay"
    assert day.unmarked == 0

    data = day.to_dict()
    assert (data["presentCount"], data["absentCount"], data["lateCount"], data["unmarkedCount"]) == (1, 1, 1, 0)


def test_projection_ignores_inactive_students(container, repos):
    repos.students.set_active(BOB, is_active=False)

    day = container.attendance_service.get_attendance_for_class_and_date(CLASS_ID, DAY)

    assert [r.student.student_id for r in day.rows] == [ALICE, CARA]


def test_remarking_overwrites_single_record(container, repos):
    _mark(container, [(ALICE, "PRESENT")])
    _mark(container, [(ALICE, "ABSENT", "sick")])

    records = [r for r in repos.attendance.records if r.student_id == ALICE]
    assert len(records) == 1
    assert records[0].status == AttendanceStatus.ABSENT
    assert records[0].remarks == "sick"


def test_omitted_status_defaults_to_absent(container, repos):
    _mark(container, [(ALICE,)])

    assert repos.attendance.records[0].status == AttendanceStatus.ABSENT


def test_unknown_status_is_rejected_before_any_write(container, repos):
    with pytest.raises(ValidationError):
        _mark(container, [(ALICE, "PRESENT"), (BOB, "SLEEPING")])

    assert repos.attendance.writes == 0


def test_lowercase_status_is_not_accepted(container):
    with pytest.raises(ValidationError):
        _mark(container, [(ALICE, "present")])


def test_batch_with_foreign_student_is_rejected_whole(container, repos):
    with pytest.raises(ValidationError) as exc:
        _mark(container, [(ALICE, "PRESENT"), (DAN, "PRESENT"), (999, "PRESENT")])

    assert exc.value.invalid_student_ids == [DAN, 999]
    assert repos.attendance.writes == 0


def test_batch_with_inactive_student_is_rejected(container, repos):
    repos.students.set_active(BOB, is_active=False)

    with pytest.raises(ValidationError) as exc:
        _mark(container, [(ALICE, "PRESENT"), (BOB, "PRESENT")])

    assert exc.value.invalid_student_ids == [BOB]


def test_duplicate_student_in_batch_is_rejected(container, repos):
    with pytest.raises(ValidationError) as exc:
        _mark(container, [(ALICE, "PRESENT"), (ALICE, "ABSENT")])

    assert exc.value.invalid_student_ids == [ALICE]
    assert repos.attendance.writes == 0


def test_future_date_is_rejected(container):
    with pytest.raises(ValidationError):
        _mark(container, [(ALICE, "PRESENT")], day=date(2024, 3, 16))


def test_today_is_accepted(container):
    assert _mark(container, [(ALICE, "PRESENT")], day=date(2024, 3, 15)) == 1


def test_unknown_class(container):
    with pytest.raises(NotFoundError):
        _mark(container, [(ALICE, "PRESENT")], class_id=999)
    with pytest.raises(NotFoundError):
        container.attendance_service.get_attendance_for_class_and_date(999, DAY)


def test_empty_batch_writes_nothing(container, repos):
    assert _mark(container, []) == 0
    assert repos.attendance.writes == 0


def test_change_events_fire_only_on_actual_change(container):
    events = []
    container.events.subscribe(events.append)

    _mark(container, [(ALICE, "PRESENT")])
    _mark(container, [(ALICE, "PRESENT")])
    _mark(container, [(ALICE, "ABSENT")])

    assert [(e.student_id, e.attendance_date, e.old_status, e.new_status) for e in events] == [
        (ALICE, DAY, None, AttendanceStatus.PRESENT),
        (ALICE, DAY, AttendanceStatus.PRESENT, AttendanceStatus.ABSENT),
    ]


def test_failing_listener_does_not_fail_the_batch(container, repos):
    def boom(event):
        raise RuntimeError("listener down")

    container.events.subscribe(boom)

    assert _mark(container, [(ALICE, "PRESENT"), (BOB, "LATE")]) == 2
    assert len(repos.attendance.records) == 2


def test_record_keeps_class_it_was_marked_in(container, repos):
    _mark(container, [(ALICE, "PRESENT")])
    repos.students.set_class(ALICE, class_id=OTHER_CLASS_ID)

    assert repos.attendance.records[0].class_id == CLASS_ID
    old_day = container.attendance_service.get_attendance_for_class_and_date(CLASS_ID, DAY)
    new_day = container.attendance_service.get_attendance_for_class_and_date(OTHER_CLASS_ID, DAY)

    assert ALICE not in [r.student.student_id for r in old_day.rows]
    alice_row = next(r for r in new_day.rows if r.student.student_id == ALICE)
    assert alice_row.status is None


def test_delete_record(container, repos):
    _mark(container, [(ALICE, "PRESENT")])
    record_id = repos.attendance.records[0].record_id

    container.attendance_service.delete_record(record_id)

    assert repos.attendance.records == []
    with pytest.raises(NotFoundError):
        container.attendance_service.delete_record(record_id)


def test_history_groups_by_day_newest_first(container):
    _mark(container, [(ALICE, "PRESENT"), (BOB, "ABSENT")], day=date(2024, 3, 1))
    _mark(container, [(ALICE, "LATE")], day=date(2024, 3, 4))
    _mark(container, [(CARA, "EXCUSED")], day=date(2024, 3, 5))

    result = container.attendance_service.get_attendance_history(CLASS_ID, limit=2)

    assert [d["date"] for d in result["history"]] == ["2024-03-05", "2024-03-04"]
    assert result["history"][0]["excused"] == 1
    assert result["history"][1]["records"][0]["studentName"] == "Alice"
    assert result["pagination"] == {"total": 3, "limit": 2, "offset": 0, "hasMore": True}

    page2 = container.attendance_service.get_attendance_history(CLASS_ID, limit=2, offset=2)
    assert [d["date"] for d in page2["history"]] == ["2024-03-01"]
    assert (page2["history"][0]["present"], page2["history"][0]["absent"]) == (1, 1)
    assert page2["pagination"]["hasMore"] is False


def test_history_can_be_narrowed_to_students(container):
    _mark(container, [(ALICE, "PRESENT"), (CARA, "ABSENT")])

    result = container.attendance_service.get_attendance_history(CLASS_ID, student_ids=frozenset({ALICE}))

    records = result["history"][0]["records"]
    assert [r["studentId"] for r in records] == [ALICE]
    assert result["history"][0]["absent"] == 0


def test_history_rejects_inverted_range(container):
    with pytest.raises(ValidationError):
        container.attendance_service.get_attendance_history(
            CLASS_ID, start_date=date(2024, 3, 5), end_date=date(2024, 3, 1)
        )
