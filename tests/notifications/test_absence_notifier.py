from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from conftest import ALICE, BOB, CLASS_ID, OTHER_PARENT_ID, PARENT_ID, SCHOOL_ID, TEACHER_ID
from school_attendance.attendance.model import MarkEntry
from school_attendance.core.enums import NotificationType
from school_attendance.core.exceptions import NotFoundError, ValidationError
from school_attendance.schools.model import AttendanceSettings

DAY = date(2024, 3, 1)


def _mark(container, entries):
    container.attendance_service.mark_attendance(
        class_id=CLASS_ID,
        attendance_date=DAY,
        entries=[MarkEntry(*e) for e in entries],
        marked_by=TEACHER_ID,
    )


def test_parent_is_notified_when_child_becomes_absent(container, repos):
    _mark(container, [(ALICE, "ABSENT", "no call"), (BOB, "PRESENT")])

    assert len(repos.notifications.items) == 1
    n = repos.notifications.items[0]
    assert (n.parent_id, n.student_id, n.type) == (PARENT_ID, ALICE, NotificationType.ABSENCE)
    assert "Alice" in n.message
    assert "Class 5 (5-A)" in n.message
    assert "Remarks: no call" in n.message


def test_no_repeat_notification_for_unchanged_absence(container, repos):
    _mark(container, [(ALICE, "ABSENT")])
    _mark(container, [(ALICE, "ABSENT")])

    assert len(repos.notifications.items) == 1


def test_change_to_absent_notifies(container, repos):
    _mark(container, [(ALICE, "PRESENT")])
    _mark(container, [(ALICE, "ABSENT")])

    assert len(repos.notifications.items) == 1


def test_disabled_school_setting_suppresses_notifications(container, repos):
    repos.schools.settings[SCHOOL_ID] = replace(AttendanceSettings(school_id=SCHOOL_ID), notification_enabled=False)

    _mark(container, [(ALICE, "ABSENT")])

    assert repos.notifications.items == []


def test_parent_lists_own_notifications(container):
    _mark(container, [(ALICE, "ABSENT"), (BOB, "ABSENT")])

    items = container.notification_service.list_for_parent(PARENT_ID, limit=1)

    assert len(items) == 1
    assert items[0].student_id == BOB


def test_mark_read_is_scoped_to_the_parent(container, repos):
    _mark(container, [(ALICE, "ABSENT")])
    notification_id = repos.notifications.items[0].notification_id

    with pytest.raises(NotFoundError):
        container.notification_service.mark_read(OTHER_PARENT_ID, notification_id)
    assert repos.notifications.items[0].is_read is False

    container.notification_service.mark_read(PARENT_ID, notification_id)
    assert repos.notifications.items[0].is_read is True


def test_mark_all_read_counts_only_unread(container, repos):
    _mark(container, [(ALICE, "ABSENT"), (BOB, "ABSENT")])

    assert container.notification_service.mark_all_read(PARENT_ID) == 2
    assert container.notification_service.mark_all_read(PARENT_ID) == 0
    assert container.notification_service.mark_all_read(OTHER_PARENT_ID) == 0


@pytest.mark.parametrize("limit", [0, -1, "abc"])
def test_list_rejects_bad_limit(container, limit):
    with pytest.raises(ValidationError):
        container.notification_service.list_for_parent(PARENT_ID, limit=limit)
