from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date, datetime
from typing import AbstractSet, Callable, Optional, Sequence

from ..classes.repository import ClassRepository
from ..common.datetime_utils import now_local, require_date_range
from ..common.validators import parse_status
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_STATUS_WHEN_OMITTED, MAX_HISTORY_LIMIT
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .events import AttendanceChanged, AttendanceEventBus
from .model import ClassDay, ClassDayRow, MarkEntry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Records one status per (student, date) and projects class days."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        classes: ClassRepository,
        *,
        events: AttendanceEventBus | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._students = students
        self._classes = classes
        self._events = events or AttendanceEventBus()
        self._clock = clock

    def _require_class(self, class_id: int):
        school_class = self._classes.get_by_id(int(class_id))
        if not school_class:
            raise NotFoundError(f"Class {class_id} not found")
        return school_class

    def mark_attendance(
        self,
        *,
        class_id: int,
        attendance_date: date,
        entries: Sequence[MarkEntry],
        marked_by: int,
    ) -> int:
        """Validate the whole batch, then upsert each entry.

        Returns the number of rows written. Nothing is written if any entry
        fails validation.
        """
        now = self._clock()
        if attendance_date > now.date():
            raise ValidationError("Attendance cannot be marked for a future date")

        self._require_class(class_id)

        default_status = AttendanceStatus(DEFAULT_STATUS_WHEN_OMITTED)
        statuses = [parse_status(e.status, default=default_status) for e in entries]

        seen: set[int] = set()
        duplicates: set[int] = set()
        for entry in entries:
            if entry.student_id in seen:
                duplicates.add(entry.student_id)
            seen.add(entry.student_id)
        if duplicates:
            raise ValidationError("Duplicate students in batch", invalid_student_ids=duplicates)

        students = self._students.get_many(seen)
        invalid = [
            e.student_id
            for e in entries
            if e.student_id not in students
            or students[e.student_id].class_id != int(class_id)
            or not students[e.student_id].is_active
        ]
        if invalid:
            logger.info("Rejected batch for class_id=%s date=%s invalid=%s", class_id, attendance_date, invalid)
            raise ValidationError(
                "Students are not active members of this class",
                invalid_student_ids=invalid,
            )

        for entry, status in zip(entries, statuses):
            previous = self._attendance.upsert(
                student_id=entry.student_id,
                class_id=int(class_id),
                attendance_date=attendance_date,
                status=status,
                remarks=entry.remarks,
                marked_by=int(marked_by),
                marked_at=now,
            )
            if previous != status:
                self._events.publish(
                    AttendanceChanged(
                        student_id=entry.student_id,
                        attendance_date=attendance_date,
                        old_status=previous,
                        new_status=status,
                        class_id=int(class_id),
                        remarks=entry.remarks,
                    )
                )

        logger.info(
            "Marked %s students for class_id=%s date=%s by user_id=%s",
            len(entries),
            class_id,
            attendance_date,
            marked_by,
        )
        return len(entries)

    def get_attendance_for_class_and_date(self, class_id: int, attendance_date: date) -> ClassDay:
        self._require_class(class_id)
        students = self._students.list_active_for_class(int(class_id))
        records = {r.student_id: r for r in self._attendance.list_for_class_and_date(int(class_id), attendance_date)}

        rows = []
        for student in students:
            record = records.get(student.student_id)
            if record:
                rows.append(ClassDayRow(student=student, status=record.status, remarks=record.remarks, record_id=record.record_id))
            else:
                rows.append(ClassDayRow(student=student))
        return ClassDay(class_id=int(class_id), attendance_date=attendance_date, rows=rows)

    def delete_record(self, record_id: int) -> None:
        record = self._attendance.get_by_id(int(record_id))
        if not record:
            raise NotFoundError(f"Attendance record {record_id} not found")
        if not self._attendance.delete(record.record_id):
            raise NotFoundError(f"Attendance record {record_id} not found")
        logger.warning(
            "Deleted attendance record_id=%s student_id=%s date=%s",
            record.record_id,
            record.student_id,
            record.attendance_date,
        )

    def get_attendance_history(
        self,
        class_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
        offset: int = 0,
        student_ids: Optional[AbstractSet[int]] = None,
    ) -> dict:
        """Class records grouped by day, newest day first, paginated by day.

        ``student_ids`` narrows the records (not the days) to those students.
        """
        if start_date and end_date:
            require_date_range(start_date, end_date)
        if limit <= 0 or offset < 0:
            raise ValidationError("limit must be positive and offset non-negative")
        limit = min(int(limit), MAX_HISTORY_LIMIT)

        self._require_class(class_id)
        dates = self._attendance.list_marked_dates(
            class_id=int(class_id), start_date=start_date, end_date=end_date, limit=limit, offset=offset
        )
        total = self._attendance.count_marked_dates(class_id=int(class_id), start_date=start_date, end_date=end_date)
        records = self._attendance.list_for_class_on_dates(int(class_id), dates)
        students = self._students.get_many({r.student_id for r in records})

        days: "OrderedDict[date, dict]" = OrderedDict(
            (d, {"date": d.isoformat(), "records": [], "present": 0, "absent": 0, "late": 0, "excused": 0})
            for d in sorted(dates, reverse=True)
        )
        for r in records:
            day = days.get(r.attendance_date)
            if day is None or (student_ids is not None and r.student_id not in student_ids):
                continue
            item = r.to_dict()
            student = students.get(r.student_id)
            item["studentName"] = student.name if student else None
            item["rollNumber"] = student.roll_number if student else None
            day["records"].append(item)
            day[r.status.value.lower()] += 1

        return {
            "classId": int(class_id),
            "history": list(days.values()),
            "pagination": {
                "total": total,
                "limit": limit,
                "offset": offset,
                "hasMore": total > offset + limit,
            },
        }
