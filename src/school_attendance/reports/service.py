from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, List, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..classes.model import SchoolClass
from ..classes.repository import ClassRepository
from ..common.datetime_utils import iter_days, require_date_range
from ..core.exceptions import NotFoundError
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import ClassSummary, DayCounts, SchoolSummary, StatusTally, StudentSummary


def _build_class_summary(
    school_class: SchoolClass,
    *,
    total_students: int,
    records: Sequence[AttendanceRecord],
    start: date,
    end: date,
    roster: Optional[Sequence[Student]] = None,
) -> ClassSummary:
    """Fold one class's records into per-day counts.

    Only records whose stored class id is this class are counted.
    """
    by_day: Dict[date, StatusTally] = defaultdict(StatusTally)
    by_student: Dict[int, StatusTally] = defaultdict(StatusTally)
    for r in records:
        if r.class_id != school_class.class_id:
            continue
        by_day[r.attendance_date].add(r.status)
        by_student[r.student_id].add(r.status)

    per_day = []
    for day in iter_days(start, end):
        tally = by_day.get(day) or StatusTally()
        per_day.append(DayCounts(day=day, tally=tally, unmarked=max(total_students - tally.marked, 0)))

    students = [
        StudentSummary(
            student_id=s.student_id,
            start_date=start,
            end_date=end,
            tally=by_student.get(s.student_id) or StatusTally(),
            name=s.name,
            roll_number=s.roll_number,
        )
        for s in (roster or [])
    ]

    return ClassSummary(
        class_id=school_class.class_id,
        class_name=school_class.display_name,
        start_date=start,
        end_date=end,
        total_students=total_students,
        per_day=per_day,
        students=students,
    )


class AttendanceReportService:
    """Read-only aggregation of stored attendance over a date range."""

    def __init__(self, attendance: AttendanceRepository, students: StudentRepository, classes: ClassRepository):
        self._attendance = attendance
        self._students = students
        self._classes = classes

    def summarize_for_student(self, student_id: int, start: date, end: date) -> StudentSummary:
        require_date_range(start, end)
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError(f"Student {student_id} not found")

        tally = StatusTally()
        for r in self._attendance.list_in_range(start_date=start, end_date=end, student_id=student.student_id):
            tally.add(r.status)

        return StudentSummary(
            student_id=student.student_id,
            start_date=start,
            end_date=end,
            tally=tally,
            name=student.name,
            roll_number=student.roll_number,
        )

    def summarize_for_class(self, class_id: int, start: date, end: date) -> ClassSummary:
        require_date_range(start, end)
        school_class = self._classes.get_by_id(int(class_id))
        if not school_class:
            raise NotFoundError(f"Class {class_id} not found")

        roster = self._students.list_active_for_class(school_class.class_id)
        records = self._attendance.list_in_range(start_date=start, end_date=end, class_id=school_class.class_id)
        return _build_class_summary(
            school_class,
            total_students=len(roster),
            records=records,
            start=start,
            end=end,
            roster=roster,
        )

    def summarize_for_school(self, start: date, end: date) -> SchoolSummary:
        require_date_range(start, end)
        classes = self._classes.list_active()
        counts = self._students.count_active_by_class()

        records_by_class: Dict[int, List[AttendanceRecord]] = defaultdict(list)
        for r in self._attendance.list_in_range(start_date=start, end_date=end):
            records_by_class[r.class_id].append(r)

        summaries = [
            _build_class_summary(
                c,
                total_students=counts.get(c.class_id, 0),
                records=records_by_class.get(c.class_id, []),
                start=start,
                end=end,
            )
            for c in classes
        ]
        return SchoolSummary(start_date=start, end_date=end, class_summaries=summaries)
