from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from ..core.constants import RATE_DECIMALS
from ..core.enums import AttendanceStatus


def attendance_rate(attended: int, marked: int) -> float:
    """Percentage of marked student-days that count as attended.

    0 when nothing was marked; always within [0, 100].
    """
    if marked <= 0:
        return 0.0
    return round(attended / marked * 100, RATE_DECIMALS)


@dataclass
class StatusTally:
    present: int = 0
    absent: int = 0
    late: int = 0
    excused: int = 0

    def add(self, status: AttendanceStatus) -> None:
        if status == AttendanceStatus.PRESENT:
            self.present += 1
        elif status == AttendanceStatus.ABSENT:
            self.absent += 1
        elif status == AttendanceStatus.LATE:
            self.late += 1
        elif status == AttendanceStatus.EXCUSED:
            self.excused += 1

    @property
    def marked(self) -> int:
        return self.present + self.absent + self.late + self.excused

    @property
    def attended(self) -> int:
        return self.present + self.late + self.excused

    @property
    def rate(self) -> float:
        return attendance_rate(self.attended, self.marked)


@dataclass(frozen=True)
class StudentSummary:
    student_id: int
    start_date: date
    end_date: date
    tally: StatusTally
    name: Optional[str] = None
    roll_number: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "studentId": self.student_id,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "totalDays": self.tally.marked,
            "presentDays": self.tally.present,
            "absentDays": self.tally.absent,
            "lateDays": self.tally.late,
            "excusedDays": self.tally.excused,
            "attendancePercentage": self.tally.rate,
        }
        if self.name is not None:
            data["name"] = self.name
            data["rollNumber"] = self.roll_number
        return data


@dataclass(frozen=True)
class DayCounts:
    day: date
    tally: StatusTally
    unmarked: int

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "present": self.tally.present,
            "absent": self.tally.absent,
            "late": self.tally.late,
            "excused": self.tally.excused,
            "unmarked": self.unmarked,
        }


@dataclass(frozen=True)
class ClassSummary:
    class_id: int
    class_name: str
    start_date: date
    end_date: date
    total_students: int
    per_day: List[DayCounts] = field(default_factory=list)
    students: List[StudentSummary] = field(default_factory=list)

    @property
    def attended(self) -> int:
        return sum(d.tally.attended for d in self.per_day)

    @property
    def marked(self) -> int:
        return sum(d.tally.marked for d in self.per_day)

    @property
    def attendance_rate(self) -> float:
        return attendance_rate(self.attended, self.marked)

    def to_dict(self, *, include_students: bool = True) -> dict:
        data = {
            "classId": self.class_id,
            "className": self.class_name,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "totalStudents": self.total_students,
            "perDay": [d.to_dict() for d in self.per_day],
            "overall": {
                "attendanceRate": self.attendance_rate,
                "attendedStudentDays": self.attended,
                "markedStudentDays": self.marked,
            },
        }
        if include_students:
            data["students"] = [s.to_dict() for s in self.students]
        return data


@dataclass(frozen=True)
class SchoolSummary:
    start_date: date
    end_date: date
    class_summaries: List[ClassSummary] = field(default_factory=list)

    @property
    def total_students(self) -> int:
        return sum(c.total_students for c in self.class_summaries)

    @property
    def overall_attendance_rate(self) -> float:
        # weighted by marked student-days, not an average of class rates
        attended = sum(c.attended for c in self.class_summaries)
        marked = sum(c.marked for c in self.class_summaries)
        return attendance_rate(attended, marked)

    def to_dict(self) -> dict:
        return {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "classSummaries": [c.to_dict(include_students=False) for c in self.class_summaries],
            "overallStats": {
                "totalClasses": len(self.class_summaries),
                "totalStudents": self.total_students,
                "overallAttendanceRate": self.overall_attendance_rate,
            },
        }
