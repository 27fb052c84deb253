from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..students.model import Student


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's status on one calendar day.

    ``class_id`` is the class the student was in when marked, not a live
    lookup, so reports stay correct after a transfer.
    """

    record_id: int
    student_id: int
    class_id: int
    attendance_date: date
    status: AttendanceStatus
    marked_by: int
    marked_at: datetime
    remarks: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "studentId": self.student_id,
            "classId": self.class_id,
            "date": self.attendance_date.isoformat(),
            "status": self.status.value,
            "markedBy": self.marked_by,
            "markedAt": self.marked_at.isoformat(timespec="seconds"),
            "remarks": self.remarks,
        }


@dataclass(frozen=True)
class MarkEntry:
    """One line of a mark-attendance batch, before status validation."""

    student_id: int
    status: Optional[str] = None
    remarks: Optional[str] = None

    @classmethod
    def from_payload(cls, payload) -> "MarkEntry":
        if not isinstance(payload, dict):
            raise ValidationError("Each entry must be an object")
        try:
            student_id = int(payload.get("studentId"))
        except (TypeError, ValueError):
            raise ValidationError("Each entry needs an integer studentId")
        remarks = payload.get("remarks")
        if remarks is not None and not isinstance(remarks, str):
            raise ValidationError("remarks must be a string")
        remarks = (remarks or "").strip() or None
        return cls(student_id=student_id, status=payload.get("status"), remarks=remarks)


@dataclass(frozen=True)
class ClassDayRow:
    student: Student
    status: Optional[AttendanceStatus] = None
    remarks: Optional[str] = None
    record_id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "student": self.student.to_dict(),
            "status": self.status.value if self.status else None,
            "remarks": self.remarks,
            "recordId": self.record_id,
        }


@dataclass(frozen=True)
class ClassDay:
    """Every active student of a class for one date, marked or not."""

    class_id: int
    attendance_date: date
    rows: List[ClassDayRow] = field(default_factory=list)

    def count(self, status: AttendanceStatus) -> int:
        return sum(1 for r in self.rows if r.status == status)

    @property
    def unmarked(self) -> int:
        return sum(1 for r in self.rows if r.status is None)

    def to_dict(self) -> dict:
        return {
            "classId": self.class_id,
            "date": self.attendance_date.isoformat(),
            "students": [r.to_dict() for r in self.rows],
            "totalStudents": len(self.rows),
            "presentCount": self.count(AttendanceStatus.PRESENT),
            "absentCount": self.count(AttendanceStatus.ABSENT),
            "lateCount": self.count(AttendanceStatus.LATE),
            "excusedCount": self.count(AttendanceStatus.EXCUSED),
            "unmarkedCount": self.unmarked,
        }
