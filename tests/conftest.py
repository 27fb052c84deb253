from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

import pytest
from werkzeug.security import generate_password_hash

from school_attendance.attendance.model import AttendanceRecord
from school_attendance.classes.model import SchoolClass
from school_attendance.container import wire_container
from school_attendance.core.enums import AttendanceStatus, NotificationType, Role
from school_attendance.notifications.model import ParentNotification
from school_attendance.schools.model import AttendanceSettings, School
from school_attendance.students.model import Student
from school_attendance.users.model import User

FIXED_NOW = datetime(2024, 3, 15, 9, 0)
PASSWORD = "secret1"


@dataclass
class InMemoryUsers:
    users_by_id: Dict[int, User] = field(default_factory=dict)

    def add(self, user: User) -> User:
        self.users_by_id[user.user_id] = user
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.users_by_id.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users_by_id.values() if u.username == username), None)

    def create_user(self, *, full_name: str, username: str, password_hash: str, role: Role) -> int:
        user_id = max(self.users_by_id, default=0) + 1
        self.add(User(user_id, full_name, username, password_hash, role))
        return user_id


@dataclass
class InMemorySchools:
    schools: Dict[int, School] = field(default_factory=dict)
    settings: Dict[int, AttendanceSettings] = field(default_factory=dict)

    def get_by_id(self, school_id: int) -> Optional[School]:
        return self.schools.get(school_id)

    def get_settings(self, school_id: int) -> Optional[AttendanceSettings]:
        return self.settings.get(school_id)


@dataclass
class InMemoryClasses:
    classes: Dict[int, SchoolClass] = field(default_factory=dict)

    def add(self, school_class: SchoolClass) -> SchoolClass:
        self.classes[school_class.class_id] = school_class
        return school_class

    def get_by_id(self, class_id: int) -> Optional[SchoolClass]:
        return self.classes.get(class_id)

    def list_active(self):
        return sorted((c for c in self.classes.values() if c.is_active), key=lambda c: c.class_id)

    def create(self, *, name, grade, section, capacity, teacher_id, school_id) -> int:
        class_id = max(self.classes, default=0) + 1
        self.add(SchoolClass(class_id, name, grade, section, capacity, teacher_id, school_id))
        return class_id


@dataclass
class InMemoryStudents:
    students: Dict[int, Student] = field(default_factory=dict)

    def add(self, student: Student) -> Student:
        self.students[student.student_id] = student
        return student

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self.students.get(student_id)

    def get_by_roll_number(self, roll_number: str) -> Optional[Student]:
        return next((s for s in self.students.values() if s.roll_number == roll_number), None)

    def get_many(self, student_ids: Iterable[int]) -> Dict[int, Student]:
        return {i: self.students[i] for i in student_ids if i in self.students}

    def list_active_for_class(self, class_id: int):
        items = [s for s in self.students.values() if s.class_id == class_id and s.is_active]
        return sorted(items, key=lambda s: s.roll_number)

    def count_active_by_class(self) -> Dict[int, int]:
        counts: Dict[int, int] = {}
        for s in self.students.values():
            if s.is_active:
                counts[s.class_id] = counts.get(s.class_id, 0) + 1
        return counts

    def list_ids_for_parent(self, parent_id: int):
        return [s.student_id for s in self.students.values() if s.parent_id == parent_id]

    def create(self, *, name: str, roll_number: str, class_id: int, parent_id: int) -> int:
        student_id = max(self.students, default=0) + 1
        self.add(Student(student_id, name, roll_number, class_id, parent_id))
        return student_id

    def set_active(self, student_id: int, *, is_active: bool) -> bool:
        self.students[student_id] = replace(self.students[student_id], is_active=is_active)
        return True

    def set_class(self, student_id: int, *, class_id: int) -> bool:
        self.students[student_id] = replace(self.students[student_id], class_id=class_id)
        return True


class InMemoryAttendance:
    def __init__(self):
        self._by_key: Dict[Tuple[int, date], AttendanceRecord] = {}
        self._id = 0
        self.writes = 0

    @property
    def records(self) -> List[AttendanceRecord]:
        return list(self._by_key.values())

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        return next((r for r in self._by_key.values() if r.record_id == record_id), None)

    def upsert(self, *, student_id, class_id, attendance_date, status, remarks, marked_by, marked_at):
        key = (student_id, attendance_date)
        existing = self._by_key.get(key)
        if existing:
            record_id, previous = existing.record_id, existing.status
        else:
            self._id += 1
            record_id, previous = self._id, None

        self._by_key[key] = AttendanceRecord(
            record_id=record_id,
            student_id=student_id,
            class_id=class_id,
            attendance_date=attendance_date,
            status=status,
            marked_by=marked_by,
            marked_at=marked_at,
            remarks=remarks,
        )
        self.writes += 1
        return previous

    def delete(self, record_id: int) -> bool:
        for key, r in list(self._by_key.items()):
            if r.record_id == record_id:
                del self._by_key[key]
                return True
        return False

    def list_for_class_and_date(self, class_id: int, attendance_date: date):
        return [r for r in self._by_key.values() if r.class_id == class_id and r.attendance_date == attendance_date]

    def list_in_range(self, *, start_date, end_date, class_id=None, student_id=None):
        items = [
            r
            for r in self._by_key.values()
            if start_date <= r.attendance_date <= end_date
            and (class_id is None or r.class_id == class_id)
            and (student_id is None or r.student_id == student_id)
        ]
        return sorted(items, key=lambda r: (r.attendance_date, r.student_id))

    def _dates(self, class_id, start_date, end_date):
        days = {
            r.attendance_date
            for r in self._by_key.values()
            if r.class_id == class_id
            and (start_date is None or r.attendance_date >= start_date)
            and (end_date is None or r.attendance_date <= end_date)
        }
        return sorted(days, reverse=True)

    def list_marked_dates(self, *, class_id, start_date, end_date, limit, offset):
        return self._dates(class_id, start_date, end_date)[offset : offset + limit]

    def count_marked_dates(self, *, class_id, start_date, end_date) -> int:
        return len(self._dates(class_id, start_date, end_date))

    def list_for_class_on_dates(self, class_id: int, dates: Iterable[date]):
        days = set(dates)
        return [r for r in self._by_key.values() if r.class_id == class_id and r.attendance_date in days]


class InMemoryNotifications:
    def __init__(self):
        self.items: List[ParentNotification] = []

    def create(self, *, parent_id, student_id, type: NotificationType, title, message) -> int:
        notification_id = len(self.items) + 1
        self.items.append(
            ParentNotification(notification_id, parent_id, student_id, type, title, message, False, FIXED_NOW)
        )
        return notification_id

    def list_for_parent(self, parent_id: int, *, limit: int):
        items = [n for n in self.items if n.parent_id == parent_id]
        return list(reversed(items))[:limit]

    def get_by_id(self, notification_id: int) -> Optional[ParentNotification]:
        return next((n for n in self.items if n.notification_id == notification_id), None)

    def mark_read(self, notification_id: int) -> bool:
        for i, n in enumerate(self.items):
            if n.notification_id == notification_id and not n.is_read:
                self.items[i] = replace(n, is_read=True)
                return True
        return False

    def mark_all_read(self, parent_id: int) -> int:
        unread = [n.notification_id for n in self.items if n.parent_id == parent_id and not n.is_read]
        for notification_id in unread:
            self.mark_read(notification_id)
        return len(unread)


@dataclass
class Repos:
    users: InMemoryUsers
    schools: InMemorySchools
    classes: InMemoryClasses
    students: InMemoryStudents
    attendance: InMemoryAttendance
    notifications: InMemoryNotifications


# ids used across the test suite
ADMIN_ID, TEACHER_ID, PARENT_ID, OTHER_PARENT_ID = 1, 2, 3, 4
SCHOOL_ID = 1
CLASS_ID, OTHER_CLASS_ID = 10, 20
ALICE, BOB, CARA, DAN = 101, 102, 103, 201


@pytest.fixture
def repos() -> Repos:
    pw = generate_password_hash(PASSWORD)
    users = InMemoryUsers()
    users.add(User(ADMIN_ID, "Admin", "admin", pw, Role.ADMIN))
    users.add(User(TEACHER_ID, "Tess Teacher", "teacher", pw, Role.TEACHER))
    users.add(User(PARENT_ID, "Pat Parent", "parent", pw, Role.PARENT))
    users.add(User(OTHER_PARENT_ID, "Quinn Parent", "parent2", pw, Role.PARENT))

    schools = InMemorySchools(schools={SCHOOL_ID: School(SCHOOL_ID, "Main School")})

    classes = InMemoryClasses()
    classes.add(SchoolClass(CLASS_ID, "Class 5", "5", "A", 30, TEACHER_ID, SCHOOL_ID))
    classes.add(SchoolClass(OTHER_CLASS_ID, "Class 6", "6", "B", 30, None, SCHOOL_ID))

    students = InMemoryStudents()
    students.add(Student(ALICE, "Alice", "R001", CLASS_ID, PARENT_ID))
    students.add(Student(BOB, "Bob", "R002", CLASS_ID, PARENT_ID))
    students.add(Student(CARA, "Cara", "R003", CLASS_ID, OTHER_PARENT_ID))
    students.add(Student(DAN, "Dan", "R101", OTHER_CLASS_ID, OTHER_PARENT_ID))

    return Repos(users, schools, classes, students, InMemoryAttendance(), InMemoryNotifications())


@pytest.fixture
def container(repos: Repos):
    return wire_container(
        users_repo=repos.users,
        schools_repo=repos.schools,
        classes_repo=repos.classes,
        students_repo=repos.students,
        attendance_repo=repos.attendance,
        notifications_repo=repos.notifications,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def app(container):
    from school_attendance.main import create_app

    return create_app(container, settings_module="school_attendance.settings.testing")


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, username: str, password: str = PASSWORD):
    resp = client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.get_json()
    return resp
