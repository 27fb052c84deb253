from __future__ import annotations

from dataclasses import dataclass

from .access.policy import AccessPolicy
from .attendance.events import AttendanceEventBus
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .classes.mysql_class_repository import MySQLClassRepository
from .classes.repository import ClassRepository
from .classes.service import ClassService
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import AbsenceNotifier, NotificationService
from .reports.service import AttendanceReportService
from .schools.mysql_school_repository import MySQLSchoolRepository
from .schools.repository import SchoolRepository
from .schools.service import SchoolService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    schools_repo: SchoolRepository
    classes_repo: ClassRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository
    notifications_repo: NotificationRepository

    events: AttendanceEventBus
    access_policy: AccessPolicy

    auth_service: AuthService
    user_service: UserService
    school_service: SchoolService
    class_service: ClassService
    student_service: StudentService
    attendance_service: AttendanceService
    report_service: AttendanceReportService
    notification_service: NotificationService


def wire_container(
    *,
    users_repo: UserRepository,
    schools_repo: SchoolRepository,
    classes_repo: ClassRepository,
    students_repo: StudentRepository,
    attendance_repo: AttendanceRepository,
    notifications_repo: NotificationRepository,
    **attendance_options,
) -> Container:
    """Build services over any set of repositories (MySQL or in-memory)."""
    events = AttendanceEventBus()
    events.subscribe(AbsenceNotifier(notifications_repo, students_repo, classes_repo, schools_repo))

    return Container(
        users_repo=users_repo,
        schools_repo=schools_repo,
        classes_repo=classes_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        notifications_repo=notifications_repo,
        events=events,
        access_policy=AccessPolicy(),
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        school_service=SchoolService(schools_repo),
        class_service=ClassService(classes_repo, schools_repo, users_repo),
        student_service=StudentService(students_repo, classes_repo, users_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            students_repo,
            classes_repo,
            events=events,
            **attendance_options,
        ),
        report_service=AttendanceReportService(attendance_repo, students_repo, classes_repo),
        notification_service=NotificationService(notifications_repo),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        users_repo=MySQLUserRepository(conn),
        schools_repo=MySQLSchoolRepository(conn),
        classes_repo=MySQLClassRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
    )
