"""Ordered schema migrations.

Each migration is a tagged value (CreateTable, AddConstraint, CreateIndex,
SeedData). The runner in ``bootstrap`` applies them in list order and records
the applied names in ``schema_migrations``. Every variant lists the MySQL error
numbers that mean "this object already exists"; those count as success.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, FrozenSet, Sequence, Tuple

from mysql.connector import errorcode


@dataclass(frozen=True)
class Migration:
    name: str
    sql: str

    already_exists: ClassVar[FrozenSet[int]] = frozenset()

    def statements(self) -> Sequence[Tuple[str, tuple]]:
        return [(self.sql, ())]

    def is_already_applied_error(self, errno: int | None) -> bool:
        return errno is not None and errno in self.already_exists


@dataclass(frozen=True)
class CreateTable(Migration):
    already_exists: ClassVar[FrozenSet[int]] = frozenset({errorcode.ER_TABLE_EXISTS_ERROR})


@dataclass(frozen=True)
class AddConstraint(Migration):
    already_exists: ClassVar[FrozenSet[int]] = frozenset(
        {errorcode.ER_DUP_KEYNAME, errorcode.ER_FK_DUP_NAME, errorcode.ER_DUP_KEY}
    )


@dataclass(frozen=True)
class CreateIndex(Migration):
    already_exists: ClassVar[FrozenSet[int]] = frozenset({errorcode.ER_DUP_KEYNAME})


@dataclass(frozen=True)
class SeedData(Migration):
    """Parameterised INSERT applied once per row."""

    rows: Tuple[tuple, ...] = ()

    already_exists: ClassVar[FrozenSet[int]] = frozenset({errorcode.ER_DUP_ENTRY})

    def statements(self) -> Sequence[Tuple[str, tuple]]:
        return [(self.sql, row) for row in self.rows]


MIGRATIONS: Tuple[Migration, ...] = (
    CreateTable(
        "0001_create_users",
        """
        CREATE TABLE users (
            user_id INT AUTO_INCREMENT PRIMARY KEY,
            full_name VARCHAR(120) NOT NULL,
            username VARCHAR(60) NOT NULL UNIQUE,
            password_hash VARCHAR(255) NOT NULL,
            role ENUM('ADMIN','TEACHER','PARENT') NOT NULL,
            is_active TINYINT(1) NOT NULL DEFAULT 1,
            created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
        """,
    ),
    CreateTable(
        "0002_create_schools",
        """
        CREATE TABLE schools (
            school_id INT AUTO_INCREMENT PRIMARY KEY,
            name VARCHAR(120) NOT NULL,
            address VARCHAR(255) NULL,
            is_active TINYINT(1) NOT NULL DEFAULT 1,
            created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
        """,
    ),
    CreateTable(
        "0003_create_attendance_settings",
        """
        CREATE TABLE attendance_settings (
            settings_id INT AUTO_INCREMENT PRIMARY KEY,
            school_id INT NOT NULL UNIQUE,
            auto_mark_absent_after TIME NOT NULL DEFAULT '10:00:00',
            late_threshold_minutes INT NOT NULL DEFAULT 15,
            notification_enabled TINYINT(1) NOT NULL DEFAULT 1,
            daily_summary_time TIME NOT NULL DEFAULT '18:00:00',
            weekly_summary_day INT NOT NULL DEFAULT 5
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
        """,
    ),
    CreateTable(
        "0004_create_classes",
        """
        CREATE TABLE classes (
            class_id INT AUTO_INCREMENT PRIMARY KEY,
            name VARCHAR(80) NOT NULL,
            grade VARCHAR(20) NOT NULL,
            section VARCHAR(10) NOT NULL DEFAULT 'A',
            capacity INT NOT NULL DEFAULT 30,
            teacher_id INT NULL,
            school_id INT NOT NULL,
            is_active TINYINT(1) NOT NULL DEFAULT 1
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
        """,
    ),
    CreateTable(
        "0005_create_students",
        """
        CREATE TABLE students (
            student_id INT AUTO_INCREMENT PRIMARY KEY,
            name VARCHAR(120) NOT NULL,
            roll_number VARCHAR(40) NOT NULL UNIQUE,
            class_id INT NOT NULL,
            parent_id INT NOT NULL,
            is_active TINYINT(1) NOT NULL DEFAULT 1,
            created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
        """,
    ),
    CreateTable(
        "0006_create_attendance_records",
        """
        CREATE TABLE attendance_records (
            record_id INT AUTO_INCREMENT PRIMARY KEY,
            student_id INT NOT NULL,
            class_id INT NOT NULL,
            attendance_date DATE NOT NULL,
            status ENUM('PRESENT','ABSENT','LATE','EXCUSED') NOT NULL DEFAULT 'ABSENT',
            marked_by INT NOT NULL,
            remarks VARCHAR(255) NULL,
            marked_at DATETIME NOT NULL,
            created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
        """,
    ),
    CreateTable(
        "0007_create_parent_notifications",
        """
        CREATE TABLE parent_notifications (
            notification_id INT AUTO_INCREMENT PRIMARY KEY,
            parent_id INT NOT NULL,
            student_id INT NULL,
            type VARCHAR(20) NOT NULL,
            title VARCHAR(200) NOT NULL,
            message TEXT NOT NULL,
            is_read TINYINT(1) NOT NULL DEFAULT 0,
            created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
        ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
        """,
    ),
    AddConstraint(
        "0008_uq_attendance_student_date",
        "ALTER TABLE attendance_records ADD CONSTRAINT uq_attendance_student_date UNIQUE (student_id, attendance_date)",
    ),
    AddConstraint(
        "0009_fk_attendance_student",
        """
        ALTER TABLE attendance_records ADD CONSTRAINT fk_attendance_student
        FOREIGN KEY (student_id) REFERENCES students(student_id) ON DELETE CASCADE
        """,
    ),
    AddConstraint(
        "0010_fk_attendance_class",
        """
        ALTER TABLE attendance_records ADD CONSTRAINT fk_attendance_class
        FOREIGN KEY (class_id) REFERENCES classes(class_id)
        """,
    ),
    AddConstraint(
        "0011_fk_attendance_marker",
        """
        ALTER TABLE attendance_records ADD CONSTRAINT fk_attendance_marker
        FOREIGN KEY (marked_by) REFERENCES users(user_id)
        """,
    ),
    AddConstraint(
        "0012_fk_students_class",
        "ALTER TABLE students ADD CONSTRAINT fk_students_class FOREIGN KEY (class_id) REFERENCES classes(class_id)",
    ),
    AddConstraint(
        "0013_fk_students_parent",
        "ALTER TABLE students ADD CONSTRAINT fk_students_parent FOREIGN KEY (parent_id) REFERENCES users(user_id)",
    ),
    AddConstraint(
        "0014_fk_classes_school",
        "ALTER TABLE classes ADD CONSTRAINT fk_classes_school FOREIGN KEY (school_id) REFERENCES schools(school_id)",
    ),
    AddConstraint(
        "0015_fk_classes_teacher",
        """
        ALTER TABLE classes ADD CONSTRAINT fk_classes_teacher
        FOREIGN KEY (teacher_id) REFERENCES users(user_id) ON DELETE SET NULL
        """,
    ),
    AddConstraint(
        "0016_fk_settings_school",
        """
        ALTER TABLE attendance_settings ADD CONSTRAINT fk_settings_school
        FOREIGN KEY (school_id) REFERENCES schools(school_id) ON DELETE CASCADE
        """,
    ),
    AddConstraint(
        "0017_fk_notifications_parent",
        """
        ALTER TABLE parent_notifications ADD CONSTRAINT fk_notifications_parent
        FOREIGN KEY (parent_id) REFERENCES users(user_id) ON DELETE CASCADE
        """,
    ),
    CreateIndex(
        "0018_idx_attendance_class_date",
        "CREATE INDEX idx_attendance_class_date ON attendance_records (class_id, attendance_date)",
    ),
    CreateIndex(
        "0019_idx_students_class",
        "CREATE INDEX idx_students_class ON students (class_id, is_active)",
    ),
    CreateIndex(
        "0020_idx_notifications_parent",
        "CREATE INDEX idx_notifications_parent ON parent_notifications (parent_id, created_at)",
    ),
    SeedData(
        "0021_seed_default_school",
        "INSERT INTO schools (school_id, name, address) VALUES (%s, %s, %s)",
        rows=((1, "Main School", None),),
    ),
    SeedData(
        "0022_seed_default_attendance_settings",
        "INSERT INTO attendance_settings (school_id) VALUES (%s)",
        rows=((1,),),
    ),
)
