from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional

from ..core import constants


@dataclass(frozen=True)
class School:
    school_id: int
    name: str
    address: Optional[str] = None
    is_active: bool = True


@dataclass(frozen=True)
class AttendanceSettings:
    """Per-school attendance thresholds.

    Read-only configuration. Statuses are always chosen by whoever marks
    attendance; nothing here derives LATE automatically.
    """

    school_id: int
    auto_mark_absent_after: time = constants.DEFAULT_AUTO_MARK_ABSENT_AFTER
    late_threshold_minutes: int = constants.DEFAULT_LATE_THRESHOLD_MINUTES
    notification_enabled: bool = True
    daily_summary_time: time = constants.DEFAULT_DAILY_SUMMARY_TIME
    weekly_summary_day: int = constants.DEFAULT_WEEKLY_SUMMARY_DAY

    def to_dict(self) -> dict:
        return {
            "schoolId": self.school_id,
            "autoMarkAbsentAfter": self.auto_mark_absent_after.strftime("%H:%M:%S"),
            "lateThresholdMinutes": self.late_threshold_minutes,
            "notificationEnabled": self.notification_enabled,
            "dailySummaryTime": self.daily_summary_time.strftime("%H:%M:%S"),
            "weeklySummaryDay": self.weekly_summary_day,
        }
