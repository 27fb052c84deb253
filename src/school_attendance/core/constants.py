"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_STATUS_WHEN_OMITTED = "ABSENT"
DEFAULT_HISTORY_LIMIT = 30
MAX_HISTORY_LIMIT = 365
DEFAULT_REPORT_DAYS = 7
RATE_DECIMALS = 1

DEFAULT_CLASS_SECTION = "A"
DEFAULT_CLASS_CAPACITY = 30

DEFAULT_AUTO_MARK_ABSENT_AFTER = time(10, 0)
DEFAULT_LATE_THRESHOLD_MINUTES = 15
DEFAULT_DAILY_SUMMARY_TIME = time(18, 0)
DEFAULT_WEEKLY_SUMMARY_DAY = 5
