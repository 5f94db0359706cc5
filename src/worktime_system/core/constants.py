"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_STANDUP_START = time(11, 30)
DEFAULT_STANDUP_END = time(12, 30)
DEFAULT_STANDUP_LABEL = "Daily team standup"
DEFAULT_STANDUP_CATEGORY = "Meeting"
DEFAULT_ENTRY_CATEGORY = "general"

DEFAULT_REFERENCE_TIMEZONE = "UTC"
DEFAULT_BATCH_WRITE_INTERVAL_SECONDS = 0.1

# Cap for recurrence rules without end date or count.
DEFAULT_MAX_OCCURRENCES = 100

WORKING_HOURS_PER_DAY = 8
DEFAULT_PLANNING_FACTOR = 1.4
PRIORITY_BUFFER_DAYS = {
    "urgent": 0.0,
    "high": 0.5,
    "medium": 1.0,
    "low": 2.0,
}

DAYS_PER_WEEK = 7
