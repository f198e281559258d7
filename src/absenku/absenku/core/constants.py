"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_HISTORY_LIMIT = 30
DEFAULT_LATE_GRACE_MINUTES = 10
DEFAULT_SCHOOL_START = "07:00"
DEFAULT_SCHOOL_END = "14:00"
DEFAULT_REPORT_DAYS = 30
MIN_PASSWORD_LENGTH = 6
WEEK_DAYS = 7

# Status shown for a student without a record on a given day.
BELUM_ABSEN = "belum_absen"

# Browser client dev servers, used when a settings module sets no CORS_ORIGINS.
DEFAULT_CORS_ORIGINS = ("http://localhost:5173", "http://localhost:3000")
