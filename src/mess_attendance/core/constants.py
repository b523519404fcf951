"""Constants and defaults."""

DEFAULT_SESSION_DAYS = 2
RECENT_STUDENT_RECORDS = 7
RECENT_ADMIN_RECORDS = 10
MIN_PASSWORD_LENGTH = 6

# Report rows are ordered absent -> present -> leave, anything else last.
REPORT_STATUS_ORDER = {"absent": 0, "present": 1, "leave": 2}
REPORT_CSV_HEADERS = ("Name", "Email", "Status")
