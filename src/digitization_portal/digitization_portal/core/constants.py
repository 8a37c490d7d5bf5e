"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

# Sindhi for "unknown". Compared by exact equality downstream, do not translate.
UNKNOWN_SENTINEL = "اڻڄاتل"

# Secondary script block (Arabic, used for Sindhi).
SECONDARY_SCRIPT_START = 0x0600
SECONDARY_SCRIPT_END = 0x06FF

FILENAME_DELIMITER = "-"

ALLOWED_IMPORT_EXTENSIONS = frozenset({"csv", "xlsx", "ods", "xls"})
DEFAULT_MAX_IMPORT_BYTES = 10 * 1024 * 1024

DEFAULT_LEAVE_REASON = "No reason provided"
DEFAULT_TIMEZONE = "Asia/Karachi"

SALARY_DAYS_PER_MONTH = 30
DEFAULT_BASE_SALARIES = {
    "I.T & Scanning-Employee": 25000,
    "Library-Employee": 22000,
}
