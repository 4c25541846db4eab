"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SESSION_HOURS = 24
DEFAULT_RECENT_LIMIT = 10
DEFAULT_WEEK_DAYS = 7

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
FACE_MATCH_THRESHOLD = 0.6

MIN_NAME_LENGTH = 2
MIN_CODE_LENGTH = 2
MIN_PASSWORD_LENGTH = 6

UNKNOWN_PLACEHOLDER = "Unknown"
EXPORT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
