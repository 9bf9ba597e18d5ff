"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_AUTOSAVE_SECONDS = 1.2
DEFAULT_SESSION_MINUTES = 60
DEFAULT_REQUEST_TIMEOUT = 20
DEFAULT_LOCALE = "fr"

MAX_COMMENT_LENGTH = 300
MAX_MINUTES_LATE = 300

# Truncation for response bodies written to the log
LOG_BODY_LIMIT = 500
