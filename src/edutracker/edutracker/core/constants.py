"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

CLEANUP_WINDOW_FIRST_DAY = 1
CLEANUP_WINDOW_LAST_DAY = 3
ADMIN_REMINDER_FROM_DAY = 25

CLEAR_ALL_CONFIRMATION = "DELETE_ALL_DATA"

MAX_NOTES_LENGTH = 500
MAX_IMAGE_BYTES = 5 * 1024 * 1024

MIN_RATING = 1
MAX_RATING = 5

DEFAULT_HISTORY_PAGE_SIZE = 10
MAX_HISTORY_PAGE_SIZE = 100
