"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DATE_FORMAT = "%Y-%m-%d"
DISPLAY_DATE_FORMAT = "%d/%m/%Y"

DEFAULT_INITIAL_PACK = 0
DEFAULT_LOW_PACK_THRESHOLD = 3
DEFAULT_PERSIST_WORKERS = 4
