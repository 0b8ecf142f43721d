"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

MONTHLY_HOURS_TARGET = Decimal(160)
MAX_HOURS_PER_ENTRY = Decimal(24)
SECONDS_PER_DAY = 86400

DEFAULT_SESSION_DAYS = 7
DEFAULT_INACTIVITY_HOURS = 24
DEFAULT_REMINDER_DAYS = 3
DEFAULT_LIST_LIMIT = 500
