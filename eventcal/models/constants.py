"""Constants for eventcal.

This module centralizes all magic numbers and default values used throughout the package.
"""

# Recurrence
MAX_OCCURRENCES = 52  # Hard ceiling on generated occurrences per series

# Event defaults
DEFAULT_EVENT_DURATION_MINUTES = 60
DEFAULT_REMINDER_MINUTES = (60, 1440)  # 1 hour and 1 day before

# Categories that are not exported as CATEGORIES
UNCATEGORIZED_VALUES = frozenset({"", "other"})

# Calendar envelope
DEFAULT_PRODUCT_ID = "-//CalDrop//Event//EN"
DEFAULT_UID_DOMAIN = "caldrop.app"
DEFAULT_CALENDAR_NAME = "CalDrop"

# Feeds
FEED_CACHE_MAX_AGE_SECONDS = 3600

# iCalendar content lines are folded at 75 octets (RFC 5545 §3.1)
ICS_LINE_LIMIT_OCTETS = 75

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 1440
