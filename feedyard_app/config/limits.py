"""
Named constants for ration projections and activity logging.

Values follow the feedyard's existing spreadsheets: monthly figures use a
flat 30-day month and feed is tracked in pounds unless the entry says
otherwise.
"""

from __future__ import annotations

# Horizon (days) used for "monthly" cost projections
PROJECTION_DAYS = 30

# Default unit for feed activity entries
DEFAULT_FEED_UNIT = "lbs"

# Default unit for medication dosage
DEFAULT_DOSAGE_UNIT = "ml"

# Calendar-date format used for every stored date field
DATE_FORMAT = "%Y-%m-%d"

# Suffix appended to a duplicated ration's name
DUPLICATE_SUFFIX = " (Copy)"
