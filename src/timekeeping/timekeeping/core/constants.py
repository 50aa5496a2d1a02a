"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

STANDARD_SHIFT_MINUTES = 480

# Night differential band: [22:00, 24:00) and [00:00, 06:00)
NIGHT_BAND_START_HOUR = 22
NIGHT_BAND_END_HOUR = 6

DEFAULT_BREAK_TYPE = "regular"

# Labor cost percentage is stored x100 (2500 == 25.00%)
PERCENT_SCALE = 10000
NO_SALES_PERCENTAGE = 1_000_000

MIN_REPORT_YEAR = 1970
MAX_REPORT_YEAR = 2100

# Largest accepted money amount in major units. In cents it stays far below the
# BIGINT columns, and labor x PERCENT_SCALE still fits the BIGINT percentage.
MAX_MONEY_AMOUNT = 999_999_999_999
