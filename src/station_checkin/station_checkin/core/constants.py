"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

TOP_LEVEL_CODES = tuple(str(i) for i in range(1, 9))
CHILD_CODE_LETTERS = ("A", "B", "C", "D", "E", "F", "G", "H")

MEMBER_NUMBER_LENGTH = 8
VISITOR_NUMBER_PREFIX = "VIS"
VISITOR_DEFAULT_LAST_NAME = "Visitor"

DEFAULT_CHECKOUT_TOLERANCE_MINUTES = 10
DEFAULT_VISITOR_END_MAX_FUTURE_HOURS = 6

DEFAULT_INVITE_EXPIRY_DAYS = 7
MIN_INVITE_EXPIRY_DAYS = 1
MAX_INVITE_EXPIRY_DAYS = 30

KIOSK_KEY_BYTES = 32
KIOSK_KEY_HEADER = "X-Kiosk-Key"
KIOSK_KEY_COOKIE = "kiosk_key"
DEFAULT_KIOSK_NAME = "Kiosk"
