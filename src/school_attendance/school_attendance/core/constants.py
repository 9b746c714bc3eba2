"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LOG_LIMIT = 200
MIN_PASSWORD_LENGTH = 6
PIN_LENGTH = 6
DEFAULT_REPORT_DAYS = 30

UNAUTHORIZED_MESSAGE = "Unauthorized"
INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
