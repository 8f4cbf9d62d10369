"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE_SIZE = 20
DEFAULT_STORE_PAGE_SIZE = 10

STANDARD_WORKING_DAYS = 26
DAYS_PER_MONTH_FOR_DAILY_RATE = 30
DEFAULT_SCHEDULED_HOURS = 8.0
DEFAULT_LATE_GRACE_MINUTES = 15

EMPLOYEE_ID_MAX_ATTEMPTS = 10
EMPLOYEE_ID_DIGITS = 3

MAX_LOGIN_ATTEMPTS = 5
LOCK_MINUTES = 30
DEFAULT_TOKEN_DAYS = 7

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)
