from decimal import Decimal

APP_NAME = "Financial Calendar"
APP_WIDTH = 1100
APP_HEIGHT = 820
DB_FILE = "financial_calendar.db"

DATE_FORMAT = "%Y-%m-%d"

DEFAULT_STARTING_BALANCE = Decimal("1000")

RECURRENCE_NONE = "none"
RECURRENCE_WEEKLY = "weekly"
RECURRENCE_BIWEEKLY = "biweekly"
RECURRENCE_MONTHLY = "monthly"
RECURRENCE_QUARTERLY = "quarterly"
RECURRENCE_ANNUALLY = "annually"

RECURRENCES = [
    RECURRENCE_NONE,
    RECURRENCE_WEEKLY,
    RECURRENCE_BIWEEKLY,
    RECURRENCE_MONTHLY,
    RECURRENCE_QUARTERLY,
    RECURRENCE_ANNUALLY,
]

RECURRENCE_LABELS = {
    RECURRENCE_NONE:      "One-time",
    RECURRENCE_WEEKLY:    "Weekly",
    RECURRENCE_BIWEEKLY:  "Biweekly",
    RECURRENCE_MONTHLY:   "Monthly",
    RECURRENCE_QUARTERLY: "Quarterly",
    RECURRENCE_ANNUALLY:  "Annually",
}

# Fixed-length steps, in days
DAY_INTERVALS = {
    RECURRENCE_WEEKLY:   7,
    RECURRENCE_BIWEEKLY: 14,
}

# Calendar steps, in months
MONTH_INTERVALS = {
    RECURRENCE_MONTHLY:   1,
    RECURRENCE_QUARTERLY: 3,
    RECURRENCE_ANNUALLY:  12,
}

DAYS_OF_WEEK = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

INCOME_COLOR = "#4CAF50"
EXPENSE_COLOR = "#F44336"
TODAY_COLOR = "#2196F3"
