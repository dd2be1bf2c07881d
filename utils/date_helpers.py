from datetime import date, datetime, timedelta
import calendar
from utils.constants import DATE_FORMAT

# ── Display date format options ───────────────────────────────────────────────

DATE_FORMAT_OPTIONS = ["MM/DD/YYYY", "DD/MM/YYYY", "YYYY-MM-DD", "DD.MM.YYYY", "MM-DD-YYYY"]

_STRFTIME_MAP = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD.MM.YYYY": "%d.%m.%Y",
    "MM-DD-YYYY": "%m-%d-%Y",
}

# Sunday-first week, matching the calendar header
_GRID_CALENDAR = calendar.Calendar(firstweekday=calendar.SUNDAY)


def today() -> date:
    return date.today()


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def shift_month(year: int, month: int, n: int) -> tuple[int, int]:
    """Return the (year, month) that lies n calendar months after year/month."""
    index = year * 12 + (month - 1) + n
    return index // 12, index % 12 + 1


def prev_month(year: int, month: int) -> tuple[int, int]:
    return shift_month(year, month, -1)


def next_month(year: int, month: int) -> tuple[int, int]:
    return shift_month(year, month, 1)


def month_distance(start: date, end: date) -> int:
    """Signed number of calendar months from start's month to end's month."""
    return (end.year - start.year) * 12 + end.month - start.month


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return (first_day, last_day) of the given month."""
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def date_range(start: date, end: date):
    """Yield every date from start through end, inclusive."""
    if start > end:
        return
    current = start
    while True:
        yield current
        if current == end:
            return
        current = current + timedelta(days=1)


def month_grid(year: int, month: int) -> list[int | None]:
    """Cells of a Sunday-first month grid: None for leading blanks, then 1..N."""
    days = list(_GRID_CALENDAR.itermonthdays(year, month))
    # Trailing zeros belong to the next month and are not rendered
    while days and days[-1] == 0:
        days.pop()
    return [d or None for d in days]


def friendly_month(year: int, month: int) -> str:
    """Return e.g. 'February 2026'."""
    return date(year, month, 1).strftime("%B %Y")


def format_display_date(date_str: str, fmt_key: str = "MM/DD/YYYY") -> str:
    """Convert a YYYY-MM-DD storage string to the user-facing display format."""
    if not date_str:
        return date_str
    d = parse_date(date_str)
    if d is None:
        return date_str
    return d.strftime(_STRFTIME_MAP.get(fmt_key, "%m/%d/%Y"))


def parse_display_date(display_str: str, fmt_key: str) -> date | None:
    """Parse a date in the given display format. Returns None on failure.

    Falls back to ISO 8601 parse if the display format doesn't match.
    """
    if not display_str:
        return None
    fmt = _STRFTIME_MAP.get(fmt_key, "%m/%d/%Y")
    try:
        return datetime.strptime(display_str.strip(), fmt).date()
    except ValueError:
        return parse_date(display_str)
