import calendar
import datetime


def is_leap_year(year: int) -> bool:
    return calendar.isleap(year)


def days_of_year(year: int) -> list[datetime.date]:
    """Returns all calendar days of the given year, in chronological order."""
    first = datetime.date(year, 1, 1)
    n = 366 if is_leap_year(year) else 365
    return [first + datetime.timedelta(days=i) for i in range(n)]


def month_day_label(d: datetime.date) -> str:
    """Returns the short axis label for d.

    Example: "03.05" for March 5th.
    """
    return d.strftime("%m.%d")


MONTH_NAMES = {
    1: "January",
    2: "February",
    3: "March",
    4: "April",
    5: "May",
    6: "June",
    7: "July",
    8: "August",
    9: "September",
    10: "October",
    11: "November",
    12: "December",
}


def long_date(d: datetime.date) -> str:
    """Returns d in the long form used by the detail panel.

    Example: "March 5, 2024"
    """
    return f"{MONTH_NAMES[d.month]} {d.day}, {d.year}"
