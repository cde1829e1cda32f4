"""Calendar bucket keys shared by the time-based analytics"""
import math


def month_key(day):
    return f"{day.year}-{day.month:02d}"


def quarter_key(day):
    return f"{day.year}-Q{(day.month - 1) // 3 + 1}"


def sunday_weekday(day):
    """Weekday with Sunday as 0"""
    return (day.weekday() + 1) % 7


def week_key(day):
    """
    Week of year for a date, e.g. ``2024-W07``.

    Week 1 is the week holding January 1st and weeks start on Sunday, so a
    year can have a partial week 1 and up to 54 weeks.
    """
    jan_first = day.replace(month=1, day=1)
    past_days = (day - jan_first).days
    week = math.ceil((past_days + sunday_weekday(jan_first) + 1) / 7)
    return f"{day.year}-W{week:02d}"


def shift_month(day, months):
    """First day of the month ``months`` away from the month of ``day``"""
    index = day.year * 12 + day.month - 1 + months
    return day.replace(year=index // 12, month=index % 12 + 1, day=1)


def trailing_months(today, count):
    """First days of the last ``count`` months, oldest first, ending with the current month"""
    return [shift_month(today, -offset) for offset in range(count - 1, -1, -1)]
