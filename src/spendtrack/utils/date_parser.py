"""Date parsing utilities."""

import logging
import re
from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"\d{2}\.\d{2}\.\d{4}")


def format_date_str(value: date) -> str:
    """Format a date as DD.MM.YYYY."""
    return f"{value.day:02d}.{value.month:02d}.{value.year}"


def today_str(today: Optional[date] = None) -> str:
    """Return today's date formatted as DD.MM.YYYY."""
    return format_date_str(today or date.today())


def parse_date_str(date_str: str, today: Optional[date] = None) -> date:
    """Parse a DD.MM.YYYY string, falling back to today.

    The string is split on dots; anything other than three numeric
    components, or components that do not form a real calendar date, yields
    the fallback date. This never raises.

    Args:
        date_str: Date text in DD.MM.YYYY form
        today: Fallback date (defaults to date.today())

    Returns:
        Parsed date or the fallback
    """
    fallback = today or date.today()
    parts = date_str.split(".")
    if len(parts) != 3:
        logger.warning("Invalid date string format: %r. Using current date as fallback.", date_str)
        return fallback

    try:
        day, month, year = (int(part) for part in parts)
        return date(year, month, day)
    except ValueError:
        logger.warning("Invalid date components: %r. Using current date as fallback.", date_str)
        return fallback


def parse_date(date_str: str) -> date:
    """Parse a date filter string into a date object.

    Supports various formats including relative dates:
    - Statement dates: "27.04.2025"
    - Absolute dates: "2024-01-15", "January 15, 2024", etc.
    - Relative dates: "today", "yesterday", "last month", "this year", etc.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            # Monday of last week
            return today - timedelta(days=today.weekday() + 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    # Statement-style dates are day first
    if DATE_PATTERN.fullmatch(date_str):
        day, month, year = (int(part) for part in date_str.split("."))
        try:
            return date(year, month, day)
        except ValueError as e:
            raise ValueError(f"Could not parse date '{date_str}': {e}")

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a specified period.

    Args:
        period: Period string (this-month, this-year, this-week, last-month, last-year, last-week)

    Returns:
        Tuple of (start_date, end_date) for the specified period

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return (today.replace(day=1), today)

    elif period == "this-year":
        return (today.replace(month=1, day=1), today)

    elif period == "this-week":
        return (today - timedelta(days=today.weekday()), today)

    elif period == "last-month":
        start_date = (today - relativedelta(months=1)).replace(day=1)
        end_date = today.replace(day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-year":
        start_date = today.replace(month=1, day=1) - relativedelta(years=1)
        end_date = today.replace(month=1, day=1) - timedelta(days=1)
        return (start_date, end_date)

    elif period == "last-week":
        start_date = today - timedelta(days=today.weekday() + 7)
        return (start_date, start_date + timedelta(days=6))

    else:
        raise ValueError(f"Unknown period: '{period}'. Supported periods: this-month, this-year, this-week, last-month, last-year, last-week")
