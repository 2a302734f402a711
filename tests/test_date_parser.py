"""Tests for date parsing."""

from datetime import date, timedelta

import pytest
from dateutil.relativedelta import relativedelta

from spendtrack.utils.date_parser import (
    format_date_str,
    get_date_range,
    parse_date,
    parse_date_str,
    today_str,
)

FALLBACK = date(2025, 5, 20)


def test_format_date_str_pads():
    assert format_date_str(date(2025, 4, 7)) == "07.04.2025"


def test_today_str_uses_given_date():
    assert today_str(date(2024, 12, 31)) == "31.12.2024"


def test_parse_date_str_valid():
    assert parse_date_str("27.04.2025", today=FALLBACK) == date(2025, 4, 27)


@pytest.mark.parametrize("value", ["", "2025-04-27", "27.04", "aa.bb.cccc", "31.02.2025", "01.13.2025"])
def test_parse_date_str_falls_back_to_today(value):
    assert parse_date_str(value, today=FALLBACK) == FALLBACK


def test_parse_statement_style_date():
    assert parse_date("15.03.2024") == date(2024, 3, 15)


def test_parse_invalid_statement_style_date():
    with pytest.raises(ValueError):
        parse_date("31.02.2024")


def test_parse_absolute_date():
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_today():
    assert parse_date("today") == date.today()


def test_parse_yesterday():
    assert parse_date("yesterday") == date.today() - timedelta(days=1)


def test_parse_last_month():
    """'last month' is the first day of the previous month."""
    expected = (date.today() - relativedelta(months=1)).replace(day=1)
    assert parse_date("last month") == expected


def test_parse_this_week_is_monday():
    result = parse_date("this week")
    assert result.weekday() == 0
    assert result <= date.today()


def test_parse_invalid_date():
    with pytest.raises(ValueError):
        parse_date("not a date")


def test_get_date_range_last_month():
    start, end = get_date_range("last-month")
    today = date.today()
    assert start == (today - relativedelta(months=1)).replace(day=1)
    assert end == today.replace(day=1) - timedelta(days=1)


def test_get_date_range_last_week_spans_seven_days():
    start, end = get_date_range("last-week")
    assert start.weekday() == 0
    assert end - start == timedelta(days=6)


def test_get_date_range_unknown_period():
    with pytest.raises(ValueError, match="Unknown period"):
        get_date_range("next-month")
