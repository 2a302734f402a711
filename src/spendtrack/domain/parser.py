"""Expense input parsing.

Turns the three kinds of pasted text into RawExpense records:

1. Single entries, with or without a date and with or without a quoted
   comment: ``10.50 Обед`` or ``27.04.2025 10,75 "Фикспрайс"``.
2. Bank statement dumps, tab-separated, where only negative amounts are
   expenses: ``14.05.2025 20:31:24<TAB>Оплата<TAB>-8,63 BYN<TAB>... SHOP "KOPEECHKA"``.
3. Tab-separated tables that already carry a category:
   ``27.04.2025<TAB>10,75<TAB>Фикспрайс<TAB>Повседневные (Продукты)``.

Category names found in tables are carried as plain text; resolving them
against the category tree is the classifier's job.
"""

import logging
import re
from datetime import date
from typing import Optional

from spendtrack.domain.defaults import new_id, resolve_currency
from spendtrack.domain.entities import RawExpense
from spendtrack.utils.amount_parser import format_amount, parse_amount, parse_magnitude
from spendtrack.utils.date_parser import DATE_PATTERN, today_str

logger = logging.getLogger(__name__)

_AMOUNT = r"([\d,.-]+)"
_DATE = r"(\d{2}\.\d{2}\.\d{4})"

# Tried in order; the first full match wins.
SINGLE_PATTERNS = [
    (re.compile(_DATE + r"\s+" + _AMOUNT + r'\s+"([^"]+)"'), True, True),
    (re.compile(_AMOUNT + r'\s+"([^"]+)"'), False, True),
    (re.compile(_DATE + r"\s+" + _AMOUNT + r"\s+(.+)"), True, False),
    (re.compile(_AMOUNT + r"\s+(.+)"), False, False),
]

STATEMENT_AMOUNT = re.compile(r"([-+]?\s?\d+(?:[,.]\d+)?)\s*([A-Z]{3})?")
STATEMENT_DATE = re.compile(r"^" + _DATE)

MERCHANT_MARKERS = re.compile(
    r"(POS|SHOP|EPOS|SUPERMARKET|INTERNET|АЗС|Кафе|Kafe|RESTORAN|WILDBERRIES|GASTROFEST|YANDEX GO)",
    re.IGNORECASE,
)
# "4512, POS, SHOP X" -> "SHOP X"
TERMINAL_PREFIX = re.compile(r"^[A-Za-z0-9_]+,\s*(POS|EPOS),\s*", re.IGNORECASE)
OPAQUE_CODE = re.compile(r"[A-Za-z0-9_]+")

NO_COMMENT = "Комментарий отсутствует"
COMMENT_NOT_FOUND = "Комментарий не найден"

CATEGORY_DESCRIPTOR = re.compile(r"^(.*?)\s*\((.*?)\)$")


def _normalize_amount(amount_str: str) -> str:
    try:
        return format_amount(parse_magnitude(amount_str))
    except ValueError:
        return "0"


def _is_quoted(text: str) -> bool:
    return text.startswith('"') and text.endswith('"')


def parse_single(
    text: str, currency: Optional[str] = None, today: Optional[date] = None
) -> Optional[RawExpense]:
    """Parse a single manually typed expense.

    Supported forms (date defaults to today when omitted):
    - ``DD.MM.YYYY AMOUNT "comment"``
    - ``AMOUNT "comment"``
    - ``DD.MM.YYYY AMOUNT comment``
    - ``AMOUNT comment``

    The amount accepts comma or dot as separator; its sign is dropped.

    Args:
        text: Raw input line
        currency: Currency code (defaults to the configured currency)
        today: Date used when the input carries none

    Returns:
        RawExpense, or None if the input matches none of the forms
    """
    trimmed = text.strip()

    for pattern, has_date, quoted in SINGLE_PATTERNS:
        match = pattern.fullmatch(trimmed)
        if match is None:
            continue

        groups = match.groups()
        if has_date:
            date_str, amount_str, comment = groups
        else:
            date_str = today_str(today)
            amount_str, comment = groups

        # An unquoted remainder that is itself quoted belongs to the quoted forms
        if not quoted and _is_quoted(comment):
            return None

        return RawExpense(
            id=new_id(),
            date_str=date_str,
            amount_str=_normalize_amount(amount_str),
            currency=resolve_currency(currency),
            full_comment=comment.strip(),
        )

    return None


def _select_comment(segments: list[str]) -> str:
    """Pick the most readable merchant description out of statement fields."""
    best = segments[-1]
    merchant_found = False
    for segment in reversed(segments):
        if MERCHANT_MARKERS.search(segment):
            best = segment
            merchant_found = True
            break

    joined = ", ".join(segments)
    if not merchant_found and len(segments) > 1:
        best = joined

    comment = TERMINAL_PREFIX.sub("", best).strip()

    # A bare code is less useful than everything joined together
    if OPAQUE_CODE.fullmatch(comment) and len(segments) > 1 and len(joined) > len(comment):
        comment = TERMINAL_PREFIX.sub("", joined).strip()

    return comment or NO_COMMENT


def parse_bank_statement(
    text: str, currency: Optional[str] = None, skipped: Optional[list[str]] = None
) -> list[RawExpense]:
    """Parse a pasted bank statement.

    Each line is split on tabs. The first field must start with a
    DD.MM.YYYY date; the first later field holding a number decides the
    line: negative amounts are expenses, anything else (deposits, refunds)
    drops the line. Fields after the amount become the comment.

    Args:
        text: Newline-delimited statement text
        currency: Currency used when the amount field carries no code
        skipped: Optional list collecting a message for each skipped line

    Returns:
        List of RawExpense records, one per accepted line
    """
    default_currency = resolve_currency(currency)
    expenses = []

    for line_num, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue

        parts = [part.strip() for part in line.split("\t")]
        if len(parts) < 2:
            _skip(skipped, line_num, "expected at least two tab-separated fields", line)
            continue

        date_match = STATEMENT_DATE.match(parts[0])
        if date_match is None:
            _skip(skipped, line_num, f"no DD.MM.YYYY date in '{parts[0]}'", line)
            continue

        amount_index = None
        amount_match = None
        for index in range(1, len(parts)):
            match = STATEMENT_AMOUNT.search(parts[index])
            if match is not None:
                amount_index = index
                amount_match = match
                break

        if amount_match is None:
            _skip(skipped, line_num, "no amount found", line)
            continue

        value = parse_amount(amount_match.group(1))
        if value >= 0:
            # Deposits and refunds are not expenses
            logger.debug("Line %d: ignoring non-negative amount %r", line_num, amount_match.group(1))
            continue

        segments = [part for part in parts[amount_index + 1:] if part]
        if amount_index + 1 >= len(parts):
            comment = COMMENT_NOT_FOUND
        elif not segments:
            comment = NO_COMMENT
        else:
            comment = _select_comment(segments)

        expenses.append(
            RawExpense(
                id=new_id(),
                date_str=date_match.group(1),
                amount_str=format_amount(abs(value)),
                currency=amount_match.group(2) or default_currency,
                full_comment=comment,
            )
        )

    return expenses


def parse_category_descriptor(descriptor: str) -> tuple[str, Optional[str]]:
    """Split ``"Name"`` or ``"Name (Sub)"`` into main and sub names."""
    match = CATEGORY_DESCRIPTOR.match(descriptor.strip())
    if match:
        return match.group(1).strip(), match.group(2).strip() or None
    return descriptor.strip(), None


def parse_tabulated(
    text: str, currency: Optional[str] = None, skipped: Optional[list[str]] = None
) -> list[RawExpense]:
    """Parse tab-separated rows that already name their category.

    Each line must be ``DATE<TAB>AMOUNT<TAB>COMMENT<TAB>CATEGORY`` where
    CATEGORY is ``Main`` or ``Main (Sub)``. Lines breaking any rule are
    skipped.

    Args:
        text: Newline-delimited table text
        currency: Currency code for every row
        skipped: Optional list collecting a message for each skipped line

    Returns:
        List of RawExpense records carrying predefined category names
    """
    row_currency = resolve_currency(currency)
    expenses = []

    for line_num, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue

        parts = [part.strip() for part in line.split("\t")]
        if len(parts) != 4:
            _skip(skipped, line_num, f"expected 4 tab-separated fields, got {len(parts)}", line)
            continue

        date_part, amount_part, comment, descriptor = parts

        if not DATE_PATTERN.fullmatch(date_part):
            _skip(skipped, line_num, f"invalid date '{date_part}'", line)
            continue

        try:
            amount = parse_amount(amount_part)
        except ValueError:
            amount = None
        if amount is None or amount < 0:
            _skip(skipped, line_num, f"invalid or negative amount '{amount_part}'", line)
            continue

        if not comment:
            _skip(skipped, line_num, "empty comment", line)
            continue

        main_name, sub_name = parse_category_descriptor(descriptor)
        if not main_name:
            _skip(skipped, line_num, f"empty category '{descriptor}'", line)
            continue

        expenses.append(
            RawExpense(
                id=new_id(),
                date_str=date_part,
                amount_str=format_amount(abs(amount)),
                currency=row_currency,
                full_comment=comment,
                predefined_category_name=main_name,
                predefined_subcategory_name=sub_name,
            )
        )

    return expenses


def _skip(skipped: Optional[list[str]], line_num: int, reason: str, line: str) -> None:
    logger.warning("Skipping line %d (%s): %r", line_num, reason, line)
    if skipped is not None:
        skipped.append(f"Line {line_num}: {reason}")
