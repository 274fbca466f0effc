"""Next occurrence calculation for repeating tasks."""

import calendar
from datetime import date, datetime, timedelta
from typing import Union

from .rules import (
    RecurrenceError,
    RecurrenceErrorKind,
    RecurrenceRule,
    RuleType,
    format_date,
    parse_date,
    parse_rule,
)

# (month, day) used for a February 29 anchor in a non-leap year
LEAP_DAY_FALLBACK = (2, 28)


def add_year(current: date, anchor_day: int) -> date:
    """Advance a scheduled date by one year.

    February 29 maps to LEAP_DAY_FALLBACK when the next year is not a leap
    year, and the result stays there on later steps. When the task was
    first scheduled on day 31 the result snaps to the last day of the month.
    """
    year = current.year + 1
    if current.month == 2 and current.day == 29 and not calendar.isleap(year):
        month, day = LEAP_DAY_FALLBACK
        return date(year, month, day)

    if anchor_day == 31:
        return date(year, current.month, calendar.monthrange(year, current.month)[1])

    return date(year, current.month, current.day)


def _step(current: date, rule: RecurrenceRule, anchor_day: int) -> date:
    if rule.rule_type == RuleType.DAILY:
        return current + timedelta(days=rule.interval)
    return add_year(current, anchor_day)


def next_date(reference: Union[date, datetime], anchor: str, rule: str) -> str:
    """Compute the first occurrence of a repeating task after a reference date.

    The anchor is advanced by at least one step, then by further steps until
    the result is strictly after the reference date. Each step starts from
    the previous result. Only the date part of the reference is considered.

    Args:
        reference: Date treated as "today"
        anchor: Last scheduled date of the task (YYYYMMDD)
        rule: Repeat rule ("d <n>" or "y")

    Returns:
        Next occurrence as YYYYMMDD

    Raises:
        RecurrenceError: On an empty or invalid rule, or an invalid anchor
    """
    if rule == "":
        raise RecurrenceError(RecurrenceErrorKind.EMPTY_RULE, "Repeat rule is empty")

    start = parse_date(anchor)
    parsed = parse_rule(rule)

    if isinstance(reference, datetime):
        reference = reference.date()

    candidate = start
    try:
        if parsed.rule_type == RuleType.DAILY and reference > start:
            # Skip straight to the last step not after the reference
            skipped = (reference - start).days // parsed.interval
            candidate = start + timedelta(days=parsed.interval * skipped)

        candidate = _step(candidate, parsed, start.day)
        while candidate <= reference:
            candidate = _step(candidate, parsed, start.day)
    except (OverflowError, ValueError):
        raise RecurrenceError(
            RecurrenceErrorKind.INVALID_DATE,
            f"Next date for '{anchor}' is out of range"
        )

    return format_date(candidate)
