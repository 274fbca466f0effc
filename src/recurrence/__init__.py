"""Recurrence rules and next date calculation."""

from .calculator import LEAP_DAY_FALLBACK, add_year, next_date
from .rules import (
    DATE_FORMAT,
    MAX_INTERVAL_DAYS,
    RecurrenceError,
    RecurrenceErrorKind,
    RecurrenceRule,
    RuleType,
    format_date,
    parse_date,
    parse_rule,
)

__all__ = [
    "DATE_FORMAT",
    "LEAP_DAY_FALLBACK",
    "MAX_INTERVAL_DAYS",
    "RecurrenceError",
    "RecurrenceErrorKind",
    "RecurrenceRule",
    "RuleType",
    "add_year",
    "format_date",
    "next_date",
    "parse_date",
    "parse_rule",
]
