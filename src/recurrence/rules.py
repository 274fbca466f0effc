"""Recurrence rule and date parsing."""

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

DATE_FORMAT = "%Y%m%d"

# Upper bound for "d <n>" rules
MAX_INTERVAL_DAYS = 400

_DATE_RE = re.compile(r"[0-9]{8}")
_INTERVAL_RE = re.compile(r"[+-]?[0-9]+")


class RecurrenceErrorKind(str, Enum):
    EMPTY_RULE = "empty_rule"
    INVALID_DATE = "invalid_date"
    INVALID_INTERVAL = "invalid_interval"
    UNSUPPORTED_RULE = "unsupported_rule"


class RecurrenceError(ValueError):
    """Raised when a next date cannot be computed."""

    def __init__(self, kind: RecurrenceErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class RuleType(str, Enum):
    NONE = "none"  # No recurrence
    DAILY = "d"  # Every N days
    YEARLY = "y"  # Every year


@dataclass(frozen=True)
class RecurrenceRule:
    """Parsed form of a task's repeat string."""
    rule_type: RuleType
    interval: int = 0

    @property
    def is_recurring(self) -> bool:
        return self.rule_type != RuleType.NONE


def parse_rule(rule: str) -> RecurrenceRule:
    """Parse a repeat string.

    Args:
        rule: "" (no recurrence), "d <n>" with 1 <= n <= 400, or "y"

    Returns:
        RecurrenceRule

    Raises:
        RecurrenceError: INVALID_INTERVAL for a bad "d <n>" interval,
            UNSUPPORTED_RULE for any other format
    """
    if rule == "":
        return RecurrenceRule(RuleType.NONE)

    if rule == "y":
        return RecurrenceRule(RuleType.YEARLY)

    if rule.startswith("d "):
        days_text = rule[2:].strip()
        if not _INTERVAL_RE.fullmatch(days_text):
            raise RecurrenceError(
                RecurrenceErrorKind.INVALID_INTERVAL,
                f"Invalid day interval: '{days_text}'"
            )
        days = int(days_text)
        if days <= 0 or days > MAX_INTERVAL_DAYS:
            raise RecurrenceError(
                RecurrenceErrorKind.INVALID_INTERVAL,
                f"Day interval must be between 1 and {MAX_INTERVAL_DAYS}, got {days}"
            )
        return RecurrenceRule(RuleType.DAILY, days)

    raise RecurrenceError(
        RecurrenceErrorKind.UNSUPPORTED_RULE,
        f"Unsupported repeat format: '{rule}'"
    )


def parse_date(value: str) -> date:
    """Parse a YYYYMMDD string into a date."""
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        raise RecurrenceError(RecurrenceErrorKind.INVALID_DATE, f"Invalid date: '{value}'")
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        raise RecurrenceError(RecurrenceErrorKind.INVALID_DATE, f"Invalid date: '{value}'")


def format_date(value: date) -> str:
    """Format a date as YYYYMMDD (zero-padded for years before 1000)."""
    return f"{value.year:04d}{value.month:02d}{value.day:02d}"
