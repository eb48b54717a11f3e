import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, Optional, Union

DUE_HORIZON = timedelta(minutes=5)


class RecurringPattern(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class ReminderState:
    reminder_date: datetime
    is_active: bool = True
    is_recurring: bool = False
    recurring_pattern: Optional[str] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "ReminderState":
        return cls(
            reminder_date=doc["reminder_date"],
            is_active=doc.get("is_active", True),
            is_recurring=doc.get("is_recurring", False),
            recurring_pattern=doc.get("recurring_pattern"),
        )


@dataclass(frozen=True)
class ReminderUpdate:
    reminder_date: Optional[datetime] = None
    is_active: Optional[bool] = None

    def to_set(self) -> Dict[str, Any]:
        fields = {}
        if self.reminder_date is not None:
            fields["reminder_date"] = self.reminder_date
        if self.is_active is not None:
            fields["is_active"] = self.is_active
        return fields


def _add_months(value: datetime, months: int) -> datetime:
    # Days past the end of the target month clamp to its last day
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _parse_pattern(pattern: Union[RecurringPattern, str, None]) -> Optional[RecurringPattern]:
    if pattern is None:
        return None
    try:
        return RecurringPattern(pattern)
    except ValueError:
        return None


def next_occurrence(
    reminder_date: datetime, pattern: Union[RecurringPattern, str, None]
) -> Optional[datetime]:
    """Return the next occurrence, or None if the pattern is not recognized."""
    parsed = _parse_pattern(pattern)
    if parsed is RecurringPattern.DAILY:
        return reminder_date + timedelta(days=1)
    if parsed is RecurringPattern.WEEKLY:
        return reminder_date + timedelta(days=7)
    if parsed is RecurringPattern.MONTHLY:
        return _add_months(reminder_date, 1)
    if parsed is RecurringPattern.YEARLY:
        return _add_months(reminder_date, 12)
    return None


def advance(reminder: ReminderState) -> Optional[ReminderUpdate]:
    """
    Move a recurring reminder to its next occurrence.

    Returns None when the reminder has no usable pattern; the caller must
    then leave the stored reminder untouched.
    """
    new_date = next_occurrence(reminder.reminder_date, reminder.recurring_pattern)
    if new_date is None:
        return None
    return ReminderUpdate(reminder_date=new_date)


def fire_one_time(reminder: ReminderState) -> ReminderUpdate:
    return ReminderUpdate(is_active=False)


def resolve(reminder: ReminderState) -> Optional[ReminderUpdate]:
    if reminder.is_recurring:
        return advance(reminder)
    return fire_one_time(reminder)


def is_due(reminder: ReminderState, now: datetime, horizon: timedelta = DUE_HORIZON) -> bool:
    return reminder.is_active and now <= reminder.reminder_date <= now + horizon
