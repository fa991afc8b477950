"""Calendar-day parsing and per-cadence period arithmetic."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Callable

from ..domain.records import Cadence, DateValue
from ..errors import ValidationError


def _parse_iso(value: str, field: str) -> datetime:
    text = value.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError(field, value, f"{field} is not an ISO-8601 date: {value!r}") from exc


def to_calendar_day(value: DateValue, field: str = "date") -> date:
    """Reduce a timestamp to its calendar day.

    Dates are taken as written: an offset in the string is not applied, so
    ``2024-08-01T23:30:00-05:00`` is August 1st.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return _parse_iso(value, field).date()
    raise ValidationError(field, value, f"{field} must be a date or ISO-8601 string")


def to_instant(value: DateValue, field: str = "date") -> datetime:
    """Return an aware datetime for ordering; naive values are read as UTC."""

    if isinstance(value, str):
        value = _parse_iso(value, field)
    elif not isinstance(value, date):
        raise ValidationError(field, value, f"{field} must be a date or ISO-8601 string")
    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def start_of_week(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def end_of_week(day: date) -> date:
    """Sunday of the week containing ``day``."""
    return start_of_week(day) + timedelta(days=6)


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def add_months(day: date, months: int) -> date:
    """Shift ``day`` by whole months, clamping to the target month's length."""

    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


@dataclass(frozen=True, slots=True)
class CadenceRules:
    """The three period operations the streak walk needs for one cadence.

    ``is_current(day, today)`` accepts the current or immediately prior
    period. ``periods_between(a, b)`` is the signed number of whole periods
    from ``b`` up to ``a``. ``step_back(day, n)`` is the start of the period
    ``n`` periods before ``day``.
    """

    is_current: Callable[[date, date], bool]
    periods_between: Callable[[date, date], int]
    step_back: Callable[[date, int], date]


def _daily_is_current(day: date, today: date) -> bool:
    return day == today or day == today - timedelta(days=1)


def _weekly_is_current(day: date, today: date) -> bool:
    return start_of_week(today) - timedelta(weeks=1) <= day <= end_of_week(today)


def _monthly_is_current(day: date, today: date) -> bool:
    return start_of_month(add_months(today, -1)) <= day <= end_of_month(today)


def _weeks_between(a: date, b: date) -> int:
    return (start_of_week(a) - start_of_week(b)).days // 7


def _months_between(a: date, b: date) -> int:
    return (a.year - b.year) * 12 + (a.month - b.month)


CADENCE_RULES: dict[Cadence, CadenceRules] = {
    Cadence.DAILY: CadenceRules(
        is_current=_daily_is_current,
        periods_between=lambda a, b: (a - b).days,
        step_back=lambda day, n: day - timedelta(days=n),
    ),
    Cadence.WEEKLY: CadenceRules(
        is_current=_weekly_is_current,
        periods_between=_weeks_between,
        step_back=lambda day, n: start_of_week(day) - timedelta(weeks=n),
    ),
    Cadence.MONTHLY: CadenceRules(
        is_current=_monthly_is_current,
        periods_between=_months_between,
        step_back=lambda day, n: add_months(start_of_month(day), -n),
    ),
}


def rules_for(cadence: Cadence | str) -> CadenceRules:
    """Look up the period operations for ``cadence``."""

    try:
        return CADENCE_RULES[Cadence(cadence)]
    except ValueError as exc:
        raise ValidationError("cadence", cadence, f"Unknown cadence: {cadence!r}") from exc


__all__ = [
    "CADENCE_RULES",
    "CadenceRules",
    "add_months",
    "end_of_month",
    "end_of_week",
    "rules_for",
    "start_of_month",
    "start_of_week",
    "to_calendar_day",
    "to_instant",
]
