"""
Due-date arithmetic for ResellerHub renewals.

Month-sized plans renew by calendar month (Jan 31 + 1 month = end of
February); any other duration is added as raw days.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta

from apps.common.constants import CALENDAR_MONTH_DURATIONS, DAYS_PER_MONTH


def add_months(base: date, months: int) -> date:
    """Add calendar months, clamping to the last day of the target month"""
    month_index = base.month - 1 + months
    year = base.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(base.day, last_day))


def calendar_months_for(duration_days: int) -> int | None:
    """Number of calendar months for month-sized durations, else None"""
    return CALENDAR_MONTH_DURATIONS.get(duration_days)


def months_for_duration(duration_days: int) -> int:
    """Whole months a duration is worth (minimum 1); used for credit charges"""
    months = calendar_months_for(duration_days)
    if months is not None:
        return months
    return max(1, round(duration_days / DAYS_PER_MONTH))


def extend_due_date(current: date | None, today: date, duration_days: int) -> date:
    """
    📅 New due date after renewing for `duration_days`.

    Renewing early extends from the existing due date; renewing late
    extends from today.
    """
    base = max(current, today) if current else today

    months = calendar_months_for(duration_days)
    if months is not None:
        return add_months(base, months)
    return base + timedelta(days=duration_days)
