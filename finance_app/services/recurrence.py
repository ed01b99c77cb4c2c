# finance_app/services/recurrence.py
"""
Date math for recurring transactions. Nothing here creates transactions;
it only tells when the next occurrence of a series falls.
"""
import calendar
from datetime import date, timedelta

from finance_app.db.models.recurring_transaction import RecurrenceFrequency


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping to the last day of shorter months (Jan 31 + 1 -> Feb 29/28)."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def nth_occurrence(start_date: date, frequency: RecurrenceFrequency, interval: int, n: int) -> date:
    """
    The n-th occurrence of a series (n=0 is start_date itself).
    Always computed from start_date so month-end clamping does not drift.
    """
    step = interval * n
    if frequency == RecurrenceFrequency.daily:
        return start_date + timedelta(days=step)
    if frequency == RecurrenceFrequency.weekly:
        return start_date + timedelta(weeks=step)
    if frequency == RecurrenceFrequency.monthly:
        return add_months(start_date, step)
    if frequency == RecurrenceFrequency.yearly:
        return add_months(start_date, 12 * step)
    raise ValueError(f"Invalid frequency: {frequency}")


def calculate_next_occurrence(
    start_date: date,
    frequency: RecurrenceFrequency,
    interval: int,
    today: date,
) -> date:
    """
    First occurrence strictly after ``today``; ``start_date`` itself when it is
    still in the future.
    """
    frequency = RecurrenceFrequency(frequency)
    if interval < 1:
        raise ValueError("interval must be at least 1")
    if start_date > today:
        return start_date

    if frequency in (RecurrenceFrequency.daily, RecurrenceFrequency.weekly):
        step_days = interval if frequency == RecurrenceFrequency.daily else 7 * interval
        n = (today - start_date).days // step_days + 1
        return nth_occurrence(start_date, frequency, interval, n)

    # Month lengths vary; estimate from the month distance and walk forward
    months_apart = (today.year - start_date.year) * 12 + today.month - start_date.month
    per_step = interval if frequency == RecurrenceFrequency.monthly else 12 * interval
    n = max(months_apart // per_step, 1)
    while nth_occurrence(start_date, frequency, interval, n) <= today:
        n += 1
    return nth_occurrence(start_date, frequency, interval, n)
