from datetime import date, datetime, time, timezone

import pytest

from finance_app.db.models.budget import BudgetPeriod
from finance_app.services.budget_spending import BudgetWindow, resolve_window

from conftest import NOW, make_budget

UTC = timezone.utc


def at(year, month, day, t=time.min):
    return datetime.combine(date(year, month, day), t, tzinfo=UTC)


def test_monthly_window_is_current_month_whatever_the_start_date():
    for start in (date(2021, 1, 1), date(2024, 2, 15), date(2024, 5, 1)):
        window = resolve_window(make_budget(start_date=start), NOW)
        assert window == BudgetWindow(start=at(2024, 5, 1), end=at(2024, 5, 31, time.max))


def test_monthly_window_starts_at_budget_start_inside_current_month():
    window = resolve_window(make_budget(start_date=date(2024, 5, 10)), NOW)
    assert window.start == at(2024, 5, 10)
    assert window.end == at(2024, 5, 31, time.max)


def test_monthly_window_respects_end_date_in_current_month():
    window = resolve_window(make_budget(end_date=date(2024, 5, 20)), NOW)
    assert window == BudgetWindow(start=at(2024, 5, 1), end=at(2024, 5, 20, time.max))


def test_monthly_budget_that_ended_last_month_has_no_window():
    assert resolve_window(make_budget(end_date=date(2024, 4, 30)), NOW) is None


def test_monthly_budget_starting_next_month_has_no_window():
    assert resolve_window(make_budget(start_date=date(2024, 6, 1)), NOW) is None


def test_monthly_window_in_december_and_february():
    december = resolve_window(make_budget(), datetime(2024, 12, 31, 23, 0, tzinfo=UTC))
    assert december.end == at(2024, 12, 31, time.max)

    leap_february = resolve_window(make_budget(start_date=date(2023, 1, 1)), datetime(2024, 2, 10, tzinfo=UTC))
    assert leap_february == BudgetWindow(start=at(2024, 2, 1), end=at(2024, 2, 29, time.max))


def test_weekly_window_runs_monday_to_sunday():
    window = resolve_window(make_budget(period=BudgetPeriod.weekly), NOW)
    assert window == BudgetWindow(start=at(2024, 5, 13), end=at(2024, 5, 19, time.max))


def test_weekly_window_on_a_monday_and_a_sunday():
    monday = datetime(2024, 5, 13, 0, 0, tzinfo=UTC)
    sunday = datetime(2024, 5, 19, 23, 59, tzinfo=UTC)
    expected = BudgetWindow(start=at(2024, 5, 13), end=at(2024, 5, 19, time.max))
    assert resolve_window(make_budget(period=BudgetPeriod.weekly), monday) == expected
    assert resolve_window(make_budget(period=BudgetPeriod.weekly), sunday) == expected


def test_yearly_window_covers_current_year():
    window = resolve_window(make_budget(period=BudgetPeriod.yearly, start_date=date(2020, 6, 1)), NOW)
    assert window == BudgetWindow(start=at(2024, 1, 1), end=at(2024, 12, 31, time.max))


def test_custom_open_ended_window_runs_until_end_of_today():
    budget = make_budget(period=BudgetPeriod.custom, start_date=date(2024, 3, 1))
    window = resolve_window(budget, NOW)
    assert window == BudgetWindow(start=at(2024, 3, 1), end=at(2024, 5, 15, time.max))


def test_expired_custom_window_is_not_extended_to_now():
    budget = make_budget(period=BudgetPeriod.custom, start_date=date(2024, 1, 1), end_date=date(2024, 2, 10))
    window = resolve_window(budget, NOW)
    assert window == BudgetWindow(start=at(2024, 1, 1), end=at(2024, 2, 10, time.max))


def test_custom_window_ending_in_the_future_keeps_its_end_date():
    budget = make_budget(period=BudgetPeriod.custom, start_date=date(2024, 5, 1), end_date=date(2024, 6, 30))
    assert resolve_window(budget, NOW).end == at(2024, 6, 30, time.max)


def test_custom_budget_starting_after_now_has_no_window():
    budget = make_budget(period=BudgetPeriod.custom, start_date=date(2024, 5, 20))
    assert resolve_window(budget, NOW) is None


def test_custom_budget_starting_today_covers_today():
    budget = make_budget(period=BudgetPeriod.custom, start_date=date(2024, 5, 15))
    assert resolve_window(budget, NOW) == BudgetWindow(start=at(2024, 5, 15), end=at(2024, 5, 15, time.max))


@pytest.mark.parametrize("start_date", [None, "", "not-a-date", 42])
def test_missing_or_invalid_start_date_has_no_window(start_date):
    assert resolve_window(make_budget(start_date=start_date), NOW) is None


def test_iso_string_dates_are_accepted():
    budget = make_budget(period=BudgetPeriod.custom, start_date="2024-01-01", end_date="2024-01-31T00:00:00")
    assert resolve_window(budget, NOW) == BudgetWindow(start=at(2024, 1, 1), end=at(2024, 1, 31, time.max))


def test_unknown_period_has_no_window():
    assert resolve_window(make_budget(period="fortnightly"), NOW) is None


def test_window_follows_the_zone_of_now():
    from zoneinfo import ZoneInfo

    paris = ZoneInfo("Europe/Paris")
    # Still April 30th in UTC, already May 1st in Paris
    now = datetime(2024, 5, 1, 0, 30, tzinfo=paris)
    window = resolve_window(make_budget(), now)
    assert window.start == datetime(2024, 5, 1, tzinfo=paris)
    assert window.end == datetime.combine(date(2024, 5, 31), time.max, tzinfo=paris)


def test_naive_now_gives_naive_window():
    window = resolve_window(make_budget(), datetime(2024, 5, 15, 12, 0))
    assert window.start == datetime(2024, 5, 1)
    assert window.end.tzinfo is None
