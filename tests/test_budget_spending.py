from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

import pytest

from finance_app.db.models.budget import BudgetPeriod
from finance_app.services.budget_spending import (
    BudgetWindow,
    _as_comparable,
    compute_spent,
    fetch_candidate_transactions,
    get_budgets_with_spending,
    resolve_window,
)

from conftest import NOW, OTHER_OWNER_ID, OWNER_ID, make_budget, make_category, make_transaction

UTC = timezone.utc
MAY = BudgetWindow(
    start=datetime(2024, 5, 1, tzinfo=UTC),
    end=datetime.combine(date(2024, 5, 31), time.max, tzinfo=UTC),
)


def on(day, hour=12):
    return datetime(2024, 5, day, hour, tzinfo=UTC)


# --- compute_spent ---

def test_category_scope():
    food, rent = make_category("Food"), make_category("Rent")
    candidates = [make_transaction("-50", on(3), food), make_transaction("-30", on(4), rent)]

    assert compute_spent(make_budget(category=food), MAY, candidates) == Decimal("50")
    assert compute_spent(make_budget(category=None), MAY, candidates) == Decimal("80")


def test_uncategorized_transactions_only_count_for_unscoped_budgets():
    food = make_category("Food")
    candidates = [make_transaction("-12.50", on(3))]

    assert compute_spent(make_budget(category=food), MAY, candidates) == Decimal("0")
    assert compute_spent(make_budget(), MAY, candidates) == Decimal("12.50")


def test_income_is_never_counted():
    candidates = [make_transaction("2000", on(2)), make_transaction("-20", on(2)), make_transaction("0", on(2))]
    assert compute_spent(make_budget(), MAY, candidates) == Decimal("20")


def test_transactions_on_the_last_day_are_included_at_any_time():
    candidates = [
        make_transaction("-1", datetime(2024, 5, 31, 0, 0, tzinfo=UTC)),
        make_transaction("-2", datetime(2024, 5, 31, 23, 59, 59, 999999, tzinfo=UTC)),
        make_transaction("-4", datetime(2024, 6, 1, 0, 0, tzinfo=UTC)),
        make_transaction("-8", datetime(2024, 4, 30, 23, 59, 59, tzinfo=UTC)),
    ]
    assert compute_spent(make_budget(), MAY, candidates) == Decimal("3")


def test_no_window_means_zero():
    assert compute_spent(make_budget(), None, [make_transaction("-10", on(3))]) == Decimal("0")


def test_sum_is_exact_decimal():
    candidates = [make_transaction("-0.10", on(1)), make_transaction("-0.20", on(2))]
    spent = compute_spent(make_budget(), MAY, candidates)
    assert spent == Decimal("0.30")
    assert isinstance(spent, Decimal)


def test_naive_transaction_dates_are_read_in_the_window_zone():
    candidates = [make_transaction("-5", datetime(2024, 5, 31, 23, 0))]
    assert compute_spent(make_budget(), MAY, candidates) == Decimal("5")


# --- fetch_candidate_transactions ---

@pytest.mark.asyncio
async def test_no_usable_window_means_no_query(store):
    assert await fetch_candidate_transactions(None, OWNER_ID, [None, None]) == []
    assert await fetch_candidate_transactions(None, OWNER_ID, []) == []
    assert store.expense_queries == []


@pytest.mark.asyncio
async def test_one_query_over_the_union_of_windows(store):
    early = BudgetWindow(start=datetime(2024, 3, 1, tzinfo=UTC), end=datetime(2024, 3, 31, tzinfo=UTC))
    late = BudgetWindow(start=datetime(2024, 5, 1, tzinfo=UTC), end=datetime(2024, 5, 31, tzinfo=UTC))
    store.transactions = [
        make_transaction("-1", datetime(2024, 2, 28, tzinfo=UTC)),
        make_transaction("-2", datetime(2024, 4, 15, tzinfo=UTC)),
        make_transaction("-3", datetime(2024, 5, 20, tzinfo=UTC)),
        make_transaction("100", datetime(2024, 4, 15, tzinfo=UTC)),
        make_transaction("-4", datetime(2024, 4, 15, tzinfo=UTC), owner_user_id=OTHER_OWNER_ID),
    ]

    candidates = await fetch_candidate_transactions(None, OWNER_ID, [late, None, early])

    assert store.expense_queries == [(early.start, late.end)]
    assert sorted(t.amount for t in candidates) == [Decimal("-3"), Decimal("-2")]


# --- get_budgets_with_spending ---

@pytest.mark.asyncio
async def test_end_to_end_monthly_food_budget(store):
    food, rent = make_category("Food"), make_category("Rent")
    budget = make_budget(category=food, amount="200", start_date=NOW.date() - timedelta(days=90))
    store.budgets = [budget]
    store.transactions = [
        make_transaction("-40", on(2), food),
        make_transaction("-15", on(10), food),
        make_transaction("-1000", on(1), rent),
        make_transaction("2000", on(1)),
    ]

    result = await get_budgets_with_spending(None, OWNER_ID, NOW)

    assert result == [budget]
    assert budget.spent_amount == Decimal("55")
    assert budget.remaining_amount == Decimal("145")


@pytest.mark.asyncio
async def test_exactly_two_reads_whatever_the_number_of_budgets(store):
    store.budgets = [make_budget(category=make_category(str(i))) for i in range(25)]

    await get_budgets_with_spending(None, OWNER_ID, NOW)

    assert store.budget_queries == 1
    assert len(store.expense_queries) == 1


@pytest.mark.asyncio
async def test_batch_matches_each_budget_computed_alone(store):
    food, fun = make_category("Food"), make_category("Fun")
    budgets = [
        make_budget(category=food),
        make_budget(period=BudgetPeriod.weekly),
        make_budget(period=BudgetPeriod.custom, start_date=date(2024, 1, 1), end_date=date(2024, 1, 31), category=fun),
        make_budget(period=BudgetPeriod.custom, start_date=date(2024, 4, 20)),
        make_budget(end_date=date(2024, 4, 1)),
    ]
    transactions = [
        make_transaction("-10", datetime(2024, 1, 5, tzinfo=UTC), fun),
        make_transaction("-11", datetime(2024, 1, 5, tzinfo=UTC), food),
        make_transaction("-12", datetime(2024, 4, 25, tzinfo=UTC), food),
        make_transaction("-13", on(2), food),
        make_transaction("-14", on(14), fun),
        make_transaction("-15", on(15, 23), None),
        make_transaction("-16", on(20), food),
    ]
    store.budgets = budgets
    store.transactions = transactions

    await get_budgets_with_spending(None, OWNER_ID, NOW)

    for budget in budgets:
        window = resolve_window(budget, NOW)
        own_rows = [] if window is None else [
            t for t in transactions if window.start <= t.transaction_date <= window.end
        ]
        assert budget.spent_amount == compute_spent(budget, window, own_rows)

    assert [b.spent_amount for b in budgets] == [
        Decimal("29"),   # food in May: 13 + 16
        Decimal("29"),   # week of May 13th, every category: 14 + 15
        Decimal("10"),   # fun in January
        Decimal("54"),   # April 20th through today: 12 + 13 + 14 + 15
        Decimal("0"),    # ended before this month
    ]


@pytest.mark.asyncio
async def test_order_is_kept(store):
    budgets = [make_budget(name=name) for name in ("c", "a", "b")]
    store.budgets = budgets

    result = await get_budgets_with_spending(None, OWNER_ID, NOW)

    assert [b.name for b in result] == ["c", "a", "b"]


@pytest.mark.asyncio
async def test_invalid_budget_does_not_fail_the_batch(store):
    broken = make_budget(start_date=None)
    healthy = make_budget()
    store.budgets = [broken, healthy]
    store.transactions = [make_transaction("-9", on(3))]

    await get_budgets_with_spending(None, OWNER_ID, NOW)

    assert broken.spent_amount == Decimal("0")
    assert broken.remaining_amount == Decimal("200")
    assert healthy.spent_amount == Decimal("9")


@pytest.mark.asyncio
async def test_no_budgets_no_transaction_query(store):
    assert await get_budgets_with_spending(None, OWNER_ID, NOW) == []
    assert store.expense_queries == []


@pytest.mark.asyncio
async def test_only_empty_windows_skip_the_transaction_query(store):
    store.budgets = [make_budget(period=BudgetPeriod.custom, start_date=date(2025, 1, 1))]

    result = await get_budgets_with_spending(None, OWNER_ID, NOW)

    assert result[0].spent_amount == Decimal("0")
    assert store.expense_queries == []


@pytest.mark.asyncio
@pytest.mark.parametrize("fail_on", ["budgets", "transactions"])
async def test_store_errors_propagate(store, fail_on):
    store.budgets = [make_budget()]
    store.fail_on = fail_on

    with pytest.raises(RuntimeError):
        await get_budgets_with_spending(None, OWNER_ID, NOW)


def test_aware_transaction_dates_are_converted_for_a_naive_now():
    naive_now = datetime(2024, 5, 15, 12, 0)
    plus_five = timezone(timedelta(hours=5))
    # The same instant written in two zones must land on the same wall time
    first = _as_comparable(datetime(2024, 5, 10, 3, 0, tzinfo=plus_five), naive_now)
    second = _as_comparable(datetime(2024, 5, 9, 22, 0, tzinfo=UTC), naive_now)

    assert first.tzinfo is None
    assert first == second
