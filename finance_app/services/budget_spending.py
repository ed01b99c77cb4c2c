# finance_app/services/budget_spending.py
"""
Spent-amount computation for budgets.

Every read recomputes spending from the stored transactions:

1. each budget gets its effective window as of ``now`` (``resolve_window``),
2. the union of all windows is fetched in one query
   (``fetch_candidate_transactions``),
3. each budget sums its own share of that shared set in memory
   (``compute_spent``).

A call performs exactly two store reads (budgets, then candidate
transactions), whatever the number of budgets.
"""
import calendar
import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from finance_app import crud
from finance_app.db.models.budget import BudgetPeriod

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class BudgetWindow:
    """Closed interval [start, end] of instants a budget counts spending in."""
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


# --- Date helpers ---

def _coerce_date(value: Any) -> Optional[date]:
    """date, datetime or ISO-8601 string to a date; None for anything unusable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _start_of_day(day: date, now: datetime) -> datetime:
    return datetime.combine(day, time.min, tzinfo=now.tzinfo)


def _end_of_day(day: date, now: datetime) -> datetime:
    return datetime.combine(day, time.max, tzinfo=now.tzinfo)


def _as_comparable(moment: datetime, now: datetime) -> datetime:
    # Naive timestamps are read as wall time in now's zone; a naive now is local time
    if moment.tzinfo is None and now.tzinfo is not None:
        return moment.replace(tzinfo=now.tzinfo)
    if moment.tzinfo is not None and now.tzinfo is None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


def _period_range(period: BudgetPeriod, start_date: date, end_date: Optional[date], now: datetime):
    today = now.date()
    if period == BudgetPeriod.monthly:
        last_day = calendar.monthrange(today.year, today.month)[1]
        return (
            _start_of_day(today.replace(day=1), now),
            _end_of_day(today.replace(day=last_day), now),
        )
    if period == BudgetPeriod.weekly:
        monday = today - timedelta(days=today.weekday())
        return _start_of_day(monday, now), _end_of_day(monday + timedelta(days=6), now)
    if period == BudgetPeriod.yearly:
        return (
            _start_of_day(date(today.year, 1, 1), now),
            _end_of_day(date(today.year, 12, 31), now),
        )
    # custom: the budget's own dates, still open budgets stop at now
    period_end = _start_of_day(end_date, now) if end_date is not None else now
    return _start_of_day(start_date, now), period_end


# --- Stage 1: window resolution ---

def resolve_window(budget: Any, now: datetime) -> Optional[BudgetWindow]:
    """
    Effective spending window of a budget as of ``now``, or None when the
    budget cannot count anything (missing/invalid start date, empty window).

    Monthly, weekly and yearly budgets always look at the current calendar
    period, clipped to the budget's own start and end dates. Custom budgets use
    their own dates, ending at ``now`` while they have no end date. The end is
    pushed to the last instant of its calendar day.
    """
    start_date = _coerce_date(getattr(budget, "start_date", None))
    if start_date is None:
        return None
    end_date = _coerce_date(getattr(budget, "end_date", None))

    try:
        period = BudgetPeriod(budget.period)
    except ValueError:
        logger.warning("Budget %s has unknown period %r, no spending counted",
                       getattr(budget, "id", None), budget.period)
        return None

    period_start, period_end = _period_range(period, start_date, end_date, now)

    effective_start = max(period_start, _start_of_day(start_date, now))
    effective_end = period_end
    if end_date is not None:
        effective_end = min(period_end, _start_of_day(end_date, now))
    effective_end = _end_of_day(effective_end.date(), now)

    if effective_start > effective_end:
        return None
    return BudgetWindow(start=effective_start, end=effective_end)


# --- Stage 2: shared fetch ---

async def fetch_candidate_transactions(
    db: AsyncSession,
    owner_user_id: uuid.UUID,
    windows: Iterable[Optional[BudgetWindow]],
) -> list:
    """
    One query for every expense any of the windows could count.
    No query at all when there is no usable window.
    """
    usable = [window for window in windows if window is not None]
    if not usable:
        return []

    min_start = min(window.start for window in usable)
    max_end = max(window.end for window in usable)
    return await crud.crud_transaction.get_expenses_in_range(
        db, owner_user_id=owner_user_id, start=min_start, end=max_end
    )


# --- Stage 3: per budget aggregation ---

def compute_spent(budget: Any, window: Optional[BudgetWindow], candidates: Sequence[Any]) -> Decimal:
    """
    Sum of |amount| over the candidates inside ``window`` and the budget's
    category scope. A budget without category counts every category.
    """
    if window is None:
        return ZERO

    category_id = getattr(budget, "category_id", None)
    total = ZERO
    for transaction in candidates:
        amount = Decimal(transaction.amount)
        if amount >= 0:
            continue
        if category_id is not None and transaction.category_id != category_id:
            continue
        if not window.contains(_as_comparable(transaction.transaction_date, window.end)):
            continue
        total += -amount
    return total


def _enrich(budget: Any, spent: Decimal) -> Any:
    budget.spent_amount = spent
    budget.remaining_amount = Decimal(budget.amount) - spent
    return budget


async def enrich_budgets_with_spending(
    db: AsyncSession,
    owner_user_id: uuid.UUID,
    budgets: List[Any],
    now: datetime,
) -> List[Any]:
    """Attach spent_amount/remaining_amount to already loaded budgets, order kept."""
    windows = [resolve_window(budget, now) for budget in budgets]
    candidates = await fetch_candidate_transactions(db, owner_user_id, windows)
    for budget, window in zip(budgets, windows):
        _enrich(budget, compute_spent(budget, window, candidates))
    return budgets


async def get_budgets_with_spending(
    db: AsyncSession,
    owner_user_id: uuid.UUID,
    now: datetime,
) -> List[Any]:
    """
    Every budget of the user, in load order, with spent_amount and
    remaining_amount computed as of ``now``.

    Store errors are not caught here; a failing read fails the whole call.
    """
    budgets = await crud.crud_budget.get_budgets_by_owner(db, owner_user_id=owner_user_id)
    if not budgets:
        return []

    await enrich_budgets_with_spending(db, owner_user_id, budgets, now)
    logger.debug("Computed spending for %d budgets of user %s", len(budgets), owner_user_id)
    return budgets
