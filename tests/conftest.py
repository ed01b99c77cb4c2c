import hashlib
import hmac
import os
import time
import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from urllib.parse import urlencode

import pytest

# Required settings must exist before finance_app.core.config is imported
os.environ.setdefault("SESSION_SECRET", "test-session-secret")

from finance_app.db.models.budget import BudgetPeriod  # noqa: E402

TEST_SECRET = os.environ["SESSION_SECRET"]

# Wednesday, in the middle of May 2024
NOW = datetime(2024, 5, 15, 14, 30, tzinfo=timezone.utc)
OWNER_ID = uuid.UUID("11111111-1111-1111-1111-111111111111")
OTHER_OWNER_ID = uuid.UUID("22222222-2222-2222-2222-222222222222")


def make_session_data(secret: str = TEST_SECRET, auth_date: int = None, **claims) -> str:
    """Sign claims the way the auth service does."""
    data = {"auth_date": str(int(time.time()) if auth_date is None else auth_date)}
    data.update({k: str(v) for k, v in claims.items()})
    check_string = "\n".join(f"{k}={v}" for k, v in sorted(data.items()))
    key = hmac.new(b"SessionData", secret.encode(), hashlib.sha256).digest()
    data["hash"] = hmac.new(key, check_string.encode(), hashlib.sha256).hexdigest()
    return urlencode(data)


def make_category(name="Food", **overrides):
    fields = dict(id=uuid.uuid4(), name=name, icon="🍔", color="#ff0000", owner_user_id=OWNER_ID)
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_budget(period=BudgetPeriod.monthly, start_date=date(2024, 2, 15), end_date=None,
                category=None, amount="200.00", **overrides):
    fields = dict(
        id=uuid.uuid4(),
        name="Budget",
        amount=Decimal(amount),
        period=period,
        start_date=start_date,
        end_date=end_date,
        category_id=category.id if category is not None else None,
        category=category,
        owner_user_id=OWNER_ID,
        created_at=datetime(2024, 2, 15, 9, 0, tzinfo=timezone.utc),
        updated_at=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_transaction(amount, when, category=None, owner_user_id=OWNER_ID, **overrides):
    fields = dict(
        id=uuid.uuid4(),
        amount=Decimal(amount),
        description="tx",
        transaction_date=when,
        category_id=category.id if category is not None else None,
        category=category,
        bank_account_id=None,
        owner_user_id=owner_user_id,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


class FakeStore:
    """
    In-memory stand-in for the two reads the spending service performs.
    Counts calls so tests can check the number of queries.
    """

    def __init__(self, budgets=(), transactions=()):
        self.budgets = list(budgets)
        self.transactions = list(transactions)
        self.budget_queries = 0
        self.expense_queries = []
        self.fail_on = None

    async def get_budgets_by_owner(self, db, *, owner_user_id, skip=0, limit=None):
        self.budget_queries += 1
        if self.fail_on == "budgets":
            raise RuntimeError("budget store unavailable")
        return [b for b in self.budgets if b.owner_user_id == owner_user_id]

    async def get_expenses_in_range(self, db, *, owner_user_id, start, end):
        self.expense_queries.append((start, end))
        if self.fail_on == "transactions":
            raise RuntimeError("transaction store unavailable")
        return [
            t for t in self.transactions
            if t.owner_user_id == owner_user_id
            and start <= t.transaction_date <= end
            and t.amount < 0
        ]


@pytest.fixture
def store(monkeypatch):
    from finance_app.crud import crud_budget, crud_transaction

    fake = FakeStore()
    monkeypatch.setattr(crud_budget, "get_budgets_by_owner", fake.get_budgets_by_owner)
    monkeypatch.setattr(crud_transaction, "get_expenses_in_range", fake.get_expenses_in_range)
    return fake


class NullSession:
    """
    AsyncSession stand-in for the crud write paths: keeps what was added,
    fills the column defaults a flush would, never talks to a database.
    """

    def __init__(self):
        self.added = []
        self.deleted = []
        self.flushes = 0

    def add(self, obj):
        if obj not in self.added:
            self.added.append(obj)

    async def flush(self):
        self.flushes += 1
        for obj in self.added:
            if getattr(obj, "id", None) is None:
                obj.id = uuid.uuid4()
            if hasattr(obj, "created_at") and obj.created_at is None:
                obj.created_at = datetime.now(timezone.utc)

    async def refresh(self, obj, attribute_names=None):
        pass

    async def delete(self, obj):
        self.deleted.append(obj)


async def null_db():
    yield NullSession()
