import uuid
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from finance_app import schemas
from finance_app.db.models.budget import BudgetPeriod

from conftest import make_budget, make_category


def test_budget_create_defaults():
    budget = schemas.BudgetCreate(name="Groceries", amount="150.50", start_date="2024-05-01")
    assert budget.period == BudgetPeriod.monthly
    assert budget.amount == Decimal("150.50")
    assert budget.end_date is None
    assert budget.category_id is None


def test_budget_end_date_before_start_date_is_rejected():
    with pytest.raises(ValidationError):
        schemas.BudgetCreate(name="Trip", amount=100, period="custom",
                             start_date=date(2024, 5, 10), end_date=date(2024, 5, 9))


def test_budget_end_date_equal_to_start_date_is_allowed():
    budget = schemas.BudgetCreate(name="Day out", amount=30, period="custom",
                                  start_date=date(2024, 5, 10), end_date=date(2024, 5, 10))
    assert budget.end_date == budget.start_date


@pytest.mark.parametrize("amount", [0, -5, "abc"])
def test_budget_amount_must_be_positive_decimal(amount):
    with pytest.raises(ValidationError):
        schemas.BudgetCreate(name="Bad", amount=amount, start_date=date(2024, 5, 1))


def test_budget_name_is_required():
    with pytest.raises(ValidationError):
        schemas.BudgetCreate(name="", amount=10, start_date=date(2024, 5, 1))


def test_unknown_period_is_rejected():
    with pytest.raises(ValidationError):
        schemas.BudgetCreate(name="Odd", amount=10, period="fortnightly", start_date=date(2024, 5, 1))


@pytest.mark.parametrize("blank", ["", "   ", None])
def test_blank_category_means_all_categories(blank):
    assert schemas.BudgetCreate(name="All", amount=10, category_id=blank).category_id is None
    assert schemas.BudgetUpdate(category_id=blank).category_id is None
    assert schemas.TransactionCreate(amount="-1", description="x", category_id=blank).category_id is None


def test_budget_update_only_keeps_given_fields():
    update = schemas.BudgetUpdate(name="Renamed")
    assert update.model_dump(exclude_unset=True) == {"name": "Renamed"}


def test_budget_response_serializes_money_as_strings():
    food = make_category("Food")
    budget = make_budget(category=food, amount="200.00")
    budget.spent_amount = Decimal("55.00")
    budget.remaining_amount = Decimal("145.00")

    payload = schemas.Budget.model_validate(budget).model_dump(mode="json")

    assert payload["amount"] == "200.00"
    assert payload["spent_amount"] == "55.00"
    assert payload["remaining_amount"] == "145.00"
    assert payload["category"] == {"id": str(food.id), "name": "Food", "icon": "🍔", "color": "#ff0000"}


def test_category_color_must_be_hex():
    assert schemas.CategoryCreate(name="Fun").color == "#ffffff"
    with pytest.raises(ValidationError):
        schemas.CategoryCreate(name="Fun", color="red")


def test_transaction_amount_is_signed():
    expense = schemas.TransactionCreate(amount="-12.34", description="Lunch", category_id=str(uuid.uuid4()))
    income = schemas.TransactionCreate(amount="2000", description="Salary")
    assert expense.amount == Decimal("-12.34")
    assert income.amount > 0
    assert income.transaction_date.tzinfo is not None
