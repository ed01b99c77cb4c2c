# finance_app/api/v1/api.py
from fastapi import APIRouter

from finance_app.api.v1.endpoints import bank_accounts
from finance_app.api.v1.endpoints import budgets
from finance_app.api.v1.endpoints import categories
from finance_app.api.v1.endpoints import recurring_transactions
from finance_app.api.v1.endpoints import savings_goals
from finance_app.api.v1.endpoints import transactions

api_router = APIRouter()

api_router.include_router(budgets.router, prefix="/budgets", tags=["Budgets"])
api_router.include_router(categories.router, prefix="/categories", tags=["Categories"])
api_router.include_router(transactions.router, prefix="/transactions", tags=["Transactions"])
api_router.include_router(bank_accounts.router, prefix="/bank-accounts", tags=["Bank accounts"])
api_router.include_router(recurring_transactions.router, prefix="/recurring-transactions", tags=["Recurring transactions"])
api_router.include_router(savings_goals.router, prefix="/savings-goals", tags=["Savings goals"])
