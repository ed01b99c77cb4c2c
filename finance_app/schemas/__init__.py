# finance_app/schemas/__init__.py
from .user import User, UserCreate, UserUpdate
from .category import Category, CategoryCreate, CategoryUpdate, CategoryDisplay
from .bank_account import BankAccount, BankAccountCreate, BankAccountUpdate
from .budget import Budget, BudgetCreate, BudgetUpdate
from .transaction import (
    Transaction,
    TransactionCreate,
    TransactionUpdate,
    TransactionListResponse,
)
from .recurring_transaction import (
    RecurringTransaction,
    RecurringTransactionCreate,
    RecurringTransactionUpdate,
)
from .savings_goal import SavingsGoal, SavingsGoalCreate, SavingsGoalUpdate, SavingsGoalContribution
