# finance_app/db/models/__init__.py
from .user import User
from .category import Category
from .bank_account import BankAccount
from .budget import Budget, BudgetPeriod
from .transaction import Transaction
from .recurring_transaction import RecurringTransaction, RecurrenceFrequency
from .savings_goal import SavingsGoal
