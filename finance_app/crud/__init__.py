# finance_app/crud/__init__.py
from . import crud_user
from . import crud_category
from . import crud_bank_account
from . import crud_budget
from . import crud_transaction
from . import crud_recurring_transaction
from . import crud_savings_goal
