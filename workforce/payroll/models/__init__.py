# Load all models into the payroll.models namespace
from .mixins import TimeStampedModel

from .worker import Worker
from .wage_history import WageHistory
from .attendance import AttendanceRecord
from .advance import Advance, SHORTFALL_REASON_PREFIX
from .expense import Expense, ExpenseType
from .salary import SalaryCycle, SalaryPayment

__all__ = [
    "TimeStampedModel",
    "Worker", "WageHistory",
    "AttendanceRecord",
    "Advance", "SHORTFALL_REASON_PREFIX",
    "Expense", "ExpenseType",
    "SalaryCycle", "SalaryPayment",
]
