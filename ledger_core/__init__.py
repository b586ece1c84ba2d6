"""Core business logic package for the budget ledger."""

from .aggregator import (
    Dashboard,
    LendingExposure,
    build_dashboard,
    derived_savings_by_currency,
    lending_exposure,
    totals_by_currency,
)
from .exceptions import (
    CurrencyMismatchError,
    EntryNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    PersistenceError,
    ValidationError,
)
from .models import ExpenseEntry, IncomeEntry, LendingEntry, PeriodLedger
from .money import Money, format_money, parse_decimal, to_decimal_string
from .periods import current_period_key, label, period_key_of
from .reconciler import BalanceReconciler
from .services import LedgerService
from .storage import JSONStorage, MemoryStorage
from .store import LedgerStore

__all__ = [
    "BalanceReconciler",
    "CurrencyMismatchError",
    "Dashboard",
    "EntryNotFoundError",
    "ExpenseEntry",
    "IncomeEntry",
    "InsufficientFundsError",
    "InvalidAmountError",
    "JSONStorage",
    "LedgerService",
    "LedgerStore",
    "LendingEntry",
    "LendingExposure",
    "MemoryStorage",
    "Money",
    "PeriodLedger",
    "PersistenceError",
    "ValidationError",
    "build_dashboard",
    "current_period_key",
    "derived_savings_by_currency",
    "format_money",
    "label",
    "lending_exposure",
    "parse_decimal",
    "period_key_of",
    "to_decimal_string",
    "totals_by_currency",
]
