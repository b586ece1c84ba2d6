"""Shared fixtures for the budget ledger tests."""

from pathlib import Path

import pytest

from ledger_core.reconciler import BalanceReconciler
from ledger_core.services import LedgerService
from ledger_core.storage import JSONStorage, MemoryStorage
from ledger_core.store import LedgerStore

PERIOD = "2025-03"


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def json_storage(tmp_path: Path) -> JSONStorage:
    return JSONStorage(tmp_path / "data")


@pytest.fixture
def reconciler() -> BalanceReconciler:
    return BalanceReconciler("KWD")


@pytest.fixture
def store(memory_storage: MemoryStorage) -> LedgerStore:
    return LedgerStore(memory_storage)


@pytest.fixture
def service(store: LedgerStore, reconciler: BalanceReconciler) -> LedgerService:
    return LedgerService(store, reconciler)


def income(amount="100.000", currency="KWD", **extra):
    return {"date": "2025-03-01", "source": "Salary", "amount": amount, "currency": currency, **extra}


def expense(amount="25.500", currency="KWD", method="wallet", **extra):
    return {
        "date": "2025-03-02",
        "category": "Groceries",
        "amount": amount,
        "currency": currency,
        "method": method,
        **extra,
    }


def lending(amount="10.000", currency="KWD", direction="lend", status="pending", **extra):
    return {
        "date": "2025-03-03",
        "counterparty": "Ali",
        "amount": amount,
        "currency": currency,
        "direction": direction,
        "status": status,
        **extra,
    }
