import json
from datetime import date

import pytest

from ledger_core.exceptions import PersistenceError, ValidationError
from ledger_core.models import IncomeEntry, PeriodLedger
from ledger_core.money import Money
from ledger_core.storage import JSONStorage, MemoryStorage
from ledger_core.store import LedgerStore


def _sample_ledger(period_key="2025-03"):
    ledger = PeriodLedger(
        period_key=period_key, wallet=100000, savings=2500, primary_currency="KWD"
    )
    ledger.income.append(
        IncomeEntry(id="a1", date=date(2025, 3, 1), source="Salary", amount=Money(100000, "KWD"))
    )
    return ledger


class TestJSONStorage:
    def test_missing_key_returns_none(self, json_storage):
        assert json_storage.get("budget-2025-03") is None

    def test_set_get_remove(self, json_storage):
        json_storage.set("budget-2025-03", '{"wallet": 1}')
        assert json_storage.get("budget-2025-03") == '{"wallet": 1}'
        assert (json_storage.base_path / "budget-2025-03.json").exists()
        assert not (json_storage.base_path / "budget-2025-03.json.tmp").exists()

        json_storage.remove("budget-2025-03")
        assert json_storage.get("budget-2025-03") is None

    def test_remove_missing_key_is_silent(self, json_storage):
        json_storage.remove("budget-1999-01")

    @pytest.mark.parametrize("key", ["", "../escape", ".hidden", "a/b"])
    def test_rejects_unsafe_keys(self, json_storage, key):
        with pytest.raises(PersistenceError):
            json_storage.set(key, "{}")

    def test_undecodable_bytes_raise_persistence_error(self, json_storage):
        (json_storage.base_path / "budget-2025-03.json").write_bytes(b"\xff\xfe{}")
        with pytest.raises(PersistenceError):
            json_storage.get("budget-2025-03")
        with pytest.raises(PersistenceError):
            LedgerStore(json_storage).load("2025-03")


class TestLedgerStore:
    def test_load_unknown_period_is_empty(self, store):
        ledger = store.load("2025-03")
        assert ledger.period_key == "2025-03"
        assert ledger.is_empty
        assert (ledger.wallet, ledger.savings) == (0, 0)

    def test_load_rejects_malformed_period(self, store):
        with pytest.raises(ValidationError):
            store.load("March")

    def test_save_writes_snapshot_shape(self, memory_storage):
        store = LedgerStore(memory_storage)
        store.save(_sample_ledger())

        payload = json.loads(memory_storage.get("budget-2025-03"))
        assert set(payload) == {"income", "expenses", "lending", "wallet", "savings", "primary_currency"}
        assert payload["primary_currency"] == "KWD"
        assert payload["wallet"] == 100000
        assert payload["savings"] == 2500
        assert payload["income"][0] == {
            "id": "a1",
            "date": "2025-03-01",
            "source": "Salary",
            "amount": "100.000",
            "currency": "KWD",
            "notes": "",
        }

    def test_saved_ledger_survives_restart(self, json_storage):
        LedgerStore(json_storage).save(_sample_ledger())

        reloaded = LedgerStore(JSONStorage(json_storage.base_path)).load("2025-03")
        assert reloaded == _sample_ledger()

    def test_periods_are_isolated(self, store):
        store.save(_sample_ledger("2025-03"))
        assert store.load("2025-04").is_empty

    def test_clear_removes_data(self, memory_storage):
        store = LedgerStore(memory_storage)
        store.save(_sample_ledger())
        store.clear("2025-03")

        assert "budget-2025-03" not in memory_storage
        assert store.load("2025-03").is_empty

    def test_corrupted_snapshot_raises(self):
        store = LedgerStore(MemoryStorage({"budget-2025-03": "{not json"}))
        with pytest.raises(PersistenceError):
            store.load("2025-03")

    def test_malformed_snapshot_raises(self):
        store = LedgerStore(MemoryStorage({"budget-2025-03": '{"income": [{"id": "x"}]}'}))
        with pytest.raises(PersistenceError):
            store.load("2025-03")

    def test_failed_save_drops_cached_copy(self, memory_storage):
        store = LedgerStore(memory_storage)
        store.save(_sample_ledger())

        class FailingStorage(MemoryStorage):
            def set(self, key, value):
                raise PersistenceError("disk full")

        failing = LedgerStore(FailingStorage({"budget-2025-03": memory_storage.get("budget-2025-03")}))
        cached = failing.load("2025-03")
        cached.wallet = 1
        with pytest.raises(PersistenceError):
            failing.save(cached)

        assert failing.load("2025-03").wallet == 100000
