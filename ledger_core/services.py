"""Framework-agnostic business services for the budget ledger."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from .aggregator import Dashboard, build_dashboard
from .exceptions import CurrencyMismatchError, EntryNotFoundError, ValidationError
from .models import ENTRY_KINDS, Entry, ExpenseEntry, IncomeEntry, LendingEntry, PeriodLedger
from .money import Money, parse_decimal
from .reconciler import BalanceReconciler
from .store import LedgerStore
from .validators import (
    EXPENSE_METHODS,
    LENDING_DIRECTIONS,
    LENDING_STATUSES,
    NAME_MAX_LENGTH,
    NOTES_MAX_LENGTH,
    STATUS_ALIASES,
    parse_amount,
    validate_currency,
    validate_date,
    validate_enum,
    validate_optional_str,
    validate_required_str,
)

logger = logging.getLogger(__name__)

KIND_ALIASES = {
    "income": "income",
    "incomes": "income",
    "expense": "expense",
    "expenses": "expense",
    "lending": "lending",
    "lendings": "lending",
}


def normalize_kind(kind: object) -> str:
    if not isinstance(kind, str) or kind.strip().lower() not in KIND_ALIASES:
        raise ValidationError(f"kind must be one of: {', '.join(ENTRY_KINDS)}")
    return KIND_ALIASES[kind.strip().lower()]


class LedgerService:
    """Single pathway for creating, editing and deleting entries and moving money.

    Every mutating call validates first, then changes balances through the
    reconciler, then saves the whole period before returning.
    """

    def __init__(self, store: LedgerStore, reconciler: BalanceReconciler) -> None:
        self._store = store
        self._reconciler = reconciler
        self._builders: Dict[str, Callable[..., Entry]] = {
            "income": self._build_income,
            "expense": self._build_expense,
            "lending": self._build_lending,
        }

    @property
    def primary_currency(self) -> str:
        return self._reconciler.primary_currency

    # Public API -----------------------------------------------------------
    def add_income(self, period_key: str, payload: Dict[str, object]) -> IncomeEntry:
        return self.add_entry(period_key, "income", payload)  # type: ignore[return-value]

    def add_expense(self, period_key: str, payload: Dict[str, object]) -> ExpenseEntry:
        return self.add_entry(period_key, "expense", payload)  # type: ignore[return-value]

    def add_lending(self, period_key: str, payload: Dict[str, object]) -> LendingEntry:
        return self.add_entry(period_key, "lending", payload)  # type: ignore[return-value]

    def add_entry(self, period_key: str, kind: str, payload: Dict[str, object]) -> Entry:
        kind = normalize_kind(kind)
        entry = self._builders[kind](payload)
        ledger = self._load(period_key)
        ledger.entries(kind).append(entry)
        self._reconciler.apply_effect(ledger, entry)
        self._store.save(ledger)
        logger.info("Added %s %s to %s", kind, entry.id, ledger.period_key)
        return entry

    def update_entry(
        self, period_key: str, kind: str, entry_id: str, changes: Dict[str, object]
    ) -> Entry:
        kind = normalize_kind(kind)
        ledger = self._load(period_key)
        entries = ledger.entries(kind)
        index = self._index_or_raise(entries, kind, entry_id)
        existing = entries[index]
        # Merge existing serialised data with incoming changes to support partial updates.
        merged_payload = {**existing.to_dict(), **changes}
        updated = self._builders[kind](merged_payload, current=existing)

        self._reconciler.revert_effect(ledger, existing)
        entries[index] = updated
        self._reconciler.apply_effect(ledger, updated)
        self._store.save(ledger)
        logger.info("Updated %s %s in %s", kind, entry_id, ledger.period_key)
        return updated

    def delete_entry(self, period_key: str, kind: str, entry_id: str) -> None:
        kind = normalize_kind(kind)
        ledger = self._load(period_key)
        entries = ledger.entries(kind)
        index = self._index_or_raise(entries, kind, entry_id)
        self._reconciler.revert_effect(ledger, entries[index])
        del entries[index]
        self._store.save(ledger)
        logger.info("Deleted %s %s from %s", kind, entry_id, ledger.period_key)

    def get_entry(self, period_key: str, kind: str, entry_id: str) -> Entry:
        """Return an entry or raise if it does not exist."""
        kind = normalize_kind(kind)
        entries = self._load(period_key).entries(kind)
        return entries[self._index_or_raise(entries, kind, entry_id)]

    def list_entries(self, period_key: str, kind: str) -> List[Entry]:
        kind = normalize_kind(kind)
        return list(self._load(period_key).entries(kind))

    def entry_id_at(self, period_key: str, kind: str, index: int) -> str:
        """Resolve a zero-based position in insertion order to an entry id."""
        entries = self.list_entries(period_key, kind)
        if not 0 <= index < len(entries):
            raise EntryNotFoundError(f"No {normalize_kind(kind)} entry at position {index}")
        return entries[index].id

    def transfer_wallet_to_savings(self, period_key: str, amount: object) -> PeriodLedger:
        money = self._primary_amount(amount)
        ledger = self._load(period_key)
        self._reconciler.transfer_wallet_to_savings(ledger, money.amount)
        self._store.save(ledger)
        logger.info("Moved %s from wallet to savings in %s", money, ledger.period_key)
        return ledger

    def credit_savings(self, period_key: str, amount: object) -> PeriodLedger:
        money = self._primary_amount(amount)
        ledger = self._load(period_key)
        self._reconciler.credit_savings_directly(ledger, money.amount)
        self._store.save(ledger)
        logger.info("Credited %s to savings in %s", money, ledger.period_key)
        return ledger

    def clear_period(self, period_key: str) -> None:
        self._store.clear(period_key)

    def ledger(self, period_key: str) -> PeriodLedger:
        return self._load(period_key)

    def dashboard(self, period_key: str) -> Dashboard:
        return build_dashboard(self._load(period_key), self.primary_currency)

    def snapshot(self, period_key: str) -> Dict[str, Any]:
        """Return serialisable snapshot useful for testing or exports."""
        ledger = self._load(period_key)
        return {
            "period": ledger.period_key,
            "primary_currency": self.primary_currency,
            **ledger.to_dict(),
            "dashboard": build_dashboard(ledger, self.primary_currency).to_dict(),
        }

    # Internal helpers -----------------------------------------------------
    def _load(self, period_key: str) -> PeriodLedger:
        ledger = self._store.load(period_key)
        stored = ledger.primary_currency
        if stored != self.primary_currency:
            if stored is not None and not ledger.is_empty:
                raise CurrencyMismatchError(
                    f"Balances for {ledger.period_key} are kept in {stored}, "
                    f"not {self.primary_currency}"
                )
            ledger.primary_currency = self.primary_currency
        return ledger

    @staticmethod
    def _index_or_raise(entries: List[Any], kind: str, entry_id: str) -> int:
        for index, entry in enumerate(entries):
            if entry.id == entry_id:
                return index
        raise EntryNotFoundError(f"{kind.capitalize()} {entry_id} not found")

    def _primary_amount(self, raw: object) -> Money:
        # The reconciler rejects non-positive amounts.
        return parse_decimal(raw, self.primary_currency)

    @staticmethod
    def _amount(payload: Dict[str, object]) -> Money:
        currency = validate_currency(payload.get("currency"))
        return parse_amount(payload.get("amount"), currency)

    def _build_income(
        self, payload: Dict[str, object], *, current: Optional[IncomeEntry] = None
    ) -> IncomeEntry:
        return IncomeEntry(
            id=current.id if current else uuid4().hex,
            date=validate_date(payload.get("date")),
            source=validate_required_str(payload.get("source"), "source", NAME_MAX_LENGTH),
            amount=self._amount(payload),
            notes=validate_optional_str(payload.get("notes"), "notes", NOTES_MAX_LENGTH),
        )

    def _build_expense(
        self, payload: Dict[str, object], *, current: Optional[ExpenseEntry] = None
    ) -> ExpenseEntry:
        return ExpenseEntry(
            id=current.id if current else uuid4().hex,
            date=validate_date(payload.get("date")),
            category=validate_required_str(payload.get("category"), "category", NAME_MAX_LENGTH),
            amount=self._amount(payload),
            method=validate_enum(payload.get("method"), "method", EXPENSE_METHODS),
            notes=validate_optional_str(payload.get("notes"), "notes", NOTES_MAX_LENGTH),
        )

    def _build_lending(
        self, payload: Dict[str, object], *, current: Optional[LendingEntry] = None
    ) -> LendingEntry:
        return LendingEntry(
            id=current.id if current else uuid4().hex,
            date=validate_date(payload.get("date")),
            counterparty=validate_required_str(
                payload.get("counterparty"), "counterparty", NAME_MAX_LENGTH
            ),
            amount=self._amount(payload),
            direction=validate_enum(payload.get("direction"), "direction", LENDING_DIRECTIONS),
            status=validate_enum(
                payload.get("status") or "pending",
                "status",
                LENDING_STATUSES,
                aliases=STATUS_ALIASES,
            ),
            reason=validate_optional_str(payload.get("reason"), "reason", NOTES_MAX_LENGTH),
        )
