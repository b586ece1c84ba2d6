"""Data models for the budget ledger domain."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Union

from .money import Money, parse_decimal, to_decimal_string

__all__ = [
    "ENTRY_KINDS",
    "Entry",
    "ExpenseEntry",
    "IncomeEntry",
    "LendingEntry",
    "PeriodLedger",
    "parse_date",
]

ENTRY_KINDS = ("income", "expense", "lending")


def parse_date(value: str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` string, tolerating a trailing time part."""
    value = value.strip()
    if "T" in value:
        value = value.split("T", 1)[0]
    return date.fromisoformat(value)


def _money_fields(amount: Money) -> Dict[str, Any]:
    return {"amount": to_decimal_string(amount), "currency": amount.currency}


def _money_from(data: Dict[str, Any]) -> Money:
    return parse_decimal(str(data["amount"]), data["currency"])


@dataclass(frozen=True)
class IncomeEntry:
    id: str
    date: date
    source: str
    amount: Money
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the income to JSON-friendly natives."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "source": self.source,
            **_money_fields(self.amount),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IncomeEntry":
        return cls(
            id=data["id"],
            date=parse_date(data["date"]),
            source=data["source"],
            amount=_money_from(data),
            notes=data.get("notes") or "",
        )


@dataclass(frozen=True)
class ExpenseEntry:
    id: str
    date: date
    category: str
    amount: Money
    method: str
    notes: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the expense to JSON-friendly natives."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "category": self.category,
            **_money_fields(self.amount),
            "method": self.method,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExpenseEntry":
        return cls(
            id=data["id"],
            date=parse_date(data["date"]),
            category=data["category"],
            amount=_money_from(data),
            method=data["method"],
            notes=data.get("notes") or "",
        )


@dataclass(frozen=True)
class LendingEntry:
    id: str
    date: date
    counterparty: str
    amount: Money
    direction: str
    status: str
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the lending entry to JSON-friendly natives."""
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "counterparty": self.counterparty,
            **_money_fields(self.amount),
            "reason": self.reason,
            "direction": self.direction,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LendingEntry":
        return cls(
            id=data["id"],
            date=parse_date(data["date"]),
            counterparty=data["counterparty"],
            amount=_money_from(data),
            direction=data["direction"],
            status=data["status"],
            reason=data.get("reason") or "",
        )


Entry = Union[IncomeEntry, ExpenseEntry, LendingEntry]


@dataclass
class PeriodLedger:
    """One month of entries plus the wallet and savings balances in subunits.

    Only the balance reconciler changes ``wallet`` and ``savings``.
    ``primary_currency`` names the currency those subunits are counted in.
    """

    period_key: str
    income: List[IncomeEntry] = field(default_factory=list)
    expenses: List[ExpenseEntry] = field(default_factory=list)
    lending: List[LendingEntry] = field(default_factory=list)
    wallet: int = 0
    savings: int = 0
    primary_currency: Optional[str] = None

    def entries(self, kind: str) -> List[Any]:
        if kind == "income":
            return self.income
        if kind == "expense":
            return self.expenses
        if kind == "lending":
            return self.lending
        raise KeyError(kind)

    @property
    def is_empty(self) -> bool:
        return not (self.income or self.expenses or self.lending or self.wallet or self.savings)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "income": [entry.to_dict() for entry in self.income],
            "expenses": [entry.to_dict() for entry in self.expenses],
            "lending": [entry.to_dict() for entry in self.lending],
            "wallet": self.wallet,
            "savings": self.savings,
            "primary_currency": self.primary_currency,
        }

    @classmethod
    def from_dict(cls, period_key: str, data: Dict[str, Any]) -> "PeriodLedger":
        """Hydrate a ledger from a persisted snapshot."""
        return cls(
            period_key=period_key,
            income=[IncomeEntry.from_dict(item) for item in data.get("income", [])],
            expenses=[ExpenseEntry.from_dict(item) for item in data.get("expenses", [])],
            lending=[LendingEntry.from_dict(item) for item in data.get("lending", [])],
            wallet=int(data.get("wallet", 0)),
            savings=int(data.get("savings", 0)),
            primary_currency=data.get("primary_currency"),
        )
