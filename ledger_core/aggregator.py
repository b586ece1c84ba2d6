"""Read-only summaries derived from a period ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping

from .models import Entry, LendingEntry, PeriodLedger
from .money import Money, format_money, to_decimal_string

__all__ = [
    "Dashboard",
    "LendingExposure",
    "build_dashboard",
    "derived_savings_by_currency",
    "lending_exposure",
    "totals_by_currency",
    "totals_to_display_string",
]

EMPTY_DISPLAY = "-"


@dataclass(frozen=True)
class LendingExposure:
    to_receive: Dict[str, Money] = field(default_factory=dict)
    to_pay_back: Dict[str, Money] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {
            "to_receive": _totals_to_dict(self.to_receive),
            "to_pay_back": _totals_to_dict(self.to_pay_back),
        }


@dataclass(frozen=True)
class Dashboard:
    """Flattened figures shown above the entry lists and on the statement."""

    income_totals: Dict[str, Money]
    expense_totals: Dict[str, Money]
    savings_totals: Dict[str, Money]
    wallet: Money
    savings: Money
    exposure: LendingExposure

    def to_dict(self) -> Dict[str, object]:
        return {
            "total_income": _totals_to_dict(self.income_totals),
            "total_expenses": _totals_to_dict(self.expense_totals),
            "total_savings": _totals_to_dict(self.savings_totals),
            "wallet": format_money(self.wallet),
            "savings": format_money(self.savings),
            **self.exposure.to_dict(),
        }


def totals_by_currency(entries: Iterable[Entry]) -> Dict[str, Money]:
    """Sum entry amounts per currency, keyed in the order currencies first appear."""
    totals: Dict[str, Money] = {}
    for entry in entries:
        currency = entry.amount.currency
        totals[currency] = totals.get(currency, Money.zero(currency)) + entry.amount
    return totals


def derived_savings_by_currency(
    income_totals: Mapping[str, Money], expense_totals: Mapping[str, Money]
) -> Dict[str, Money]:
    currencies = list(income_totals)
    currencies.extend(cur for cur in expense_totals if cur not in income_totals)
    return {
        cur: income_totals.get(cur, Money.zero(cur)) - expense_totals.get(cur, Money.zero(cur))
        for cur in currencies
    }


def lending_exposure(entries: Iterable[LendingEntry]) -> LendingExposure:
    pending = [entry for entry in entries if entry.status == "pending"]
    return LendingExposure(
        to_receive=totals_by_currency(e for e in pending if e.direction == "lend"),
        to_pay_back=totals_by_currency(e for e in pending if e.direction == "borrow"),
    )


def totals_to_display_string(totals: Mapping[str, Money]) -> str:
    if not totals:
        return EMPTY_DISPLAY
    return " | ".join(format_money(money) for money in totals.values())


def build_dashboard(ledger: PeriodLedger, primary_currency: str) -> Dashboard:
    income_totals = totals_by_currency(ledger.income)
    expense_totals = totals_by_currency(ledger.expenses)
    return Dashboard(
        income_totals=income_totals,
        expense_totals=expense_totals,
        savings_totals=derived_savings_by_currency(income_totals, expense_totals),
        wallet=Money(ledger.wallet, primary_currency),
        savings=Money(ledger.savings, primary_currency),
        exposure=lending_exposure(ledger.lending),
    )


def _totals_to_dict(totals: Mapping[str, Money]) -> Dict[str, str]:
    return {cur: to_decimal_string(money) for cur, money in totals.items()}
