"""Plain-text monthly statement: dashboard figures followed by the three entry lists."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from .aggregator import build_dashboard, totals_to_display_string
from .exceptions import PersistenceError
from .models import ExpenseEntry, IncomeEntry, LendingEntry, PeriodLedger
from .money import format_money, to_decimal_string
from .periods import label

DEFAULT_LINES_PER_PAGE = 60
PAGE_BREAK = "\f"


def income_line(entry: IncomeEntry) -> str:
    return " | ".join(
        [
            entry.date.isoformat(),
            entry.source,
            f"{to_decimal_string(entry.amount)} {entry.amount.currency}",
            entry.notes or "-",
        ]
    )


def expense_line(entry: ExpenseEntry) -> str:
    return " | ".join(
        [
            entry.date.isoformat(),
            entry.category,
            f"{to_decimal_string(entry.amount)} {entry.amount.currency}",
            entry.method,
            entry.notes or "-",
        ]
    )


def lending_line(entry: LendingEntry) -> str:
    return " | ".join(
        [
            entry.date.isoformat(),
            entry.counterparty,
            f"{to_decimal_string(entry.amount)} {entry.amount.currency}",
            entry.direction,
            entry.status,
            entry.reason or "-",
        ]
    )


def statement_lines(ledger: PeriodLedger, primary_currency: str) -> List[str]:
    dashboard = build_dashboard(ledger, primary_currency)
    lines = [
        f"Personal Budget Statement - {label(ledger.period_key)}",
        "",
        "Dashboard:",
        f"  Total Income: {totals_to_display_string(dashboard.income_totals)}",
        f"  Total Expenses: {totals_to_display_string(dashboard.expense_totals)}",
        f"  Total Savings: {totals_to_display_string(dashboard.savings_totals)}",
        f"  Wallet: {format_money(dashboard.wallet)}",
        f"  Savings: {format_money(dashboard.savings)}",
        f"  To receive: {totals_to_display_string(dashboard.exposure.to_receive)}",
        f"  To pay back: {totals_to_display_string(dashboard.exposure.to_pay_back)}",
    ]
    lines.extend(_section("Income", (income_line(e) for e in ledger.income)))
    lines.extend(_section("Expenses", (expense_line(e) for e in ledger.expenses)))
    lines.extend(_section("Lending & Borrowing", (lending_line(e) for e in ledger.lending)))
    return lines


def render_statement(
    ledger: PeriodLedger,
    primary_currency: str,
    lines_per_page: int = DEFAULT_LINES_PER_PAGE,
) -> List[str]:
    """Return the statement split into pages of at most ``lines_per_page`` lines."""
    if lines_per_page < 1:
        raise ValueError("lines_per_page must be at least 1")
    lines = statement_lines(ledger, primary_currency)
    return [
        "\n".join(lines[start : start + lines_per_page])
        for start in range(0, len(lines), lines_per_page)
    ]


def statement_filename(period_key: str) -> str:
    return f"Budget_{period_key}.txt"


def write_statement(pages: List[str], path: Path) -> Path:
    try:
        path.write_text((PAGE_BREAK + "\n").join(pages) + "\n", encoding="utf-8")
    except OSError as exc:
        raise PersistenceError(f"Unable to write statement to {path}") from exc
    return path


def _section(title: str, rows: Iterable[str]) -> List[str]:
    body = [f"  {row}" for row in rows]
    return ["", f"{title}:"] + (body or ["  (none)"])
