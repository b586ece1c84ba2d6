"""Console interface for the budget ledger."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from ledger_core.aggregator import Dashboard, totals_to_display_string
from ledger_core.exceptions import (
    CurrencyMismatchError,
    EntryNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
    PersistenceError,
    ValidationError,
)
from ledger_core.models import Entry, ExpenseEntry, IncomeEntry
from ledger_core.money import format_money, parse_decimal
from ledger_core.periods import current_period_key, label, validate_period_key
from ledger_core.services import LedgerService
from ledger_core.settings import Settings, build_service
from ledger_core.statement import render_statement, statement_filename, write_statement


def _parse_date(value: str) -> str:
    try:
        date.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"Invalid date '{value}'. Expected format YYYY-MM-DD."
        ) from exc
    return value


def _parse_amount(value: str) -> str:
    try:
        money = parse_decimal(value, "XXX")
    except InvalidAmountError as exc:
        raise argparse.ArgumentTypeError("Amount must be a decimal number, e.g. 1.250") from exc
    if money.amount <= 0:
        raise argparse.ArgumentTypeError("Amount must be greater than zero")
    return value


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"'{value}' is not a whole number") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("Value must be at least 1")
    return number


def _parse_period(value: str) -> str:
    try:
        return validate_period_key(value)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _format_entry(position: int, entry: Entry) -> str:
    data = entry.to_dict()
    head = f"#{position} [{data['id']}] {data['date']} {format_money(entry.amount)}"
    if isinstance(entry, IncomeEntry):
        return f"{head}\n  Source: {data['source']}\n  Notes: {data['notes'] or '-'}\n"
    if isinstance(entry, ExpenseEntry):
        return (
            f"{head}\n  Category: {data['category']} | Method: {data['method']}\n"
            f"  Notes: {data['notes'] or '-'}\n"
        )
    return (
        f"{head}\n  Counterparty: {data['counterparty']} | {data['direction']} | {data['status']}\n"
        f"  Reason: {data['reason'] or '-'}\n"
    )


def _format_dashboard(dashboard: Dashboard) -> str:
    return "\n".join(
        [
            f"Total income:   {totals_to_display_string(dashboard.income_totals)}",
            f"Total expenses: {totals_to_display_string(dashboard.expense_totals)}",
            f"Total savings:  {totals_to_display_string(dashboard.savings_totals)}",
            f"Wallet:         {format_money(dashboard.wallet)}",
            f"Savings:        {format_money(dashboard.savings)}",
            f"To receive:     {totals_to_display_string(dashboard.exposure.to_receive)}",
            f"To pay back:    {totals_to_display_string(dashboard.exposure.to_pay_back)}",
        ]
    )


def _resolve_ref(service: LedgerService, period: str, kind: str, ref: str) -> str:
    """Accept either an entry id or its 1-based position in the listing."""
    if ref.isdigit() and len(ref) < 32:
        try:
            return service.entry_id_at(period, kind, int(ref) - 1)
        except EntryNotFoundError as exc:
            raise EntryNotFoundError(f"No {kind} entry #{ref}") from exc
    return ref


def _position(service: LedgerService, period: str, kind: str, entry_id: str) -> int:
    ids = [entry.id for entry in service.list_entries(period, kind)]
    return ids.index(entry_id) + 1


def _drop_none(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


def _entry_fields(kind: str, args: argparse.Namespace) -> Dict[str, Any]:
    fields: Dict[str, Any] = {
        "amount": args.amount,
        "currency": args.currency,
        "date": args.date,
    }
    if kind == "income":
        fields.update(source=args.source, notes=args.notes)
    elif kind == "expense":
        fields.update(category=args.category, method=args.method, notes=args.notes)
    else:
        fields.update(
            counterparty=args.counterparty,
            direction=args.direction,
            status=args.status,
            reason=args.reason,
        )
    return fields


def handle_entries(args: argparse.Namespace, service: LedgerService) -> None:
    kind = args.entity
    if args.command == "add":
        entry = service.add_entry(args.period, kind, _drop_none(_entry_fields(kind, args)))
        position = _position(service, args.period, kind, entry.id)
        print(f"{kind.capitalize()} added:\n" + _format_entry(position, entry))
    elif args.command == "list":
        entries = service.list_entries(args.period, kind)
        if not entries:
            print(f"No {kind} entries for {label(args.period)}.")
            return
        print(f"Found {len(entries)} {kind} entries for {label(args.period)}:")
        for position, entry in enumerate(entries, start=1):
            print(_format_entry(position, entry))
    elif args.command == "edit":
        entry_id = _resolve_ref(service, args.period, kind, args.ref)
        changes = _drop_none(_entry_fields(kind, args))
        if not changes:
            raise ValidationError("Nothing to change; pass at least one field option")
        entry = service.update_entry(args.period, kind, entry_id, changes)
        position = _position(service, args.period, kind, entry.id)
        print(f"{kind.capitalize()} updated:\n" + _format_entry(position, entry))
    elif args.command == "delete":
        entry_id = _resolve_ref(service, args.period, kind, args.ref)
        service.delete_entry(args.period, kind, entry_id)
        print(f"{kind.capitalize()} {entry_id} deleted.")


def handle_transfer(args: argparse.Namespace, service: LedgerService) -> None:
    if args.command == "to-savings":
        ledger = service.transfer_wallet_to_savings(args.period, args.amount)
    else:
        ledger = service.credit_savings(args.period, args.amount)
    dashboard = service.dashboard(ledger.period_key)
    print(f"Wallet: {format_money(dashboard.wallet)} | Savings: {format_money(dashboard.savings)}")


def handle_summary(args: argparse.Namespace, service: LedgerService) -> None:
    print(f"Summary for {label(args.period)}")
    print(_format_dashboard(service.dashboard(args.period)))


def handle_clear(args: argparse.Namespace, service: LedgerService) -> None:
    if not args.yes:
        raise ValidationError("Refusing to clear the period without --yes")
    service.clear_period(args.period)
    print(f"All data for {label(args.period)} cleared.")


def handle_export(args: argparse.Namespace, service: LedgerService) -> None:
    pages = render_statement(
        service.ledger(args.period), service.primary_currency, args.lines_per_page
    )
    output = args.output or Path(statement_filename(args.period))
    write_statement(pages, output)
    print(f"Statement written to {output} ({len(pages)} page(s)).")


def _add_entry_fields(parser: argparse.ArgumentParser, kind: str, *, required: bool) -> None:
    """Register the per-kind fields; positionals on add, options on edit."""

    def add(name: str, **kwargs: Any) -> None:
        if required:
            parser.add_argument(name, **kwargs)
        else:
            parser.add_argument(f"--{name.replace('_', '-')}", dest=name, **kwargs)

    add("amount", type=_parse_amount)
    add("currency")
    if kind == "income":
        add("source")
    elif kind == "expense":
        add("category")
        add("method", choices=["wallet", "bank"])
    else:
        add("counterparty")
        add("direction", choices=["lend", "borrow"])
    add("date", type=_parse_date)

    if kind == "lending":
        parser.add_argument(
            "--status",
            choices=["pending", "settled"],
            default="pending" if required else None,
        )
        parser.add_argument("--reason")
    else:
        parser.add_argument("--notes")


def build_parser(settings: Optional[Settings] = None) -> argparse.ArgumentParser:
    settings = settings or Settings.from_env()
    parser = argparse.ArgumentParser(description="Household budget ledger")
    parser.add_argument(
        "--data-dir",
        default=settings.data_dir,
        type=Path,
        help=f"Directory to store JSON data (default: {settings.data_dir})",
    )
    parser.add_argument(
        "--period",
        default=current_period_key(),
        type=_parse_period,
        help="Month to work on, YYYY-MM (default: current month)",
    )
    parser.add_argument(
        "--primary-currency",
        default=settings.primary_currency,
        help=f"Currency of wallet and savings (default: {settings.primary_currency})",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    subparsers = parser.add_subparsers(dest="entity", required=True)

    for kind, help_text in (
        ("income", "Manage income"),
        ("expense", "Manage expenses"),
        ("lending", "Manage lending and borrowing"),
    ):
        entity_parser = subparsers.add_parser(kind, help=help_text)
        entity_sub = entity_parser.add_subparsers(dest="command", required=True)

        add_parser = entity_sub.add_parser("add", help=f"Add a new {kind} entry")
        _add_entry_fields(add_parser, kind, required=True)

        entity_sub.add_parser("list", help=f"List {kind} entries")

        edit_parser = entity_sub.add_parser("edit", help=f"Edit a {kind} entry")
        edit_parser.add_argument("ref", help="Entry id or position from the listing")
        _add_entry_fields(edit_parser, kind, required=False)

        delete_parser = entity_sub.add_parser("delete", help=f"Delete a {kind} entry")
        delete_parser.add_argument("ref", help="Entry id or position from the listing")

    transfer_parser = subparsers.add_parser("transfer", help="Move money into savings")
    transfer_sub = transfer_parser.add_subparsers(dest="command", required=True)
    to_savings = transfer_sub.add_parser("to-savings", help="Move money from wallet to savings")
    to_savings.add_argument("amount")
    credit = transfer_sub.add_parser(
        "credit-savings", help="Add money to savings that did not come from the wallet"
    )
    credit.add_argument("amount")

    subparsers.add_parser("summary", help="Show the dashboard for the period")

    clear_parser = subparsers.add_parser("clear", help="Delete all data for the period")
    clear_parser.add_argument("--yes", action="store_true", help="Confirm the deletion")

    export_parser = subparsers.add_parser("export", help="Write a text statement")
    export_parser.add_argument("--output", type=Path)
    export_parser.add_argument("--lines-per-page", type=_positive_int, default=60)

    return parser


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        service = build_service(args.primary_currency, data_dir=args.data_dir)
        if args.entity in ("income", "expense", "lending"):
            handle_entries(args, service)
        elif args.entity == "transfer":
            handle_transfer(args, service)
        elif args.entity == "summary":
            handle_summary(args, service)
        elif args.entity == "clear":
            handle_clear(args, service)
        elif args.entity == "export":
            handle_export(args, service)
        else:  # pragma: no cover - argparse should prevent this
            parser.error(f"Unknown entity: {args.entity}")
            return 2
    except InvalidAmountError as exc:
        print(f"Invalid amount: {exc}", file=sys.stderr)
        return 1
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        return 1
    except InsufficientFundsError as exc:
        print(f"Insufficient funds: {exc}", file=sys.stderr)
        return 1
    except CurrencyMismatchError as exc:
        print(f"Currency mismatch: {exc}", file=sys.stderr)
        return 1
    except EntryNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
