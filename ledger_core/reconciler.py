"""Balance reconciliation: the only code that moves wallet and savings."""

from __future__ import annotations

import logging
from typing import Tuple

from .exceptions import InsufficientFundsError, InvalidAmountError
from .models import Entry, ExpenseEntry, IncomeEntry, PeriodLedger

logger = logging.getLogger(__name__)


class BalanceReconciler:
    """Applies and reverts the wallet/savings effect of entries in one primary currency.

    Effects are computed from an entry's own field values, so reverting the
    stored entry before an edit and applying the edited one afterwards always
    nets to the effect of the entries currently in the ledger.
    """

    def __init__(self, primary_currency: str) -> None:
        self._primary = primary_currency.strip().upper()

    @property
    def primary_currency(self) -> str:
        return self._primary

    def effect_of(self, entry: Entry) -> Tuple[int, int]:
        """Return the ``(wallet, savings)`` delta an entry contributes."""
        if entry.amount.currency != self._primary:
            return 0, 0
        if isinstance(entry, IncomeEntry):
            return entry.amount.amount, 0
        if isinstance(entry, ExpenseEntry):
            if entry.method == "wallet":
                return -entry.amount.amount, 0
            if entry.method == "bank":
                return 0, -entry.amount.amount
        # Lending only feeds exposure reporting.
        return 0, 0

    def apply_effect(self, ledger: PeriodLedger, entry: Entry) -> None:
        wallet, savings = self.effect_of(entry)
        ledger.wallet += wallet
        ledger.savings += savings

    def revert_effect(self, ledger: PeriodLedger, entry: Entry) -> None:
        wallet, savings = self.effect_of(entry)
        ledger.wallet -= wallet
        ledger.savings -= savings

    def transfer_wallet_to_savings(self, ledger: PeriodLedger, amount: int) -> None:
        if amount <= 0 or amount > ledger.wallet:
            logger.warning(
                "Rejected wallet transfer of %d in %s (wallet holds %d)",
                amount,
                ledger.period_key,
                ledger.wallet,
            )
            raise InsufficientFundsError(
                "Transfer amount must be positive and no more than the wallet balance"
            )
        ledger.wallet -= amount
        ledger.savings += amount

    def credit_savings_directly(self, ledger: PeriodLedger, amount: int) -> None:
        """Add to savings without touching the wallet (money from outside the wallet)."""
        if amount <= 0:
            raise InvalidAmountError("Savings credit must be greater than zero")
        ledger.savings += amount
