from datetime import date

import pytest

from ledger_core.exceptions import InsufficientFundsError, InvalidAmountError
from ledger_core.models import ExpenseEntry, IncomeEntry, LendingEntry, PeriodLedger
from ledger_core.money import Money
from ledger_core.reconciler import BalanceReconciler

DAY = date(2025, 3, 1)


def _income(amount, currency="KWD"):
    return IncomeEntry(id="i", date=DAY, source="Salary", amount=Money(amount, currency))


def _expense(amount, method="wallet", currency="KWD"):
    return ExpenseEntry(
        id="e", date=DAY, category="Food", amount=Money(amount, currency), method=method
    )


@pytest.fixture
def ledger():
    return PeriodLedger(period_key="2025-03")


class TestEffects:
    def test_primary_income_credits_wallet(self, reconciler, ledger):
        reconciler.apply_effect(ledger, _income(5000))
        assert (ledger.wallet, ledger.savings) == (5000, 0)

    def test_wallet_expense_debits_wallet(self, reconciler, ledger):
        reconciler.apply_effect(ledger, _expense(1500, "wallet"))
        assert (ledger.wallet, ledger.savings) == (-1500, 0)

    def test_bank_expense_debits_savings(self, reconciler, ledger):
        reconciler.apply_effect(ledger, _expense(1500, "bank"))
        assert (ledger.wallet, ledger.savings) == (0, -1500)

    def test_other_currencies_never_touch_balances(self, reconciler, ledger):
        reconciler.apply_effect(ledger, _income(5000, "USD"))
        reconciler.apply_effect(ledger, _expense(700, "bank", "EUR"))
        assert (ledger.wallet, ledger.savings) == (0, 0)

    def test_lending_has_no_balance_effect(self, reconciler, ledger):
        entry = LendingEntry(
            id="l",
            date=DAY,
            counterparty="Sara",
            amount=Money(9000, "KWD"),
            direction="lend",
            status="pending",
        )
        reconciler.apply_effect(ledger, entry)
        assert (ledger.wallet, ledger.savings) == (0, 0)

    @pytest.mark.parametrize(
        "entry", [_income(4200), _expense(300, "wallet"), _expense(800, "bank"), _income(1, "USD")]
    )
    def test_revert_is_exact_inverse(self, reconciler, ledger, entry):
        ledger.wallet, ledger.savings = 12345, 678
        reconciler.apply_effect(ledger, entry)
        reconciler.revert_effect(ledger, entry)
        assert (ledger.wallet, ledger.savings) == (12345, 678)

    def test_primary_currency_is_normalised(self):
        assert BalanceReconciler(" kwd ").primary_currency == "KWD"


class TestTransfers:
    def test_wallet_to_savings(self, reconciler, ledger):
        ledger.wallet = 10000
        reconciler.transfer_wallet_to_savings(ledger, 4000)
        assert (ledger.wallet, ledger.savings) == (6000, 4000)

    def test_whole_wallet_can_be_moved(self, reconciler, ledger):
        ledger.wallet = 10000
        reconciler.transfer_wallet_to_savings(ledger, 10000)
        assert (ledger.wallet, ledger.savings) == (0, 10000)

    @pytest.mark.parametrize("amount", [10001, 0, -5])
    def test_rejected_transfer_changes_nothing(self, reconciler, ledger, amount):
        ledger.wallet, ledger.savings = 10000, 50
        with pytest.raises(InsufficientFundsError):
            reconciler.transfer_wallet_to_savings(ledger, amount)
        assert (ledger.wallet, ledger.savings) == (10000, 50)

    def test_credit_savings_leaves_wallet_alone(self, reconciler, ledger):
        ledger.wallet = 10000
        reconciler.credit_savings_directly(ledger, 2500)
        assert (ledger.wallet, ledger.savings) == (10000, 2500)

    @pytest.mark.parametrize("amount", [0, -1])
    def test_credit_savings_requires_positive_amount(self, reconciler, ledger, amount):
        with pytest.raises(InvalidAmountError):
            reconciler.credit_savings_directly(ledger, amount)
        assert ledger.savings == 0
