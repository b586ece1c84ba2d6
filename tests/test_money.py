import pytest

from ledger_core.exceptions import CurrencyMismatchError, InvalidAmountError
from ledger_core.money import Money, format_money, parse_decimal, to_decimal_string


class TestParseDecimal:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("100.000", 100000),
            ("25.5", 25500),
            ("1", 1000),
            (".250", 250),
            ("7.", 7000),
            ("0.001", 1),
            ("-3.125", -3125),
            ("+2.5", 2500),
            ("  4.2  ", 4200),
        ],
    )
    def test_parses_to_thousandths(self, text, expected):
        assert parse_decimal(text, "KWD") == Money(expected, "KWD")

    def test_extra_fraction_digits_are_truncated_not_rounded(self):
        assert parse_decimal("1.2349", "KWD").amount == 1234
        assert parse_decimal("0.0019", "KWD").amount == 1
        assert parse_decimal("-0.0019", "KWD").amount == -1

    def test_currency_is_upper_cased(self):
        assert parse_decimal("1", "usd").currency == "USD"

    def test_bare_numbers_are_accepted(self):
        assert parse_decimal(12, "KWD").amount == 12000
        assert parse_decimal(2.5, "KWD").amount == 2500

    @pytest.mark.parametrize(
        "number, expected",
        [(0.00001, 0), (0.0019, 1), (1e16, 10**16 * 1000), (-1.5e-2, -15)],
    )
    def test_floats_in_exponent_form_are_read_positionally(self, number, expected):
        assert parse_decimal(number, "KWD").amount == expected

    @pytest.mark.parametrize("number", [float("inf"), float("nan")])
    def test_non_finite_floats_are_rejected(self, number):
        with pytest.raises(InvalidAmountError):
            parse_decimal(number, "KWD")

    @pytest.mark.parametrize("text", ["", ".", "-", "abc", "1,000", "1.2.3", "1e3", "--1", None, True])
    def test_rejects_malformed_input(self, text):
        with pytest.raises(InvalidAmountError):
            parse_decimal(text, "KWD")


class TestFormatting:
    @pytest.mark.parametrize(
        "amount, expected",
        [(0, "0.000"), (1, "0.001"), (1250, "1.250"), (-60000, "-60.000"), (-5, "-0.005")],
    )
    def test_to_decimal_string(self, amount, expected):
        assert to_decimal_string(Money(amount, "KWD")) == expected

    def test_format_money(self):
        assert format_money(Money(1250, "KWD")) == "KWD 1.250"
        assert format_money(Money(-500, "USD")) == "USD -0.500"
        assert str(Money(1000, "EUR")) == "EUR 1.000"

    @pytest.mark.parametrize("amount", [0, 1, 999, 1000, 123456789, -1, -1001, -987654])
    def test_decimal_string_parses_back_to_same_value(self, amount):
        money = Money(amount, "GBP")
        assert parse_decimal(to_decimal_string(money), "GBP") == money


class TestArithmetic:
    def test_add_and_subtract_same_currency(self):
        a = Money(1500, "KWD")
        b = Money(250, "KWD")
        assert a + b == Money(1750, "KWD")
        assert a - b == Money(1250, "KWD")
        assert a.add(b) == a + b
        assert b.subtract(a) == Money(-1250, "KWD")

    def test_negation_and_zero(self):
        assert -Money(5, "KWD") == Money(-5, "KWD")
        assert Money.zero("USD") == Money(0, "USD")
        assert not Money.zero("USD").is_positive

    def test_cross_currency_is_rejected(self):
        with pytest.raises(CurrencyMismatchError):
            Money(1, "KWD") + Money(1, "USD")
        with pytest.raises(CurrencyMismatchError):
            Money(1, "KWD").subtract(Money(1, "EUR"))
