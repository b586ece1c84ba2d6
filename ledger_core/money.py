"""Fixed-point money values tagged with a currency code."""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal

from .exceptions import CurrencyMismatchError, InvalidAmountError

__all__ = ["Money", "SUBUNITS", "format_money", "parse_decimal", "to_decimal_string"]

# Amounts are stored in thousandths (fils for KWD).
SUBUNITS = 1000
FRACTION_DIGITS = 3

DECIMAL_PATTERN = re.compile(r"^([+-]?)(\d*)(?:\.(\d*))?$")


@dataclass(frozen=True)
class Money:
    amount: int
    currency: str

    @classmethod
    def zero(cls, currency: str) -> "Money":
        return cls(0, currency)

    def _check_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    def add(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.subtract(other)

    def __neg__(self) -> "Money":
        return Money(-self.amount, self.currency)

    @property
    def is_positive(self) -> bool:
        return self.amount > 0

    def __str__(self) -> str:
        return format_money(self)


def parse_decimal(text: object, currency: str) -> Money:
    """Parse a decimal string into thousandths, truncating digits past the third.

    ``"1.2"`` becomes 1200, ``"-0.0019"`` becomes -1. At least one digit is
    required on either side of the point.
    """
    if isinstance(text, bool):
        raise InvalidAmountError("amount must be a decimal string")
    if isinstance(text, int):
        text = str(text)
    elif isinstance(text, float):
        # Positional notation; repr() of 1e-05 or 1e+16 is exponent form.
        text = format(Decimal(repr(text)), "f")
    if not isinstance(text, str):
        raise InvalidAmountError("amount must be a decimal string")
    match = DECIMAL_PATTERN.fullmatch(text.strip())
    if match is None:
        raise InvalidAmountError(f"'{text}' is not a valid amount")
    sign, int_part, frac_part = match.groups()
    frac_part = frac_part or ""
    if not int_part and not frac_part:
        raise InvalidAmountError(f"'{text}' is not a valid amount")

    fraction = (frac_part + "0" * FRACTION_DIGITS)[:FRACTION_DIGITS]
    value = int(int_part or "0") * SUBUNITS + int(fraction)
    if sign == "-":
        value = -value
    return Money(value, currency.strip().upper())


def to_decimal_string(money: Money) -> str:
    magnitude = abs(money.amount)
    sign = "-" if money.amount < 0 else ""
    whole, fraction = divmod(magnitude, SUBUNITS)
    return f"{sign}{whole}.{fraction:0{FRACTION_DIGITS}d}"


def format_money(money: Money) -> str:
    """Render as ``"KWD 1.250"``."""
    return f"{money.currency} {to_decimal_string(money)}"
