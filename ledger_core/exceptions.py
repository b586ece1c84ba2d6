"""Domain-specific exceptions for the budget ledger core."""

class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class InvalidAmountError(ValidationError):
    """Raised when an amount cannot be parsed or is not positive where required."""


class CurrencyMismatchError(ValueError):
    """Raised when money in two different currencies is combined."""


class InsufficientFundsError(ValueError):
    """Raised when a transfer would take more than the wallet holds."""


class EntryNotFoundError(LookupError):
    """Raised when an income, expense or lending entry cannot be located."""


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""
