from datetime import date

import pytest

from ledger_core.exceptions import ValidationError
from ledger_core.periods import (
    current_period_key,
    label,
    period_key_of,
    storage_key,
    validate_period_key,
)


def test_period_key_is_year_and_zero_padded_month():
    assert period_key_of(date(2025, 3, 17)) == "2025-03"
    assert period_key_of(date(1999, 12, 31)) == "1999-12"


def test_current_period_key_uses_given_day():
    assert current_period_key(date(2024, 1, 5)) == "2024-01"


def test_label_is_month_name_and_year():
    assert label("2025-03") == "March 2025"
    assert label("2024-12") == "December 2024"


@pytest.mark.parametrize("value", ["2025-13", "2025-00", "25-03", "2025/03", "2025-3", "", None])
def test_invalid_period_keys_are_rejected(value):
    with pytest.raises(ValidationError):
        validate_period_key(value)


def test_storage_key_prefix():
    assert storage_key("2025-03") == "budget-2025-03"
