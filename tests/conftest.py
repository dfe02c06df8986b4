from datetime import datetime

import pytest

from moneywise.aggregation import monthly_expense_totals


@pytest.fixture
def now():
    return datetime(2024, 1, 20, 12, 0, 0)


@pytest.fixture(autouse=True)
def clear_caches():
    monthly_expense_totals.cache_clear()
    yield
    monthly_expense_totals.cache_clear()
