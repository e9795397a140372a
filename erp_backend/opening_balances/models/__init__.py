# opening_balances/models/__init__.py

from opening_balances.models.batch import OpeningBalanceBatch
from opening_balances.models.line import OpeningBalanceLine

__all__ = [
    "OpeningBalanceBatch",
    "OpeningBalanceLine",
]
