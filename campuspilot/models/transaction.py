"""Transaction model (income/expense ledger entry, append-only)."""

from enum import Enum
from typing import Any, Optional

from campuspilot.models.base import OpenModel


class TransactionType(str, Enum):
    """Kinds of ledger entries the client sends. Not enforced on write."""

    INCOME = "income"
    EXPENSE = "expense"


class TransactionIn(OpenModel):
    uid: Optional[str] = None
    type: Optional[str] = None  # TransactionType value
    category: Optional[str] = None
    amount: Any = None  # Coerced to a number on write
    note: Optional[str] = None
    date: Optional[str] = None  # ISO-8601; defaults to creation time

    model_config = {
        "json_schema_extra": {
            "example": {
                "uid": "firebase-uid",
                "type": TransactionType.EXPENSE.value,
                "category": "food",
                "amount": 12.5,
                "note": "Lunch",
                "date": "2025-01-01T12:00:00.000Z",
            }
        }
    }
