"""
Enumerations shared by the storage layer, schemas and aggregations.
"""

from __future__ import annotations

from enum import StrEnum


class BookingStatus(StrEnum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class TransactionType(StrEnum):
    INCOME = "income"
    EXPENSE = "expense"


# Category written on the income transaction that accompanies every booking.
RENTAL_INCOME_CATEGORY = "rental_income"

# Expense categories broken out on their own in the tax expense breakdown.
ITEMIZED_EXPENSE_CATEGORIES = ("maintenance", "utilities", "repairs")
