"""Domain models and types for pocketbook.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from pocketbook.domain.models import (
    EXPENSE,
    INCOME,
    Category,
    CategoryName,
    Money,
    Month,
    Transaction,
)

__all__ = ["Money", "Month", "CategoryName", "Category", "Transaction", "INCOME", "EXPENSE"]
