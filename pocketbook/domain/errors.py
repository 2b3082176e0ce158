"""Errors raised by the analytics core."""


class MalformedTransactionError(ValueError):
    """A transaction failed the data-integrity check (bad type or negative amount)."""

    def __init__(self, transaction_id: object, reason: str) -> None:
        super().__init__(f"Transaction {transaction_id}: {reason}")
        self.transaction_id = transaction_id
        self.reason = reason


class InvalidWindowError(ValueError):
    """A month window was requested with a non-positive length."""
