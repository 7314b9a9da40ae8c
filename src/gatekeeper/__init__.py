"""Gatekeeper — система гейтов для допуска транзакций в ledger.

- 5 gates с фиксированным порядком
- Short-circuit на первом отказе
- Отказ — значение, не exception
"""

from .validator import RejectionStage, TransactionValidator, ValidationOutcome

__all__ = [
    "TransactionValidator",
    "ValidationOutcome",
    "RejectionStage",
]
