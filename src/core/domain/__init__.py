"""
Domain models and value objects.

Contains the value types flowing through the pipeline: TransactionCandidate,
LedgerEntry, AggregatedContribution, PoolSnapshot.
"""

from src.core.domain.ledger_entry import (
    AggregatedContribution,
    LedgerEntry,
    PoolSnapshot,
)
from src.core.domain.transaction import GasCostSummary, TransactionCandidate

__all__ = [
    # Raw input
    "TransactionCandidate",
    "GasCostSummary",
    # Ledger models
    "LedgerEntry",
    "AggregatedContribution",
    "PoolSnapshot",
]
