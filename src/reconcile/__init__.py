"""
Reconcile — сверка агрегата с on-chain состоянием пула.
"""

from src.reconcile.pool_state import PoolStateFetcher, UnclaimedTable
from src.reconcile.reconciler import (
    MismatchSide,
    Reconciler,
    ReconciliationResult,
    compare_structures,
)

__all__ = [
    "PoolStateFetcher",
    "UnclaimedTable",
    "MismatchSide",
    "Reconciler",
    "ReconciliationResult",
    "compare_structures",
]
