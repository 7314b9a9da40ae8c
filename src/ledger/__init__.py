"""
Ledger — построение, хранение и агрегация валидированных вкладов.
"""

from src.ledger.aggregator import (
    AggregationResult,
    FundingDistribution,
    aggregate,
    aggregate_amounts_by_sender,
    calculate_total_from_aggregated,
    calculate_total_funds,
    funding_distribution,
)
from src.ledger.ledger import Ledger
from src.ledger.page_walker import PageWalker, WalkResult, check_sender_uniqueness

__all__ = [
    "Ledger",
    "PageWalker",
    "WalkResult",
    "check_sender_uniqueness",
    "AggregationResult",
    "FundingDistribution",
    "aggregate",
    "aggregate_amounts_by_sender",
    "calculate_total_funds",
    "calculate_total_from_aggregated",
    "funding_distribution",
]
