"""
Aggregator — свёртка ledger по отправителю

Чистые функции без side effects. Суммирование только в int (MIST),
float не используется ни на одном шаге.

Инвариант сохранения: сумма по ledger == сумма по агрегатам.
Распределение для двухуровневого funding (base / boosted / total) —
отчётная величина, ledger не изменяет.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

from src.core.domain.ledger_entry import AggregatedContribution, LedgerEntry
from src.core.math.amounts import exact_half, format_sui


logger = logging.getLogger(__name__)


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class FundingDistribution:
    """
    Суммы для двухуровневого funding.

    base — сумма всех агрегатов (MIST)
    boosted — ровно половина base (Decimal: для нечётного base есть .5)
    total — base + boosted
    """

    base: int
    boosted: Decimal
    total: Decimal


@dataclass(frozen=True)
class AggregationResult:
    """Результат агрегации ledger."""

    contributions: tuple[AggregatedContribution, ...]
    ledger_total: int
    aggregated_total: int
    distribution: FundingDistribution

    @property
    def is_conserved(self) -> bool:
        """Сумма до агрегации равна сумме после."""
        return self.ledger_total == self.aggregated_total

    @property
    def addresses(self) -> frozenset[str]:
        return frozenset(c.address for c in self.contributions)


# =============================================================================
# FUNCTIONS
# =============================================================================


def aggregate_amounts_by_sender(ledger: Mapping[str, LedgerEntry]) -> list[AggregatedContribution]:
    """
    Сумма amount по каждому отправителю.

    Args:
        ledger: digest → LedgerEntry

    Returns:
        Один AggregatedContribution на отправителя, в порядке первого появления
    """
    amounts: dict[str, int] = {}
    for entry in ledger.values():
        amounts[entry.sender] = amounts.get(entry.sender, 0) + entry.amount

    return [
        AggregatedContribution(address=sender, amount=amount)
        for sender, amount in amounts.items()
    ]


def calculate_total_funds(ledger: Mapping[str, LedgerEntry]) -> int:
    """Сумма по ledger (не агрегированная)."""
    return sum((entry.amount for entry in ledger.values()), 0)


def calculate_total_from_aggregated(contributions: Iterable[AggregatedContribution]) -> int:
    """Сумма по агрегатам."""
    return sum((c.amount for c in contributions), 0)


def funding_distribution(base_amount: int) -> FundingDistribution:
    """
    Распределение для funding: boosted = base / 2, total = base + boosted.

    Args:
        base_amount: сумма агрегатов (MIST)
    """
    if base_amount < 0:
        raise ValueError(f"Base amount cannot be negative: {base_amount}")

    boosted = exact_half(base_amount)
    return FundingDistribution(
        base=base_amount,
        boosted=boosted,
        total=exact_half(3 * base_amount),
    )


def aggregate(ledger: Mapping[str, LedgerEntry]) -> AggregationResult:
    """
    Полная агрегация ledger с итогами и распределением.

    Итоги логируются в MIST и SUI. Нарушение сохранения суммы
    логируется как error и видно через AggregationResult.is_conserved.
    """
    contributions = aggregate_amounts_by_sender(ledger)
    ledger_total = calculate_total_funds(ledger)
    aggregated_total = calculate_total_from_aggregated(contributions)
    distribution = funding_distribution(aggregated_total)

    result = AggregationResult(
        contributions=tuple(contributions),
        ledger_total=ledger_total,
        aggregated_total=aggregated_total,
        distribution=distribution,
    )

    logger.info(
        "Total funds collected (not aggregated): %d MIST (%s SUI)",
        ledger_total,
        format_sui(ledger_total),
    )
    logger.info(
        "Total funds collected (aggregated): %d MIST (%s SUI), %d senders",
        aggregated_total,
        format_sui(aggregated_total),
        len(contributions),
    )
    if not result.is_conserved:
        logger.error(
            "Aggregation is not amount-preserving: ledger %d != aggregated %d",
            ledger_total,
            aggregated_total,
        )

    for label, value in (
        ("BASE", distribution.base),
        ("BOOSTED", distribution.boosted),
        ("TOTAL", distribution.total),
    ):
        logger.info("%s AMOUNT FOR ALL WALLETS: %s MIST (%s SUI)", label, value, format_sui(value))

    return result
