"""
Reconciler — сверка агрегата с on-chain снапшотом пула

Единственный pass/fail гейт всего pipeline. Два независимо полученных
источника (агрегат ledger и таблица unclaimed контракта) должны совпасть
как множества адресов до любого движения средств.

Порядок проверки:
1. Size precheck: |aggregate| != |snapshot| → FAIL сразу, без обхода множеств
2. Двусторонняя проверка включения:
   - aggregate \\ snapshot → missing_on_chain
   - snapshot \\ aggregate → missing_in_aggregate

При FAIL Reconciler бросает ReconciliationMismatchError: funding запрещён.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from src.core.domain.ledger_entry import AggregatedContribution, PoolSnapshot
from src.core.errors import ReconciliationMismatchError
from src.ledger.aggregator import AggregationResult
from src.reconcile.pool_state import PoolStateFetcher


logger = logging.getLogger(__name__)


# =============================================================================
# RESULT
# =============================================================================


class MismatchSide(str, Enum):
    """
    Сторона расхождения.

    После сравнения множеств — на какой стороне есть лишние адреса.
    При провале size precheck множества не сравниваются, и значение
    означает только бОльшую по числу записей сторону.
    """

    NONE = "NONE"
    # В агрегате есть адреса, которых нет on-chain
    AGGREGATE = "AGGREGATE"
    # On-chain есть адреса, которых нет в агрегате
    ON_CHAIN = "ON_CHAIN"
    BOTH = "BOTH"


@dataclass(frozen=True)
class ReconciliationResult:
    """
    Результат сверки.

    При провале size precheck списки missing_* остаются пустыми
    (обход множеств не выполняется), а mismatch_side — бОльшая сторона
    по числу записей, а не принадлежность адресов.
    """

    passed: bool
    table_id: str
    aggregate_count: int
    snapshot_count: int
    size_mismatch: bool
    mismatch_side: MismatchSide
    missing_on_chain: tuple[str, ...] = ()
    missing_in_aggregate: tuple[str, ...] = ()
    details: dict = field(default_factory=dict)

    def summary(self) -> str:
        if self.passed:
            return f"PASS: {self.aggregate_count} addresses match table {self.table_id}"
        if self.size_mismatch:
            return (
                f"FAIL: size mismatch, aggregate has {self.aggregate_count} addresses, "
                f"table {self.table_id} has {self.snapshot_count} (larger side: {self.mismatch_side.value})"
            )
        return (
            f"FAIL: {len(self.missing_on_chain)} missing on-chain, "
            f"{len(self.missing_in_aggregate)} missing in aggregate ({self.mismatch_side.value})"
        )


# =============================================================================
# COMPARISON
# =============================================================================


def _side(aggregate_extra: bool, on_chain_extra: bool) -> MismatchSide:
    if aggregate_extra and on_chain_extra:
        return MismatchSide.BOTH
    if aggregate_extra:
        return MismatchSide.AGGREGATE
    if on_chain_extra:
        return MismatchSide.ON_CHAIN
    return MismatchSide.NONE


def compare_structures(
    contributions: Iterable[AggregatedContribution],
    snapshot: PoolSnapshot,
) -> ReconciliationResult:
    """
    Сравнение множества адресов агрегата с множеством адресов снапшота.

    Args:
        contributions: агрегированные вклады (по одному на адрес)
        snapshot: on-chain снапшот пула

    Returns:
        ReconciliationResult (не бросает exception)
    """
    aggregate_addresses = [c.address for c in contributions]
    aggregate_set = frozenset(aggregate_addresses)
    aggregate_count = len(aggregate_addresses)
    snapshot_count = snapshot.entry_count

    details = {
        "aggregate_unique": len(aggregate_set),
        "snapshot_unique": len(snapshot.addresses),
    }

    # Size precheck: fail fast
    if aggregate_count != snapshot_count:
        return ReconciliationResult(
            passed=False,
            table_id=snapshot.table_id,
            aggregate_count=aggregate_count,
            snapshot_count=snapshot_count,
            size_mismatch=True,
            mismatch_side=_side(aggregate_count > snapshot_count, snapshot_count > aggregate_count),
            details=details,
        )

    missing_on_chain = tuple(a for a in aggregate_addresses if a not in snapshot.addresses)
    missing_in_aggregate = tuple(sorted(snapshot.addresses - aggregate_set))

    return ReconciliationResult(
        passed=not missing_on_chain and not missing_in_aggregate,
        table_id=snapshot.table_id,
        aggregate_count=aggregate_count,
        snapshot_count=snapshot_count,
        size_mismatch=False,
        mismatch_side=_side(bool(missing_on_chain), bool(missing_in_aggregate)),
        missing_on_chain=missing_on_chain,
        missing_in_aggregate=missing_in_aggregate,
        details=details,
    )


# =============================================================================
# RECONCILER
# =============================================================================


class Reconciler:
    """Загрузка снапшота пула и сверка с агрегатом."""

    def __init__(self, fetcher: PoolStateFetcher):
        self.fetcher = fetcher

    def reconcile(self, aggregation: AggregationResult, pool_object_id: str) -> ReconciliationResult:
        """
        Сверка агрегата с таблицей unclaimed пула.

        Returns:
            ReconciliationResult при совпадении

        Raises:
            PoolSchemaError: объект пула не соответствует схеме
            PaginationProtocolError: некорректная пагинация dynamic fields
            ReconciliationMismatchError: расхождение множеств (funding запрещён)
        """
        snapshot = self.fetcher.fetch_snapshot(pool_object_id)
        result = compare_structures(aggregation.contributions, snapshot)

        if result.passed:
            logger.info("Reconciliation %s", result.summary())
            return result

        logger.error("Reconciliation %s", result.summary())
        for address in result.missing_on_chain:
            logger.error("Address %s is in the aggregate but not on-chain", address)
        for address in result.missing_in_aggregate:
            logger.error("Address %s is on-chain but not in the aggregate", address)

        raise ReconciliationMismatchError(result.summary(), table_id=snapshot.table_id, result=result)
