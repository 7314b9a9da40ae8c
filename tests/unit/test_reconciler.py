"""
Unit тесты для reconcile/reconciler.py

Покрытие:
- PASS: {0xA, 0xB} vs {0xA, 0xB}
- FAIL: {0xA, 0xB} vs {0xA, 0xC} → 0xB missing on-chain, 0xC missing in aggregate
- Size precheck (fail fast без обхода множеств)
- Reconciler: ReconciliationMismatchError блокирует funding
"""

import pytest

from src.core.domain import AggregatedContribution, LedgerEntry, PoolSnapshot
from src.core.errors import ReconciliationMismatchError
from src.ledger import Ledger, aggregate
from src.reconcile import MismatchSide, PoolStateFetcher, Reconciler, compare_structures


@pytest.fixture
def contributions():
    return [
        AggregatedContribution(address="0xA", amount=100),
        AggregatedContribution(address="0xB", amount=50),
    ]


def snapshot_of(*addresses, entry_count=None):
    return PoolSnapshot(
        object_id="0xpool",
        table_id="0xtable",
        addresses=frozenset(addresses),
        entry_count=len(addresses) if entry_count is None else entry_count,
    )


# =============================================================================
# COMPARE STRUCTURES
# =============================================================================


def test_compare_pass(contributions):
    result = compare_structures(contributions, snapshot_of("0xA", "0xB"))

    assert result.passed is True
    assert result.mismatch_side == MismatchSide.NONE
    assert result.missing_on_chain == ()
    assert result.missing_in_aggregate == ()
    assert result.summary().startswith("PASS")


def test_compare_fail_both_sides(contributions):
    result = compare_structures(contributions, snapshot_of("0xA", "0xC"))

    assert result.passed is False
    assert result.size_mismatch is False
    assert result.missing_on_chain == ("0xB",)
    assert result.missing_in_aggregate == ("0xC",)
    assert result.mismatch_side == MismatchSide.BOTH


def test_compare_size_mismatch_fails_fast(contributions):
    """Размеры различаются — обход множеств не выполняется."""
    result = compare_structures(contributions, snapshot_of("0xA", "0xB", "0xC"))

    assert result.passed is False
    assert result.size_mismatch is True
    assert result.missing_on_chain == ()
    assert result.missing_in_aggregate == ()
    assert result.mismatch_side == MismatchSide.ON_CHAIN
    assert result.aggregate_count == 2
    assert result.snapshot_count == 3


def test_compare_aggregate_larger(contributions):
    result = compare_structures(contributions, snapshot_of("0xA"))

    assert result.size_mismatch is True
    assert result.mismatch_side == MismatchSide.AGGREGATE


def test_compare_size_mismatch_side_is_larger_side():
    """0xD есть только on-chain, но при разных размерах сторона — бОльшая по числу."""
    contributions = [AggregatedContribution(address=a, amount=1) for a in ("0xA", "0xB", "0xC")]

    result = compare_structures(contributions, snapshot_of("0xA", "0xD"))

    assert result.mismatch_side == MismatchSide.AGGREGATE
    assert result.missing_in_aggregate == ()
    assert "larger side: AGGREGATE" in result.summary()


def test_compare_duplicate_keys_on_chain(contributions):
    """Дубликат ключа в таблице: уникальные множества равны, но entry_count нет."""
    result = compare_structures(contributions, snapshot_of("0xA", "0xB", entry_count=3))

    assert result.passed is False
    assert result.size_mismatch is True


def test_compare_empty_sets():
    result = compare_structures([], snapshot_of())
    assert result.passed is True


# =============================================================================
# RECONCILER
# =============================================================================


class StubFetcher(PoolStateFetcher):
    """Fetcher с заранее заданным снапшотом."""

    def __init__(self, snapshot):
        self.snapshot = snapshot
        self.requested = []

    def fetch_snapshot(self, object_id):
        self.requested.append(object_id)
        return self.snapshot


@pytest.fixture
def aggregation():
    ledger = Ledger()
    ledger.insert(LedgerEntry(sender="0xA", digest="d1", amount=100, timestamp_ms=1))
    ledger.insert(LedgerEntry(sender="0xB", digest="d2", amount=50, timestamp_ms=2))
    return aggregate(ledger)


def test_reconciler_pass(aggregation):
    fetcher = StubFetcher(snapshot_of("0xA", "0xB"))

    result = Reconciler(fetcher).reconcile(aggregation, "0xpool")

    assert result.passed is True
    assert fetcher.requested == ["0xpool"]


def test_reconciler_mismatch_blocks_funding(aggregation):
    with pytest.raises(ReconciliationMismatchError) as exc_info:
        Reconciler(StubFetcher(snapshot_of("0xA", "0xC"))).reconcile(aggregation, "0xpool")

    error = exc_info.value
    assert error.table_id == "0xtable"
    assert error.result.missing_on_chain == ("0xB",)
    assert error.result.missing_in_aggregate == ("0xC",)
    assert str(error).startswith("[reconcile:0xtable] FAIL")


def test_reconciler_end_to_end_rpc(aggregation, make_client, make_pool_object, make_page, make_dynamic_field):
    """Reconciler поверх настоящего PoolStateFetcher и fake RPC."""
    client, session = make_client([
        {"data": make_pool_object(table_id="0xtable", size="2")},
        make_page([make_dynamic_field("0xB")], next_cursor="f1"),
        make_page([make_dynamic_field("0xA")]),
    ])

    result = Reconciler(PoolStateFetcher(client)).reconcile(aggregation, "0xpool")

    assert result.passed is True
    assert len(session.requests) == 3
