"""
Тесты для доменных моделей: TransactionCandidate, LedgerEntry,
AggregatedContribution, PoolSnapshot

Проверяет:
1. Построение TransactionCandidate из JSON RPC
2. Валидацию моделей Pydantic (суммы >= 0, entry_count)
3. Immutability (frozen=True)
4. JSON сериализацию сумм строками
"""

import json

import pytest
from pydantic import ValidationError

from src.core.domain import (
    AggregatedContribution,
    GasCostSummary,
    LedgerEntry,
    PoolSnapshot,
    TransactionCandidate,
)
from src.core.errors import MissingMandatoryFieldError


# =============================================================================
# TRANSACTION CANDIDATE
# =============================================================================


class TestTransactionCandidate:
    """Тесты для TransactionCandidate.from_rpc"""

    def test_from_rpc_fields(self, make_transaction) -> None:
        """Все поля извлекаются из вложенной структуры"""
        candidate = TransactionCandidate.from_rpc(make_transaction(digest="d1", sender="0xA"))

        assert candidate.digest == "d1"
        assert candidate.sender == "0xA"
        assert candidate.status == "success"
        assert candidate.timestamp_ms == 1710000000000
        assert candidate.inner_transaction["kind"] == "ProgrammableTransaction"
        assert len(candidate.balance_changes) == 2
        assert candidate.gas_used == GasCostSummary(
            computation_cost=30, storage_cost=20, storage_rebate=10
        )

    def test_gas_total_fee(self) -> None:
        """total_fee = computation + storage - rebate"""
        gas = GasCostSummary(computation_cost=30, storage_cost=20, storage_rebate=10)
        assert gas.total_fee == 40

    def test_malformed_gas_is_none(self, make_transaction) -> None:
        """Нечисловой gasUsed → None (отказ на GATE 4, не фатально)"""
        candidate = TransactionCandidate.from_rpc(make_transaction(storage_cost="n/a"))
        assert candidate.gas_used is None

    def test_candidate_immutable(self, make_transaction) -> None:
        candidate = TransactionCandidate.from_rpc(make_transaction())
        with pytest.raises(ValidationError):
            candidate.sender = "0xB"

    def test_missing_digest(self, make_transaction) -> None:
        raw = make_transaction()
        del raw["digest"]

        with pytest.raises(MissingMandatoryFieldError) as exc_info:
            TransactionCandidate.from_rpc(raw)

        assert exc_info.value.field_name == "digest"
        assert "<unknown digest>" in str(exc_info.value)

    def test_missing_outer_transaction(self, make_transaction) -> None:
        raw = make_transaction(digest="d9")
        del raw["transaction"]

        with pytest.raises(MissingMandatoryFieldError) as exc_info:
            TransactionCandidate.from_rpc(raw)

        assert exc_info.value.field_name == "transaction"
        assert str(exc_info.value).startswith("[decode:d9]")

    def test_non_numeric_timestamp(self, make_transaction) -> None:
        with pytest.raises(MissingMandatoryFieldError):
            TransactionCandidate.from_rpc(make_transaction(timestamp_ms="yesterday"))

    @pytest.mark.parametrize("timestamp_ms", ["-5", -1])
    def test_negative_timestamp(self, make_transaction, timestamp_ms) -> None:
        """Отрицательный timestamp фатален и называет digest"""
        with pytest.raises(MissingMandatoryFieldError) as exc_info:
            TransactionCandidate.from_rpc(make_transaction(digest="d1", timestamp_ms=timestamp_ms))

        assert exc_info.value.identifier == "d1"
        assert exc_info.value.field_name == "timestampMs"

    def test_empty_balance_changes_allowed(self, make_transaction) -> None:
        """Пустой список — не отсутствие поля"""
        raw = make_transaction()
        raw["balanceChanges"] = []

        candidate = TransactionCandidate.from_rpc(raw)

        assert candidate.balance_changes == []


# =============================================================================
# LEDGER ENTRY
# =============================================================================


class TestLedgerEntry:
    """Тесты для LedgerEntry"""

    def test_entry_creation(self) -> None:
        entry = LedgerEntry(sender="0xA", digest="d1", amount=960, timestamp_ms=1)
        assert entry.amount == 960

    def test_entry_immutable(self) -> None:
        entry = LedgerEntry(sender="0xA", digest="d1", amount=960, timestamp_ms=1)
        with pytest.raises(ValidationError):
            entry.amount = 1

    def test_negative_amount_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LedgerEntry(sender="0xA", digest="d1", amount=-1, timestamp_ms=1)

    def test_empty_digest_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LedgerEntry(sender="0xA", digest="", amount=1, timestamp_ms=1)

    def test_json_amount_as_string(self) -> None:
        """Суммы больше 2^53 сериализуются строкой без потери точности"""
        amount = 2**64 + 1
        entry = LedgerEntry(sender="0xA", digest="d1", amount=amount, timestamp_ms=1710000000000)

        data = json.loads(entry.model_dump_json())

        assert data["amount"] == str(amount)
        assert data["timestamp_ms"] == "1710000000000"
        # Python mode сохраняет int
        assert entry.model_dump()["amount"] == amount


# =============================================================================
# AGGREGATED CONTRIBUTION / POOL SNAPSHOT
# =============================================================================


class TestAggregatedContribution:
    def test_json_amount_as_string(self) -> None:
        contribution = AggregatedContribution(address="0xA", amount=100)
        assert contribution.model_dump(mode="json") == {"address": "0xA", "amount": "100"}

    def test_negative_amount_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AggregatedContribution(address="0xA", amount=-5)


class TestPoolSnapshot:
    def test_snapshot_creation(self) -> None:
        snapshot = PoolSnapshot(
            object_id="0xpool",
            table_id="0xtable",
            addresses=frozenset({"0xA", "0xB"}),
            entry_count=2,
        )
        assert snapshot.addresses == {"0xA", "0xB"}

    def test_entry_count_below_unique_rejected(self) -> None:
        """entry_count < числа уникальных адресов невозможен"""
        with pytest.raises(ValidationError):
            PoolSnapshot(
                object_id="0xpool",
                table_id="0xtable",
                addresses=frozenset({"0xA", "0xB"}),
                entry_count=1,
            )

    def test_entry_count_above_unique_allowed(self) -> None:
        """Дубликаты ключей видны через entry_count"""
        snapshot = PoolSnapshot(
            object_id="0xpool",
            table_id="0xtable",
            addresses=frozenset({"0xA"}),
            entry_count=2,
        )
        assert snapshot.entry_count == 2
