"""
TransactionCandidate — read-only view над одной транзакцией из RPC

Представляет один элемент result.data метода suix_queryTransactionBlocks
(SuiTransactionBlockResponse). Модель не владеет данными: сырые части
(inner transaction, balanceChanges) хранятся как есть и разбираются
гейтами валидатора.

Поля, гарантированные контрактом RPC (sender, balanceChanges, effects,
timestampMs, inner transaction), проверяются при построении: их
отсутствие — нарушение контракта источником данных, это фатально.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field

from src.core.errors import MissingMandatoryFieldError
from src.core.math.amounts import gas_fee, parse_amount


# =============================================================================
# NESTED MODELS
# =============================================================================


class GasCostSummary(BaseModel):
    """
    Сводка затрат на газ (effects.gasUsed).

    Значения в MIST. В RPC приходят строками.
    """

    computation_cost: int = Field(..., description="computationCost (MIST)")
    storage_cost: int = Field(..., description="storageCost (MIST)")
    storage_rebate: int = Field(..., description="storageRebate (MIST)")

    model_config = {"frozen": True}

    @property
    def total_fee(self) -> int:
        """computationCost + storageCost - storageRebate"""
        return gas_fee(self.computation_cost, self.storage_cost, self.storage_rebate)


# =============================================================================
# TRANSACTION CANDIDATE
# =============================================================================


class TransactionCandidate(BaseModel):
    """
    Кандидат в ledger: одна транзакция в том виде, как её вернул RPC.

    gas_used равен None, если effects.gasUsed отсутствует или содержит
    нечисловые значения; такая транзакция будет отклонена на GATE 4.
    """

    digest: str = Field(..., min_length=1, description="Уникальный идентификатор транзакции")
    sender: str = Field(..., min_length=1, description="transaction.data.sender")
    inner_transaction: Any = Field(..., description="transaction.data.transaction (kind, inputs, transactions)")
    balance_changes: Any = Field(..., description="balanceChanges (сырой список)")
    status: Optional[str] = Field(None, description="effects.status.status")
    gas_used: Optional[GasCostSummary] = Field(None, description="effects.gasUsed")
    timestamp_ms: int = Field(..., description="timestampMs")

    model_config = {"frozen": True}

    @classmethod
    def from_rpc(cls, raw: Any) -> "TransactionCandidate":
        """
        Построение кандидата из JSON объекта RPC.

        Args:
            raw: один элемент result.data

        Returns:
            TransactionCandidate

        Raises:
            MissingMandatoryFieldError: если отсутствует гарантированное поле
        """
        if not isinstance(raw, dict):
            raise MissingMandatoryFieldError("transaction", None)

        digest = raw.get("digest")
        if not isinstance(digest, str) or not digest:
            raise MissingMandatoryFieldError("digest", None)

        outer = raw.get("transaction")
        if not isinstance(outer, dict) or not isinstance(outer.get("data"), dict):
            raise MissingMandatoryFieldError("transaction", digest)
        data = outer["data"]

        sender = data.get("sender")
        if not sender:
            raise MissingMandatoryFieldError("transaction.data.sender", digest)

        if raw.get("balanceChanges") is None:
            raise MissingMandatoryFieldError("balanceChanges", digest)

        if not data.get("transaction"):
            raise MissingMandatoryFieldError("transaction.data.transaction", digest)

        effects = raw.get("effects")
        if not isinstance(effects, dict) or not effects:
            raise MissingMandatoryFieldError("effects", digest)

        # Отрицательный timestamp — та же порча контракта, что и отсутствие
        timestamp_ms = parse_amount(raw.get("timestampMs"))
        if timestamp_ms is None or timestamp_ms < 0:
            raise MissingMandatoryFieldError("timestampMs", digest)

        status = None
        status_obj = effects.get("status")
        if isinstance(status_obj, dict) and isinstance(status_obj.get("status"), str):
            status = status_obj["status"]

        return cls(
            digest=digest,
            sender=str(sender),
            inner_transaction=data["transaction"],
            balance_changes=raw["balanceChanges"],
            status=status,
            gas_used=_parse_gas_used(effects.get("gasUsed")),
            timestamp_ms=timestamp_ms,
        )


def _parse_gas_used(gas_used: Any) -> Optional[GasCostSummary]:
    """effects.gasUsed → GasCostSummary (None при некорректной форме)."""
    if not isinstance(gas_used, dict):
        return None

    computation = parse_amount(gas_used.get("computationCost"))
    storage = parse_amount(gas_used.get("storageCost"))
    rebate = parse_amount(gas_used.get("storageRebate"))
    if computation is None or storage is None or rebate is None:
        return None

    return GasCostSummary(
        computation_cost=computation,
        storage_cost=storage,
        storage_rebate=rebate,
    )
