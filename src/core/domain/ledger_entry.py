"""
Ledger models — валидированные записи, агрегаты и on-chain снапшот

Immutable Pydantic модели. Все суммы — int в MIST (без float).
В JSON суммы сериализуются строками: потребители на JS не теряют точность.
"""

from pydantic import BaseModel, Field, field_serializer, field_validator


# =============================================================================
# LEDGER ENTRY
# =============================================================================


class LedgerEntry(BaseModel):
    """
    Валидированный вклад.

    Создаётся только валидатором при успешном прохождении всех гейтов.
    Ключ в Ledger — digest.
    """

    sender: str = Field(..., min_length=1, description="Адрес отправителя")
    digest: str = Field(..., min_length=1, description="Digest транзакции")
    amount: int = Field(..., ge=0, description="Сумма вклада без газа (MIST)")
    timestamp_ms: int = Field(..., ge=0, description="Время транзакции (Unix ms)")

    model_config = {"frozen": True}

    @field_serializer("amount", "timestamp_ms", when_used="json")
    def serialize_as_string(self, value: int) -> str:
        return str(value)


# =============================================================================
# AGGREGATED CONTRIBUTION
# =============================================================================


class AggregatedContribution(BaseModel):
    """Сумма вкладов одного отправителя."""

    address: str = Field(..., min_length=1, description="Адрес отправителя")
    amount: int = Field(..., ge=0, description="Суммарный вклад (MIST)")

    model_config = {"frozen": True}

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, value: int) -> str:
        return str(value)


# =============================================================================
# POOL SNAPSHOT
# =============================================================================


class PoolSnapshot(BaseModel):
    """
    Снапшот таблицы адресов контракта (dynamic-field table `unclaimed`).

    Используется только как эталон для сравнения, никогда не изменяется.
    entry_count — число перечисленных dynamic fields до схлопывания в set:
    расхождение с len(addresses) означает дубликаты ключей.
    """

    object_id: str = Field(..., min_length=1, description="ID объекта пула")
    table_id: str = Field(..., min_length=1, description="ID таблицы unclaimed")
    addresses: frozenset[str] = Field(default_factory=frozenset, description="Адреса в таблице")
    entry_count: int = Field(..., ge=0, description="Число перечисленных записей")

    model_config = {"frozen": True}

    @field_validator("entry_count")
    @classmethod
    def validate_entry_count(cls, v: int, info) -> int:
        """entry_count не может быть меньше числа уникальных адресов"""
        if "addresses" in info.data and v < len(info.data["addresses"]):
            raise ValueError(
                f"entry_count {v} is less than unique address count {len(info.data['addresses'])}"
            )
        return v
