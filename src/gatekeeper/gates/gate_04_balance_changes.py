"""GATE 4: Инвариант balance changes

Главная финансовая проверка. Транзакция допускается только если:
- balanceChanges содержит ровно 2 записи
- обе записи в нативном coin type (0x2::sui::SUI)
- одна запись принадлежит sender (AddressOwner) со строго отрицательной дельтой
- другая принадлежит target со строго положительной дельтой
- |sender_delta| - gas_fee == |target_delta| (точное целочисленное равенство)

gas_fee = computationCost + storageCost - storageRebate

Результат PASS несёт amount = |sender_delta| - gas_fee (MIST).
Любое отклонение блокирует транзакцию: допусков нет.
"""

from dataclasses import dataclass
from typing import Any, Optional

from src.core.domain.transaction import TransactionCandidate
from src.core.math.amounts import SUI_COIN_TYPE, parse_amount


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class Gate04Result:
    """Результат GATE 4."""

    entry_allowed: bool
    block_reason: str

    # Метрики (None если не удалось вычислить)
    sender_delta: Optional[int]
    target_delta: Optional[int]
    gas_fee: Optional[int]

    # Сумма вклада без газа (только при PASS)
    amount: Optional[int]

    # Детали
    details: str


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class Gate04Config:
    """Конфигурация GATE 4."""

    coin_type: str = SUI_COIN_TYPE
    expected_change_count: int = 2


# =============================================================================
# GATE 4
# =============================================================================


@dataclass(frozen=True)
class _BalanceChange:
    owner: str
    coin_type: str
    amount: int


class Gate04BalanceChanges:
    """GATE 4: Balance-change invariant.

    Порядок проверок:
    1. Наличие gas summary
    2. Количество и форма записей balanceChanges
    3. Coin type обеих записей
    4. Принадлежность записей sender / target
    5. Знаки дельт
    6. |sender| - gas_fee == |target|
    """

    def __init__(self, target_address: str, config: Gate04Config | None = None):
        self.target_address = target_address
        self.config = config or Gate04Config()

    def evaluate(self, candidate: TransactionCandidate) -> Gate04Result:
        """Оценка GATE 4.

        Args:
            candidate: транзакция из RPC (прошедшая GATE 0-3)

        Returns:
            Gate04Result с решением о допуске и amount при PASS
        """
        # 1. Gas summary
        if candidate.gas_used is None:
            return self._blocked_result(
                "gas_summary_invalid",
                details="effects.gasUsed is missing or malformed",
            )
        fee = candidate.gas_used.total_fee

        # 2. Количество и форма
        raw_changes = candidate.balance_changes
        if not isinstance(raw_changes, list) or len(raw_changes) != self.config.expected_change_count:
            count = len(raw_changes) if isinstance(raw_changes, list) else None
            return self._blocked_result(
                f"unexpected_change_count: {count}",
                gas_fee=fee,
                details=f"Expected {self.config.expected_change_count} balance changes, got {count}",
            )

        changes = []
        for index, raw in enumerate(raw_changes):
            change = self._parse_change(raw)
            if change is None:
                return self._blocked_result(
                    f"malformed_change[{index}]",
                    gas_fee=fee,
                    details=f"Balance change {index} has no AddressOwner/coinType/integer amount",
                )
            changes.append(change)

        # 3. Coin type
        for change in changes:
            if change.coin_type != self.config.coin_type:
                return self._blocked_result(
                    f"unexpected_coin_type: {change.coin_type}",
                    gas_fee=fee,
                    details=f"Balance change of {change.owner} is in {change.coin_type}",
                )

        # 4. Sender / target
        sender_change = self._find_owner(changes, candidate.sender)
        target_change = self._find_owner(changes, self.target_address)
        if sender_change is None or target_change is None or sender_change is target_change:
            return self._blocked_result(
                "owners_mismatch",
                gas_fee=fee,
                details=(
                    f"Balance changes owners {[c.owner for c in changes]} "
                    f"do not match sender {candidate.sender} and target {self.target_address}"
                ),
            )

        sender_delta = sender_change.amount
        target_delta = target_change.amount

        # 5. Знаки
        if sender_delta >= 0 or target_delta <= 0:
            return Gate04Result(
                entry_allowed=False,
                block_reason=f"unexpected_delta_sign: sender={sender_delta}, target={target_delta}",
                sender_delta=sender_delta,
                target_delta=target_delta,
                gas_fee=fee,
                amount=None,
                details="Sender delta must be < 0 and target delta must be > 0",
            )

        # 6. Точное равенство
        amount = abs(sender_delta) - fee
        if amount != abs(target_delta):
            return Gate04Result(
                entry_allowed=False,
                block_reason=(
                    f"amount_mismatch: |{sender_delta}| - {fee} = {amount} != {abs(target_delta)}"
                ),
                sender_delta=sender_delta,
                target_delta=target_delta,
                gas_fee=fee,
                amount=None,
                details=f"Sender paid {abs(sender_delta)} with gas {fee}, target received {target_delta}",
            )

        # 7. PASS
        return Gate04Result(
            entry_allowed=True,
            block_reason="",
            sender_delta=sender_delta,
            target_delta=target_delta,
            gas_fee=fee,
            amount=amount,
            details=f"Transfer validated: {amount} MIST (gas {fee})",
        )

    def _parse_change(self, raw: Any) -> Optional[_BalanceChange]:
        """Разбор одной записи balanceChanges (None если форма некорректна)."""
        if not isinstance(raw, dict):
            return None

        owner = raw.get("owner")
        if not isinstance(owner, dict) or not isinstance(owner.get("AddressOwner"), str):
            return None

        coin_type = raw.get("coinType")
        amount = parse_amount(raw.get("amount"))
        if not isinstance(coin_type, str) or amount is None:
            return None

        return _BalanceChange(owner=owner["AddressOwner"], coin_type=coin_type, amount=amount)

    @staticmethod
    def _find_owner(changes: list[_BalanceChange], address: str) -> Optional[_BalanceChange]:
        for change in changes:
            if change.owner == address:
                return change
        return None

    def _blocked_result(self, reason: str, details: str, gas_fee: Optional[int] = None) -> Gate04Result:
        return Gate04Result(
            entry_allowed=False,
            block_reason=reason,
            sender_delta=None,
            target_delta=None,
            gas_fee=gas_fee,
            amount=None,
            details=details,
        )
