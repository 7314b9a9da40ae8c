"""Transaction Validator — цепочка гейтов для допуска транзакции в ledger.

Гейты применяются в фиксированном порядке, до первого отказа:
- GATE 0: Success status
- GATE 1: Sender exclusion
- GATE 2: Structural shape
- GATE 3: Address presence
- GATE 4: Balance-change invariant

Отказ любого гейта — значение (ValidationOutcome), а не exception.
Exception возможен только при построении TransactionCandidate из сырого
JSON (MissingMandatoryFieldError), это фатальная ошибка источника данных.

Валидатор детерминирован: одинаковый вход → одинаковый outcome.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from src.core.domain.ledger_entry import LedgerEntry
from src.core.domain.transaction import TransactionCandidate
from src.gatekeeper.gates.gate_00_success_status import Gate00SuccessStatus
from src.gatekeeper.gates.gate_01_sender_exclusion import Gate01SenderExclusion
from src.gatekeeper.gates.gate_02_structural_shape import Gate02Config, Gate02StructuralShape
from src.gatekeeper.gates.gate_03_address_presence import Gate03AddressPresence
from src.gatekeeper.gates.gate_04_balance_changes import Gate04BalanceChanges, Gate04Config


class RejectionStage(str, Enum):
    """Гейт, на котором транзакция была отклонена."""

    SUCCESS_STATUS = "success_status"
    SENDER_EXCLUSION = "sender_exclusion"
    STRUCTURAL_SHAPE = "structural_shape"
    ADDRESS_PRESENCE = "address_presence"
    BALANCE_CHANGES = "balance_changes"


@dataclass(frozen=True)
class ValidationOutcome:
    """Результат валидации одной транзакции."""

    digest: str
    accepted: bool

    # Заполнено при отказе
    stage: Optional[RejectionStage]
    block_reason: str

    # Заполнено при допуске
    entry: Optional[LedgerEntry]

    # Детали
    details: str


class TransactionValidator:
    """Валидатор транзакций для одного target адреса."""

    def __init__(
        self,
        target_address: str,
        structural_config: Gate02Config | None = None,
        balance_config: Gate04Config | None = None,
    ):
        """
        Args:
            target_address: адрес сбора вкладов
            structural_config: конфигурация GATE 2 (опционально)
            balance_config: конфигурация GATE 4 (опционально)
        """
        self.target_address = target_address
        self.gate00 = Gate00SuccessStatus()
        self.gate01 = Gate01SenderExclusion(target_address)
        self.gate02 = Gate02StructuralShape(structural_config)
        self.gate03 = Gate03AddressPresence(target_address)
        self.gate04 = Gate04BalanceChanges(target_address, balance_config)

    def validate(self, candidate: TransactionCandidate) -> ValidationOutcome:
        """Прогон транзакции через GATE 0-4.

        Args:
            candidate: транзакция из RPC

        Returns:
            ValidationOutcome с LedgerEntry при допуске
        """
        checks = (
            (RejectionStage.SUCCESS_STATUS, self.gate00),
            (RejectionStage.SENDER_EXCLUSION, self.gate01),
            (RejectionStage.STRUCTURAL_SHAPE, self.gate02),
            (RejectionStage.ADDRESS_PRESENCE, self.gate03),
        )
        for stage, gate in checks:
            result = gate.evaluate(candidate)
            if not result.entry_allowed:
                return self._rejected(candidate, stage, result.block_reason, result.details)

        gate04_result = self.gate04.evaluate(candidate)
        if not gate04_result.entry_allowed or gate04_result.amount is None:
            return self._rejected(
                candidate,
                RejectionStage.BALANCE_CHANGES,
                gate04_result.block_reason,
                gate04_result.details,
            )

        entry = LedgerEntry(
            sender=candidate.sender,
            digest=candidate.digest,
            amount=gate04_result.amount,
            timestamp_ms=candidate.timestamp_ms,
        )
        return ValidationOutcome(
            digest=candidate.digest,
            accepted=True,
            stage=None,
            block_reason="",
            entry=entry,
            details=gate04_result.details,
        )

    def validate_raw(self, raw: Any) -> ValidationOutcome:
        """Построение кандидата из JSON RPC и валидация.

        Raises:
            MissingMandatoryFieldError: если отсутствует гарантированное поле
        """
        return self.validate(TransactionCandidate.from_rpc(raw))

    @staticmethod
    def _rejected(
        candidate: TransactionCandidate,
        stage: RejectionStage,
        reason: str,
        details: str,
    ) -> ValidationOutcome:
        return ValidationOutcome(
            digest=candidate.digest,
            accepted=False,
            stage=stage,
            block_reason=reason,
            entry=None,
            details=details,
        )
