"""GATE 1: Исключение отправителя

Отправитель не может совпадать с адресом сбора (target). Перевод
с target самому себе иначе был бы засчитан как вклад.
"""

from dataclasses import dataclass

from src.core.domain.transaction import TransactionCandidate


@dataclass(frozen=True)
class Gate01Result:
    """Результат GATE 1."""

    entry_allowed: bool
    block_reason: str

    # Входные параметры для диагностики
    sender: str
    target_address: str

    # Детали
    details: str


class Gate01SenderExclusion:
    """GATE 1: Sender exclusion."""

    def __init__(self, target_address: str):
        """
        Args:
            target_address: адрес сбора вкладов
        """
        self.target_address = target_address

    def evaluate(self, candidate: TransactionCandidate) -> Gate01Result:
        """Оценка GATE 1: sender != target.

        Args:
            candidate: транзакция из RPC

        Returns:
            Gate01Result с решением о допуске
        """
        if candidate.sender == self.target_address:
            return Gate01Result(
                entry_allowed=False,
                block_reason="sender_is_target_address",
                sender=candidate.sender,
                target_address=self.target_address,
                details=f"Sender {candidate.sender} equals target address",
            )

        return Gate01Result(
            entry_allowed=True,
            block_reason="",
            sender=candidate.sender,
            target_address=self.target_address,
            details="PASS",
        )
