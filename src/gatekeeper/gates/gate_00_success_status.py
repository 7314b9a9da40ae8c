"""GATE 0: Статус исполнения транзакции

Первый gate в цепочке. Транзакция допускается только если
effects.status.status == "success". Неуспешные транзакции не меняют
балансы получателя и пропускаются без ошибки.
"""

from dataclasses import dataclass
from typing import Final, Optional

from src.core.domain.transaction import TransactionCandidate


SUCCESS_STATUS: Final[str] = "success"


@dataclass(frozen=True)
class Gate00Result:
    """Результат GATE 0."""

    entry_allowed: bool
    block_reason: str

    # Диагностика
    status: Optional[str]

    # Детали
    details: str


class Gate00SuccessStatus:
    """GATE 0: Success status.

    Stateless. Пропускает только успешно исполненные транзакции.
    """

    def evaluate(self, candidate: TransactionCandidate) -> Gate00Result:
        """Оценка GATE 0.

        Args:
            candidate: транзакция из RPC

        Returns:
            Gate00Result с решением о допуске
        """
        if candidate.status != SUCCESS_STATUS:
            return Gate00Result(
                entry_allowed=False,
                block_reason=f"transaction_failed: status={candidate.status!r}",
                status=candidate.status,
                details=f"Transaction {candidate.digest} status is {candidate.status!r}",
            )

        return Gate00Result(
            entry_allowed=True,
            block_reason="",
            status=candidate.status,
            details="PASS",
        )
