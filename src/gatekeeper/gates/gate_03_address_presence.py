"""GATE 3: Присутствие target адреса во inputs

Target адрес должен буквально присутствовать среди address inputs
транзакции. Защищает от транзакций, которые лишь косвенно затрагивают
баланс target, но не являются переводом на него.

Сравнение строгое (строковое равенство), без нормализации регистра.
"""

from dataclasses import dataclass

from src.core.domain.transaction import TransactionCandidate


@dataclass(frozen=True)
class Gate03Result:
    """Результат GATE 3."""

    entry_allowed: bool
    block_reason: str

    # Диагностика
    address_inputs: tuple[str, ...]

    # Детали
    details: str


class Gate03AddressPresence:
    """GATE 3: Address presence."""

    def __init__(self, target_address: str):
        self.target_address = target_address

    def evaluate(self, candidate: TransactionCandidate) -> Gate03Result:
        """Оценка GATE 3.

        Форма inputs уже проверена GATE 2, но gate не полагается на это
        и пропускает элементы неожиданной формы.

        Args:
            candidate: транзакция из RPC

        Returns:
            Gate03Result с решением о допуске
        """
        inner = candidate.inner_transaction
        inputs = inner.get("inputs") if isinstance(inner, dict) else None
        if not isinstance(inputs, list):
            inputs = []

        address_inputs = tuple(
            item["value"]
            for item in inputs
            if isinstance(item, dict) and item.get("valueType") == "address"
            and isinstance(item.get("value"), str)
        )

        if self.target_address not in address_inputs:
            return Gate03Result(
                entry_allowed=False,
                block_reason="target_address_not_in_inputs",
                address_inputs=address_inputs,
                details=f"Target {self.target_address} not among address inputs {list(address_inputs)}",
            )

        return Gate03Result(
            entry_allowed=True,
            block_reason="",
            address_inputs=address_inputs,
            details="PASS",
        )
