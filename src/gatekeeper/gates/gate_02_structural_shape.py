"""GATE 2: Структура inner transaction

Допускается только плоский перевод значения:
- kind == "ProgrammableTransaction"
- inputs — список, каждый input: {"type": "pure", "valueType": "u64" | "address", "value": str}
- команды (transactions, если присутствуют) только SplitCoins / TransferObjects

Любая другая форма (вызов контракта, object inputs, вложенные структуры,
мусор вместо списка) отклоняется. Gate никогда не бросает exception на
некорректных данных: форма неизвестна заранее.
"""

from dataclasses import dataclass
from typing import Any

from src.core.domain.transaction import TransactionCandidate


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class Gate02Result:
    """Результат GATE 2."""

    entry_allowed: bool
    block_reason: str

    # Диагностика
    kind: str
    input_count: int
    command_names: tuple[str, ...]

    # Детали
    details: str


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class Gate02Config:
    """Конфигурация GATE 2."""

    expected_kind: str = "ProgrammableTransaction"
    input_type: str = "pure"
    allowed_value_types: tuple[str, ...] = ("u64", "address")
    allowed_commands: tuple[str, ...] = ("SplitCoins", "TransferObjects")


# =============================================================================
# GATE 2
# =============================================================================


class Gate02StructuralShape:
    """GATE 2: Structural shape.

    Порядок проверок:
    1. inner transaction — объект с kind == expected_kind
    2. inputs — список строго типизированных pure inputs
    3. команды — только разрешённые (если список команд присутствует)
    """

    def __init__(self, config: Gate02Config | None = None):
        self.config = config or Gate02Config()

    def evaluate(self, candidate: TransactionCandidate) -> Gate02Result:
        """Оценка GATE 2.

        Args:
            candidate: транзакция из RPC

        Returns:
            Gate02Result с решением о допуске
        """
        inner = candidate.inner_transaction

        # 1. kind
        if not isinstance(inner, dict):
            return self._blocked_result(
                "not_an_object",
                kind="",
                details=f"inner transaction is {type(inner).__name__}",
            )

        kind = inner.get("kind")
        if kind != self.config.expected_kind:
            return self._blocked_result(
                f"unexpected_kind: {kind!r}",
                kind=str(kind),
                details=f"Expected kind {self.config.expected_kind!r}, got {kind!r}",
            )

        # 2. inputs
        inputs = inner.get("inputs")
        if not isinstance(inputs, list):
            return self._blocked_result(
                "inputs_not_a_list",
                kind=kind,
                details="inputs is missing or not a list",
            )

        for index, item in enumerate(inputs):
            input_valid, input_error = self._validate_input(item)
            if not input_valid:
                return self._blocked_result(
                    f"invalid_input[{index}]: {input_error}",
                    kind=kind,
                    input_count=len(inputs),
                    details=f"Input {index} rejected: {input_error}",
                )

        # 3. команды
        commands = inner.get("transactions")
        command_names: tuple[str, ...] = ()
        if commands is not None:
            commands_valid, names, command_error = self._validate_commands(commands)
            command_names = names
            if not commands_valid:
                return self._blocked_result(
                    f"invalid_command: {command_error}",
                    kind=kind,
                    input_count=len(inputs),
                    command_names=command_names,
                    details=f"Command list rejected: {command_error}",
                )

        # 4. PASS
        return Gate02Result(
            entry_allowed=True,
            block_reason="",
            kind=kind,
            input_count=len(inputs),
            command_names=command_names,
            details="PASS",
        )

    def _validate_input(self, item: Any) -> tuple[bool, str]:
        """Проверка одного input.

        Returns:
            (is_valid, error_message)
        """
        if not isinstance(item, dict):
            return False, f"input is {type(item).__name__}"
        if item.get("type") != self.config.input_type:
            return False, f"type={item.get('type')!r}"
        if item.get("valueType") not in self.config.allowed_value_types:
            return False, f"valueType={item.get('valueType')!r}"
        if not isinstance(item.get("value"), str):
            return False, f"value is {type(item.get('value')).__name__}"
        return True, ""

    def _validate_commands(self, commands: Any) -> tuple[bool, tuple[str, ...], str]:
        """Проверка списка команд.

        Каждая команда — объект с единственным ключом, именем команды.

        Returns:
            (is_valid, command_names, error_message)
        """
        if not isinstance(commands, list):
            return False, (), "transactions is not a list"

        names = []
        for index, command in enumerate(commands):
            if not isinstance(command, dict) or len(command) != 1:
                return False, tuple(names), f"command[{index}] is malformed"
            name = next(iter(command))
            names.append(name)
            if name not in self.config.allowed_commands:
                return False, tuple(names), f"command[{index}]={name}"

        return True, tuple(names), ""

    def _blocked_result(
        self,
        reason: str,
        kind: str,
        details: str,
        input_count: int = 0,
        command_names: tuple[str, ...] = (),
    ) -> Gate02Result:
        return Gate02Result(
            entry_allowed=False,
            block_reason=reason,
            kind=kind,
            input_count=input_count,
            command_names=command_names,
            details=details,
        )
