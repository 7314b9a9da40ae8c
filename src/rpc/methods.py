"""
RPC request builders

Параметры трёх методов, которые использует pipeline. Курсор всегда
находится в позиции params[1].
"""

from dataclasses import dataclass, replace
from typing import Any, Final, Optional


QUERY_TRANSACTION_BLOCKS: Final[str] = "suix_queryTransactionBlocks"
GET_OBJECT: Final[str] = "sui_getObject"
GET_DYNAMIC_FIELDS: Final[str] = "suix_getDynamicFields"

CURSOR_PARAM_INDEX: Final[int] = 1


@dataclass(frozen=True)
class RpcRequest:
    """
    Неизменяемое описание одного пагинируемого запроса.

    with_cursor возвращает новый запрос: исходный объект вызывающего
    кода не модифицируется между страницами.
    """

    method: str
    params: tuple[Any, ...]

    @property
    def cursor(self) -> Optional[str]:
        return self.params[CURSOR_PARAM_INDEX]

    def with_cursor(self, cursor: Optional[str]) -> "RpcRequest":
        params = list(self.params)
        params[CURSOR_PARAM_INDEX] = cursor
        return replace(self, params=tuple(params))

    def params_list(self) -> list[Any]:
        return list(self.params)


def query_transactions_to_address(
    address: str,
    limit: int,
    descending_order: bool = True,
    cursor: Optional[str] = None,
) -> RpcRequest:
    """Транзакции, отправленные на address (filter ToAddress)."""
    query = {
        "filter": {"ToAddress": address},
        "options": {
            "showBalanceChanges": True,
            "showEffects": True,
            "showEvents": True,
            "showInput": True,
        },
    }
    return RpcRequest(
        method=QUERY_TRANSACTION_BLOCKS,
        params=(query, cursor, limit, descending_order),
    )


def get_object_params(object_id: str) -> list[Any]:
    """Параметры sui_getObject с полным набором show-опций."""
    return [
        object_id,
        {
            "showType": True,
            "showOwner": True,
            "showPreviousTransaction": True,
            "showDisplay": True,
            "showContent": True,
            "showBcs": True,
            "showStorageRebate": True,
        },
    ]


def dynamic_fields_of(table_id: str, cursor: Optional[str] = None) -> RpcRequest:
    """Перечисление dynamic fields таблицы (limit определяет сервер)."""
    return RpcRequest(
        method=GET_DYNAMIC_FIELDS,
        params=(table_id, cursor, None),
    )
