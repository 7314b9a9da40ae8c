"""
Pool State — on-chain снапшот адресов пула

1. sui_getObject(pool_object_id) → проверка вложенной схемы
   content.fields.unclaimed.fields.{id.id, size}
2. suix_getDynamicFields(table_id) постранично → name.value каждой записи

Несоответствие схемы объекта пула — фатальная PoolSchemaError.
"""

import logging
from dataclasses import dataclass

from src.core.contracts.validators import DynamicFieldPageValidator, PoolObjectValidator
from src.core.domain.ledger_entry import PoolSnapshot
from src.core.errors import PoolSchemaError
from src.rpc.client import SuiRpcClient
from src.rpc.cursor import iterate_pages
from src.rpc.methods import GET_OBJECT, dynamic_fields_of, get_object_params


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnclaimedTable:
    """Ссылка на таблицу unclaimed внутри объекта пула."""

    table_id: str
    table_type: str
    declared_size: int


class PoolStateFetcher:
    """Загрузка снапшота адресов пула."""

    def __init__(self, client: SuiRpcClient):
        self.client = client
        self._object_validator = PoolObjectValidator()
        self._page_validator = DynamicFieldPageValidator()

    def fetch_unclaimed_table(self, object_id: str) -> UnclaimedTable:
        """
        Загрузка объекта пула и извлечение таблицы unclaimed.

        Raises:
            PoolSchemaError: result.data не соответствует схеме пула
        """
        result = self.client.call(GET_OBJECT, get_object_params(object_id))
        data = result.get("data") if isinstance(result, dict) else None
        if data is None:
            error = result.get("error") if isinstance(result, dict) else None
            raise PoolSchemaError(f"Object response has no data (error={error!r})", object_id=object_id)

        if not self._object_validator.is_valid(data):
            raise PoolSchemaError(
                f"Not valid pool object: {self._object_validator.describe_errors(data)}",
                object_id=object_id,
            )

        unclaimed = data["content"]["fields"]["unclaimed"]
        return UnclaimedTable(
            table_id=unclaimed["fields"]["id"]["id"],
            table_type=unclaimed["type"],
            declared_size=int(unclaimed["fields"]["size"]),
        )

    def fetch_table_id(self, object_id: str) -> str:
        """ID таблицы unclaimed объекта пула."""
        return self.fetch_unclaimed_table(object_id).table_id

    def fetch_addresses(self, table_id: str) -> list[str]:
        """
        Все ключи (адреса) таблицы в порядке перечисления.

        Raises:
            PaginationProtocolError: некорректная страница dynamic fields
        """
        addresses: list[str] = []
        for page in iterate_pages(self.client, dynamic_fields_of(table_id), self._page_validator):
            addresses.extend(item["name"]["value"] for item in page.items)
        return addresses

    def fetch_snapshot(self, object_id: str) -> PoolSnapshot:
        """
        Снапшот пула: table id + множество адресов.

        Объявленный size таблицы сверяется с числом перечисленных записей;
        расхождение логируется (сверка с агрегатом выполняется Reconciler).
        """
        table = self.fetch_unclaimed_table(object_id)
        addresses = self.fetch_addresses(table.table_id)

        if table.declared_size != len(addresses):
            logger.warning(
                "Table %s declares size %d but %d dynamic fields were enumerated",
                table.table_id,
                table.declared_size,
                len(addresses),
            )

        unique = frozenset(addresses)
        if len(unique) != len(addresses):
            logger.warning(
                "Table %s enumerated %d duplicate keys",
                table.table_id,
                len(addresses) - len(unique),
            )

        logger.info("Pool %s: table %s holds %d addresses", object_id, table.table_id, len(unique))
        return PoolSnapshot(
            object_id=object_id,
            table_id=table.table_id,
            addresses=unique,
            entry_count=len(addresses),
        )
