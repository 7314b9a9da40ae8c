"""
Fake HTTP session и фабрики JSON объектов RPC.

FakeSession подменяет requests.Session внутри SuiRpcClient: ответы
выдаются из очереди (или вычисляются handler'ом), все запросы
записываются для проверок.
"""

from collections import deque
from typing import Any, Callable, Optional

import requests


TARGET = "0xtarget"
SENDER_A = "0xA"


# =============================================================================
# FAKE HTTP
# =============================================================================


class FakeResponse:
    """Минимальный аналог requests.Response."""

    def __init__(self, body: Any = None, status_code: int = 200, text: Optional[str] = None):
        self._body = body
        self.status_code = status_code
        self._text = text

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error", response=self)

    def json(self) -> Any:
        if self._text is not None:
            raise ValueError(f"Expecting value: {self._text[:20]!r}")
        return self._body


class FakeSession:
    """
    Fake requests.Session.

    responses: очередь FakeResponse / dict (JSON-RPC result) / Exception.
    handler: альтернатива очереди, (method, params) → result.
    """

    def __init__(self, responses=None, handler: Optional[Callable[[str, list], Any]] = None):
        self.responses = deque(responses or [])
        self.handler = handler
        self.requests: list[dict] = []
        self.timeouts: list[Any] = []
        self.headers: dict = {}
        self.closed = False

    def post(self, url, json=None, timeout=None):
        self.requests.append(json)
        self.timeouts.append(timeout)

        if self.handler is not None:
            result = self.handler(json["method"], json["params"])
            return FakeResponse({"jsonrpc": "2.0", "id": json["id"], "result": result})

        if not self.responses:
            raise AssertionError(f"Unexpected request: {json['method']}")

        item = self.responses.popleft()
        if isinstance(item, Exception):
            raise item
        if isinstance(item, FakeResponse):
            return item
        return FakeResponse({"jsonrpc": "2.0", "id": json["id"], "result": item})

    def close(self):
        self.closed = True

    @property
    def methods(self) -> list[str]:
        return [r["method"] for r in self.requests]

    @property
    def cursors(self) -> list[Any]:
        return [r["params"][1] for r in self.requests]


# =============================================================================
# FACTORIES
# =============================================================================


def build_transaction(
    digest: str = "digest-1",
    sender: str = SENDER_A,
    target: str = TARGET,
    sender_delta: str = "-1000",
    target_delta: str = "960",
    computation_cost: str = "30",
    storage_cost: str = "20",
    storage_rebate: str = "10",
    status: str = "success",
    timestamp_ms: str = "1710000000000",
) -> dict:
    """SuiTransactionBlockResponse простого перевода sender → target (fee 40)."""
    return {
        "digest": digest,
        "transaction": {
            "data": {
                "sender": sender,
                "transaction": {
                    "kind": "ProgrammableTransaction",
                    "inputs": [
                        {"type": "pure", "valueType": "u64", "value": target_delta.lstrip("-")},
                        {"type": "pure", "valueType": "address", "value": target},
                    ],
                    "transactions": [
                        {"SplitCoins": ["GasCoin", [{"Input": 0}]]},
                        {"TransferObjects": [[{"Result": 0}], {"Input": 1}]},
                    ],
                },
            },
        },
        "effects": {
            "status": {"status": status},
            "gasUsed": {
                "computationCost": computation_cost,
                "storageCost": storage_cost,
                "storageRebate": storage_rebate,
                "nonRefundableStorageFee": "0",
            },
        },
        "balanceChanges": [
            {"owner": {"AddressOwner": sender}, "coinType": "0x2::sui::SUI", "amount": sender_delta},
            {"owner": {"AddressOwner": target}, "coinType": "0x2::sui::SUI", "amount": target_delta},
        ],
        "timestampMs": timestamp_ms,
    }


def build_page(data: list, next_cursor: Optional[str] = None, has_next_page: Optional[bool] = None) -> dict:
    """Результат пагинированного метода."""
    if has_next_page is None:
        has_next_page = next_cursor is not None
    return {"data": data, "hasNextPage": has_next_page, "nextCursor": next_cursor}


def build_pool_object(table_id: str = "0xtable", size: str = "2") -> dict:
    """result.data объекта пула."""
    return {
        "objectId": "0xpool",
        "content": {
            "dataType": "moveObject",
            "type": "0xpkg::refund::RefundPool",
            "fields": {
                "unclaimed": {
                    "type": "0x2::table::Table<address, u64>",
                    "fields": {"id": {"id": table_id}, "size": size},
                },
            },
        },
    }


def build_dynamic_field(address: str) -> dict:
    return {
        "name": {"type": "address", "value": address},
        "objectId": f"0xfield-{address}",
        "objectType": "0x2::dynamic_field::Field<address, u64>",
    }

