"""
RPC transport: JSON-RPC client, request builders, cursor pagination.
"""

from src.rpc.client import SuiRpcClient, build_session
from src.rpc.cursor import (
    CursorState,
    CursorStateMachine,
    Page,
    PageDecodeResult,
    PageDecodeStatus,
    decode_page,
    iterate_pages,
)
from src.rpc.methods import (
    GET_DYNAMIC_FIELDS,
    GET_OBJECT,
    QUERY_TRANSACTION_BLOCKS,
    RpcRequest,
    dynamic_fields_of,
    get_object_params,
    query_transactions_to_address,
)

__all__ = [
    # Client
    "SuiRpcClient",
    "build_session",
    # Pagination
    "CursorState",
    "CursorStateMachine",
    "Page",
    "PageDecodeResult",
    "PageDecodeStatus",
    "decode_page",
    "iterate_pages",
    # Methods
    "QUERY_TRANSACTION_BLOCKS",
    "GET_OBJECT",
    "GET_DYNAMIC_FIELDS",
    "RpcRequest",
    "query_transactions_to_address",
    "get_object_params",
    "dynamic_fields_of",
]
