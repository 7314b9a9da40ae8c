"""
Fatal errors of the contribution pipeline.

Любая ошибка из этого модуля останавливает pipeline целиком.
Отклонение отдельной транзакции валидатором ошибкой НЕ является:
это значение ValidationOutcome, а не exception.

Каждая ошибка несёт stage (где произошла) и identifier (digest, table id,
object id, RPC method), чтобы результат можно было проверить вручную
до движения средств.
"""

from typing import Optional


class PipelineError(Exception):
    """Базовая фатальная ошибка pipeline."""

    def __init__(self, message: str, stage: str, identifier: Optional[str] = None):
        self.stage = stage
        self.identifier = identifier
        prefix = f"[{stage}]" if identifier is None else f"[{stage}:{identifier}]"
        super().__init__(f"{prefix} {message}")


class ConfigError(PipelineError):
    """Некорректная или отсутствующая конфигурация."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message, stage="config", identifier=key)


class MissingMandatoryFieldError(PipelineError):
    """В ответе RPC отсутствует поле, которое контракт RPC гарантирует."""

    def __init__(self, field_name: str, digest: Optional[str]):
        self.field_name = field_name
        super().__init__(
            f"Mandatory field '{field_name}' is missing from transaction",
            stage="decode",
            identifier=digest or "<unknown digest>",
        )


class PaginationProtocolError(PipelineError):
    """Некорректные метаданные пагинации (hasNextPage / nextCursor / data)."""

    def __init__(self, message: str, method: str, cursor: Optional[str]):
        self.method = method
        self.cursor = cursor
        super().__init__(
            f"{message} (cursor={cursor!r})",
            stage="pagination",
            identifier=method,
        )


class PoolSchemaError(PipelineError):
    """Объект пула не соответствует ожидаемой вложенной схеме."""

    def __init__(self, message: str, object_id: str):
        self.object_id = object_id
        super().__init__(message, stage="pool_object", identifier=object_id)


class RpcTransportError(PipelineError):
    """Сетевая ошибка или HTTP ошибка после исчерпания retries."""

    def __init__(self, message: str, method: str):
        self.method = method
        super().__init__(message, stage="rpc_transport", identifier=method)


class RpcResponseError(PipelineError):
    """JSON-RPC ответ содержит error или не является JSON-RPC ответом."""

    def __init__(self, message: str, method: str, code: Optional[int] = None):
        self.method = method
        self.code = code
        super().__init__(message, stage="rpc_response", identifier=method)


class ReconciliationMismatchError(PipelineError):
    """Агрегат не совпадает с on-chain снапшотом. Funding запрещён."""

    def __init__(self, message: str, table_id: str, result=None):
        self.table_id = table_id
        self.result = result
        super().__init__(message, stage="reconcile", identifier=table_id)
