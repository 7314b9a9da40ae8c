"""
Sui JSON-RPC client

JSON-RPC 2.0 поверх HTTPS POST. Транспорт — requests.Session с
HTTPAdapter и urllib3 Retry:
- timeout на каждый запрос
- retry с экспоненциальным backoff на connection errors и HTTP 429/5xx
- после исчерпания retries — RpcTransportError (фатально)

Все вызовы — идемпотентные чтения, поэтому POST разрешён для retry.
"""

import logging
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from src.core.config import RpcConfig
from src.core.errors import RpcResponseError, RpcTransportError


logger = logging.getLogger(__name__)

HEADERS = {"Content-Type": "application/json"}


def build_session(config: RpcConfig) -> requests.Session:
    """
    Session с retry policy из RpcConfig.

    Backoff: backoff_factor * 2^(n-1), не более backoff_max_sec.
    Retry-After от сервера учитывается.
    """
    retry_strategy = Retry(
        total=config.max_retries,
        connect=config.max_retries,
        read=config.max_retries,
        status=config.max_retries,
        backoff_factor=config.backoff_factor,
        backoff_max=config.backoff_max_sec,
        status_forcelist=config.status_forcelist,
        allowed_methods=frozenset({"POST"}),
        respect_retry_after_header=True,
    )
    adapter = HTTPAdapter(max_retries=retry_strategy)
    session = requests.Session()
    session.mount("http://", adapter)
    session.mount("https://", adapter)
    session.headers.update(HEADERS)
    return session


class SuiRpcClient:
    """Синхронный JSON-RPC клиент для одного endpoint."""

    def __init__(self, config: RpcConfig, session: Optional[requests.Session] = None):
        """
        Args:
            config: параметры endpoint, timeout и retry
            session: готовая session (по умолчанию build_session(config))
        """
        self.config = config
        self.session = session if session is not None else build_session(config)
        self._request_id = 0

    @property
    def url(self) -> str:
        return self.config.url

    def call(self, method: str, params: list[Any]) -> Any:
        """
        Вызов JSON-RPC метода.

        Args:
            method: имя метода (например, suix_queryTransactionBlocks)
            params: позиционные параметры

        Returns:
            Поле result ответа

        Raises:
            RpcTransportError: сеть / HTTP ошибка после retries
            RpcResponseError: ответ не JSON, не JSON-RPC, или содержит error
        """
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        logger.debug("RPC %s id=%s params=%s", method, self._request_id, params)

        try:
            response = self.session.post(
                self.config.url,
                json=payload,
                timeout=self.config.timeout_sec,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise RpcTransportError(
                f"Request to {self.config.url} failed: {e}", method=method
            ) from e

        try:
            body = response.json()
        except ValueError as e:
            raise RpcResponseError(f"Response is not valid JSON: {e}", method=method) from e

        if not isinstance(body, dict):
            raise RpcResponseError(
                f"Response is not a JSON-RPC object: {type(body).__name__}", method=method
            )

        if body.get("error") is not None:
            error = body["error"]
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message") if isinstance(error, dict) else error
            raise RpcResponseError(f"RPC error: {message}", method=method, code=code)

        if "result" not in body:
            raise RpcResponseError("Response has neither result nor error", method=method)

        return body["result"]

    def close(self) -> None:
        self.session.close()
