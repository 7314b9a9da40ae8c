"""
Configuration — параметры RPC, ledger и пула

Frozen dataclasses с default значениями. Чтение из окружения
выполняется только в PipelineConfig.from_env (CLI загружает .env заранее).
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Mapping, Optional

from src.core.errors import ConfigError


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_RPC_URL: Final[str] = "https://mainnet.suiet.app"

# Максимум транзакций за один вызов suix_queryTransactionBlocks
MAX_TX_PER_CALL_LIMIT: Final[int] = 50

# Retry policy: 5 попыток, backoff 0.5s * 2^n, timeout 30s на запрос
DEFAULT_TIMEOUT_SEC: Final[float] = 30.0
DEFAULT_MAX_RETRIES: Final[int] = 5
DEFAULT_BACKOFF_FACTOR: Final[float] = 0.5
DEFAULT_BACKOFF_MAX_SEC: Final[float] = 8.0
RETRY_STATUS_FORCELIST: Final[tuple[int, ...]] = (429, 500, 502, 503, 504)

DEFAULT_REPORT_PREFIX: Final[str] = "fetched-txs-to-target-address"


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class RpcConfig:
    """Параметры JSON-RPC транспорта."""

    url: str = DEFAULT_RPC_URL
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    max_retries: int = DEFAULT_MAX_RETRIES
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    backoff_max_sec: float = DEFAULT_BACKOFF_MAX_SEC
    status_forcelist: tuple[int, ...] = RETRY_STATUS_FORCELIST

    def __post_init__(self):
        if not self.url:
            raise ConfigError("RPC url must not be empty", key="url")
        if self.timeout_sec <= 0:
            raise ConfigError(f"timeout_sec must be > 0, got {self.timeout_sec}", key="timeout_sec")
        if self.max_retries < 0:
            raise ConfigError(f"max_retries must be >= 0, got {self.max_retries}", key="max_retries")
        if self.backoff_factor < 0:
            raise ConfigError(
                f"backoff_factor must be >= 0, got {self.backoff_factor}", key="backoff_factor"
            )


@dataclass(frozen=True)
class LedgerConfig:
    """
    Параметры построения ledger.

    start_time_ms / end_time_ms — включительное окно кампании (None = без границы).
    """

    target_address: str
    page_limit: int = MAX_TX_PER_CALL_LIMIT
    descending_order: bool = True
    start_time_ms: Optional[int] = None
    end_time_ms: Optional[int] = None

    def __post_init__(self):
        if not self.target_address:
            raise ConfigError("target_address must not be empty", key="target_address")
        if self.page_limit <= 0:
            raise ConfigError(f"page_limit must be > 0, got {self.page_limit}", key="page_limit")
        if (
            self.start_time_ms is not None
            and self.end_time_ms is not None
            and self.start_time_ms > self.end_time_ms
        ):
            raise ConfigError(
                f"start_time_ms {self.start_time_ms} > end_time_ms {self.end_time_ms}",
                key="start_time_ms",
            )


@dataclass(frozen=True)
class PoolConfig:
    """Параметры on-chain пула для сверки."""

    pool_object_id: str
    rpc_url: str = DEFAULT_RPC_URL

    def __post_init__(self):
        if not self.pool_object_id:
            raise ConfigError("pool_object_id must not be empty", key="pool_object_id")


@dataclass(frozen=True)
class PipelineConfig:
    """Полная конфигурация pipeline."""

    ledger: LedgerConfig
    rpc: RpcConfig = field(default_factory=RpcConfig)
    pool: Optional[PoolConfig] = None
    output_dir: Optional[Path] = None
    report_prefix: str = DEFAULT_REPORT_PREFIX

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PipelineConfig":
        """
        Сборка конфигурации из переменных окружения.

        Обязательна только TARGET_ADDRESS. PoolConfig создаётся, если задан
        TARGET_POOL_OBJECT_ID.

        Raises:
            ConfigError: если переменная отсутствует или некорректна
        """
        env = os.environ if environ is None else environ

        target_address = env.get("TARGET_ADDRESS", "").strip()
        if not target_address:
            raise ConfigError("TARGET_ADDRESS is not set", key="TARGET_ADDRESS")

        rpc_url = env.get("RPC_URL_FOR_TRANSACTIONS_FETCHING", DEFAULT_RPC_URL).strip()
        rpc = RpcConfig(
            url=rpc_url,
            timeout_sec=_env_float(env, "RPC_TIMEOUT_SEC", DEFAULT_TIMEOUT_SEC),
            max_retries=_env_int(env, "RPC_MAX_RETRIES", DEFAULT_MAX_RETRIES),
        )

        ledger = LedgerConfig(
            target_address=target_address,
            page_limit=_env_int(env, "MAX_TX_PER_CALL_LIMIT", MAX_TX_PER_CALL_LIMIT),
            start_time_ms=_env_optional_int(env, "START_TIME_MS"),
            end_time_ms=_env_optional_int(env, "END_TIME_MS"),
        )

        pool = None
        pool_object_id = env.get("TARGET_POOL_OBJECT_ID", "").strip()
        if pool_object_id:
            pool = PoolConfig(
                pool_object_id=pool_object_id,
                rpc_url=env.get("RPC_URL_FOR_POOL_STATE", rpc_url).strip(),
            )

        output_dir = env.get("REPORT_OUTPUT_DIR", "").strip()

        return cls(
            ledger=ledger,
            rpc=rpc,
            pool=pool,
            output_dir=Path(output_dir) if output_dir else None,
        )


# =============================================================================
# ENV HELPERS
# =============================================================================


def _env_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}", key=key)


def _env_optional_int(env: Mapping[str, str], key: str) -> Optional[int]:
    raw = env.get(key, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got {raw!r}", key=key)


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{key} must be a number, got {raw!r}", key=key)
