"""
Contribution Pipeline — fetch → validate → aggregate → reconcile

Последовательная сборка компонентов из PipelineConfig:
1. PageWalker: история транзакций на target адрес → Ledger
2. aggregate: свёртка по отправителю + распределение funding
3. (опционально) JSON отчёты
4. (если задан пул) Reconciler: сверка с on-chain таблицей unclaimed

Любая фатальная ошибка (PipelineError) пробрасывается вызывающему коду.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.core.config import PipelineConfig, RpcConfig
from src.core.errors import ConfigError
from src.gatekeeper.validator import TransactionValidator
from src.ledger.aggregator import AggregationResult, aggregate
from src.ledger.page_walker import PageWalker, WalkResult
from src.reconcile.pool_state import PoolStateFetcher
from src.reconcile.reconciler import Reconciler, ReconciliationResult
from src.reporting.json_reports import save_reports
from src.rpc.client import SuiRpcClient
from src.rpc.methods import query_transactions_to_address


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineReport:
    """Итог запуска pipeline."""

    walk: WalkResult
    aggregation: AggregationResult
    reconciliation: Optional[ReconciliationResult] = None

    @property
    def funding_allowed(self) -> bool:
        """Funding допустим только после успешной сверки."""
        return (
            self.reconciliation is not None
            and self.reconciliation.passed
            and self.aggregation.is_conserved
        )


class ContributionPipeline:
    """Оркестрация pipeline для одного target адреса."""

    def __init__(
        self,
        config: PipelineConfig,
        client: Optional[SuiRpcClient] = None,
        pool_client: Optional[SuiRpcClient] = None,
    ):
        """
        Args:
            config: конфигурация pipeline
            client: клиент для истории транзакций (по умолчанию из config.rpc)
            pool_client: клиент для состояния пула (по умолчанию из config.pool.rpc_url)
        """
        self.config = config
        self.client = client if client is not None else SuiRpcClient(config.rpc)
        self._pool_client = pool_client
        self.validator = TransactionValidator(config.ledger.target_address)

    @property
    def pool_client(self) -> SuiRpcClient:
        if self._pool_client is None:
            if self.config.pool is None:
                raise ConfigError("Pool is not configured", key="TARGET_POOL_OBJECT_ID")
            if self.config.pool.rpc_url == self.config.rpc.url:
                self._pool_client = self.client
            else:
                rpc = self.config.rpc
                self._pool_client = SuiRpcClient(
                    RpcConfig(
                        url=self.config.pool.rpc_url,
                        timeout_sec=rpc.timeout_sec,
                        max_retries=rpc.max_retries,
                        backoff_factor=rpc.backoff_factor,
                        backoff_max_sec=rpc.backoff_max_sec,
                        status_forcelist=rpc.status_forcelist,
                    )
                )
        return self._pool_client

    def run_ledger(self) -> PipelineReport:
        """Построение ledger, агрегация и отчёты (без сверки)."""
        ledger_config = self.config.ledger
        logger.info("Fetching transactions to %s from %s", ledger_config.target_address, self.client.url)

        walker = PageWalker(
            client=self.client,
            validator=self.validator,
            request=query_transactions_to_address(
                ledger_config.target_address,
                ledger_config.page_limit,
                ledger_config.descending_order,
            ),
            start_time_ms=ledger_config.start_time_ms,
            end_time_ms=ledger_config.end_time_ms,
        )
        walk = walker.walk()
        aggregation = aggregate(walk.ledger)

        if self.config.output_dir is not None:
            save_reports(
                walk.ledger,
                aggregation.contributions,
                self.config.output_dir,
                self.config.report_prefix,
            )

        return PipelineReport(walk=walk, aggregation=aggregation)

    def run(self) -> PipelineReport:
        """
        Полный pipeline со сверкой.

        Raises:
            ConfigError: пул не настроен
            ReconciliationMismatchError: агрегат не совпадает с пулом
        """
        if self.config.pool is None:
            raise ConfigError("Pool is not configured", key="TARGET_POOL_OBJECT_ID")

        report = self.run_ledger()
        reconciler = Reconciler(PoolStateFetcher(self.pool_client))
        reconciliation = reconciler.reconcile(report.aggregation, self.config.pool.pool_object_id)

        return PipelineReport(
            walk=report.walk,
            aggregation=report.aggregation,
            reconciliation=reconciliation,
        )

    def close(self) -> None:
        self.client.close()
        if self._pool_client is not None and self._pool_client is not self.client:
            self._pool_client.close()
