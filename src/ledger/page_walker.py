"""Page Walker — построение ledger из истории транзакций target адреса.

Порядок:
1. Последовательная пагинация suix_queryTransactionBlocks (cursor state machine)
2. Каждая транзакция страницы → TransactionValidator
3. Допущенные записи → Ledger (ключ digest, last write wins)
4. После пагинации: фильтр по окну времени [start, end] (включительно)
5. Диагностика повторных отправителей (только лог, не отказ)

Отказы валидатора логируются с digest и stage, обработка продолжается.
Отсутствие гарантированных полей транзакции и некорректная пагинация
останавливают обход (фатально).
"""

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Optional

from src.core.contracts.validators import TransactionPageValidator
from src.core.math.amounts import format_sui
from src.gatekeeper.validator import RejectionStage, TransactionValidator
from src.ledger.ledger import Ledger
from src.rpc.client import SuiRpcClient
from src.rpc.cursor import iterate_pages
from src.rpc.methods import RpcRequest


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalkResult:
    """Результат обхода истории транзакций."""

    # Ledger после фильтра по времени (вход агрегатора)
    ledger: Ledger

    # Ledger до фильтра по времени
    unfiltered_ledger: Ledger

    # Диагностика
    pages_fetched: int
    transactions_seen: int
    accepted_count: int
    rejections: Counter
    repeated_senders: dict[str, list[str]]

    @property
    def rejected_count(self) -> int:
        return sum(self.rejections.values())


class PageWalker:
    """Обход всех страниц одного запроса с валидацией каждой транзакции."""

    def __init__(
        self,
        client: SuiRpcClient,
        validator: TransactionValidator,
        request: RpcRequest,
        start_time_ms: Optional[int] = None,
        end_time_ms: Optional[int] = None,
    ):
        """
        Args:
            client: JSON-RPC клиент
            validator: валидатор транзакций для target адреса
            request: начальный запрос (filter + limit, cursor=None)
            start_time_ms: начало окна кампании (включительно)
            end_time_ms: конец окна кампании (включительно)
        """
        self.client = client
        self.validator = validator
        self.request = request
        self.start_time_ms = start_time_ms
        self.end_time_ms = end_time_ms
        self._page_validator = TransactionPageValidator()

    def walk(self) -> WalkResult:
        """Полный обход истории.

        Returns:
            WalkResult

        Raises:
            MissingMandatoryFieldError: транзакция без гарантированного поля
            PaginationProtocolError: некорректные метаданные пагинации
            RpcTransportError / RpcResponseError: ошибки транспорта
        """
        ledger = Ledger()
        rejections: Counter = Counter()
        pages_fetched = 0
        transactions_seen = 0
        accepted_count = 0

        for page in iterate_pages(self.client, self.request, self._page_validator):
            pages_fetched += 1
            for raw in page.items:
                transactions_seen += 1
                outcome = self.validator.validate_raw(raw)

                if not outcome.accepted:
                    rejections[outcome.stage] += 1
                    logger.info(
                        "Transaction %s rejected at %s: %s",
                        outcome.digest,
                        outcome.stage.value,
                        outcome.block_reason,
                    )
                    continue

                accepted_count += 1
                ledger.insert(outcome.entry)

        logger.info(
            "Pagination finished: %d pages, %d transactions, %d accepted, %d rejected %s",
            pages_fetched,
            transactions_seen,
            accepted_count,
            sum(rejections.values()),
            count_by_stage(rejections),
        )

        filtered = ledger.filter_by_time_range(self.start_time_ms, self.end_time_ms)
        if len(filtered) != len(ledger):
            logger.info(
                "Time range [%s, %s] dropped %d of %d entries",
                self.start_time_ms,
                self.end_time_ms,
                len(ledger) - len(filtered),
                len(ledger),
            )

        repeated = check_sender_uniqueness(filtered)

        return WalkResult(
            ledger=filtered,
            unfiltered_ledger=ledger,
            pages_fetched=pages_fetched,
            transactions_seen=transactions_seen,
            accepted_count=accepted_count,
            rejections=rejections,
            repeated_senders=repeated,
        )


def check_sender_uniqueness(ledger: Ledger) -> dict[str, list[str]]:
    """
    Диагностика: отправители с несколькими digest.

    Повторный вклад допустим, поэтому это не отказ, а сигнал для ручной
    проверки. Двойной учёт одной транзакции уже исключён ключом digest.

    Returns:
        sender → список digest (только для повторяющихся отправителей)
    """
    repeated = ledger.repeated_senders()
    for sender, digests in repeated.items():
        total = sum(ledger[d].amount for d in digests)
        logger.warning(
            "Duplicate sender found: %s, %d transactions (%s SUI total), digests: %s",
            sender,
            len(digests),
            format_sui(total),
            ", ".join(digests),
        )
    return repeated


def count_by_stage(rejections: Counter) -> dict[str, int]:
    """Counter[RejectionStage] → {stage.value: count} в порядке гейтов."""
    return {stage.value: rejections.get(stage, 0) for stage in RejectionStage}
