"""Cursor State Machine — последовательная пагинация RPC.

Состояния:
- FETCHING: запрос страницы с текущим cursor в процессе
- HAS_MORE: сервер вернул hasNextPage=true и nextCursor
- DONE: сервер вернул hasNextPage=false

Переходы: FETCHING → HAS_MORE → FETCHING ... → DONE.

Страница N+1 зависит от cursor страницы N, поэтому пагинация строго
последовательна. Каждая страница проходит явный decode шаг
(PageDecodeResult с тегом OK / SCHEMA_ERROR). Некорректные метаданные
пагинации — фатальная PaginationProtocolError.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Optional

from src.core.contracts.validators import ContractValidator
from src.core.errors import PaginationProtocolError
from src.rpc.client import SuiRpcClient
from src.rpc.methods import RpcRequest


logger = logging.getLogger(__name__)


# =============================================================================
# DECODE
# =============================================================================


class PageDecodeStatus(str, Enum):
    """Тег результата decode шага."""

    OK = "OK"
    SCHEMA_ERROR = "SCHEMA_ERROR"


@dataclass(frozen=True)
class Page:
    """Одна декодированная страница."""

    items: List[Any]
    has_next_page: bool
    next_cursor: Optional[str]


@dataclass(frozen=True)
class PageDecodeResult:
    """Результат decode шага: страница или описание нарушения схемы."""

    status: PageDecodeStatus
    page: Optional[Page]
    error: str

    @property
    def ok(self) -> bool:
        return self.status == PageDecodeStatus.OK


def decode_page(result: Any, validator: ContractValidator) -> PageDecodeResult:
    """
    Decode поля result пагинированного ответа.

    Кроме схемы проверяется согласованность: hasNextPage=true без
    nextCursor не позволяет продолжить пагинацию.

    Args:
        result: поле result JSON-RPC ответа
        validator: валидатор схемы страницы

    Returns:
        PageDecodeResult (никогда не бросает exception)
    """
    if not validator.is_valid(result):
        return PageDecodeResult(
            status=PageDecodeStatus.SCHEMA_ERROR,
            page=None,
            error=validator.describe_errors(result),
        )

    has_next_page = result["hasNextPage"]
    next_cursor = result["nextCursor"]
    if has_next_page and not next_cursor:
        return PageDecodeResult(
            status=PageDecodeStatus.SCHEMA_ERROR,
            page=None,
            error="hasNextPage is true but nextCursor is empty",
        )

    return PageDecodeResult(
        status=PageDecodeStatus.OK,
        page=Page(items=list(result["data"]), has_next_page=has_next_page, next_cursor=next_cursor),
        error="",
    )


# =============================================================================
# STATE MACHINE
# =============================================================================


class CursorState(str, Enum):
    """Состояние пагинации."""

    FETCHING = "FETCHING"
    HAS_MORE = "HAS_MORE"
    DONE = "DONE"


class CursorStateMachine:
    """State machine одного пагинированного обхода.

    Хранит все выданные cursor: повтор cursor означает зацикливание
    на стороне сервера и является нарушением протокола.
    """

    def __init__(self, method: str, initial_cursor: Optional[str] = None):
        """
        Args:
            method: имя RPC метода (для сообщений ошибок)
            initial_cursor: cursor первой страницы (None — с начала)
        """
        self.method = method
        self.state = CursorState.FETCHING
        self.cursor = initial_cursor
        self.pages_fetched = 0
        self._seen_cursors: set[str] = set()
        if initial_cursor is not None:
            self._seen_cursors.add(initial_cursor)

    @property
    def is_done(self) -> bool:
        return self.state == CursorState.DONE

    def on_page(self, decoded: PageDecodeResult) -> Page:
        """Переход после получения страницы: FETCHING → HAS_MORE | DONE.

        Args:
            decoded: результат decode_page

        Returns:
            Декодированная страница

        Raises:
            PaginationProtocolError: нарушение схемы, повтор cursor,
                или вызов не в состоянии FETCHING
        """
        if self.state != CursorState.FETCHING:
            raise PaginationProtocolError(
                f"Page received in state {self.state.value}", method=self.method, cursor=self.cursor
            )

        if not decoded.ok or decoded.page is None:
            raise PaginationProtocolError(
                f"Malformed page: {decoded.error}", method=self.method, cursor=self.cursor
            )

        page = decoded.page
        self.pages_fetched += 1

        if not page.has_next_page:
            self.state = CursorState.DONE
            return page

        if page.next_cursor in self._seen_cursors:
            raise PaginationProtocolError(
                f"Server returned an already visited cursor {page.next_cursor!r}",
                method=self.method,
                cursor=self.cursor,
            )

        self._seen_cursors.add(page.next_cursor)
        self.cursor = page.next_cursor
        self.state = CursorState.HAS_MORE
        return page

    def advance(self) -> Optional[str]:
        """Переход HAS_MORE → FETCHING.

        Returns:
            cursor для следующего запроса
        """
        if self.state != CursorState.HAS_MORE:
            raise PaginationProtocolError(
                f"Cannot advance from state {self.state.value}", method=self.method, cursor=self.cursor
            )
        self.state = CursorState.FETCHING
        return self.cursor


# =============================================================================
# ITERATION
# =============================================================================


def iterate_pages(
    client: SuiRpcClient,
    request: RpcRequest,
    validator: ContractValidator,
) -> Iterator[Page]:
    """
    Последовательный обход всех страниц запроса.

    Завершается, когда сервер вернул hasNextPage=false. Ограничения на
    число страниц, кроме сообщаемого сервером, нет.

    Yields:
        Page в порядке получения

    Raises:
        PaginationProtocolError: некорректные метаданные пагинации
        RpcTransportError / RpcResponseError: ошибки транспорта
    """
    machine = CursorStateMachine(request.method, initial_cursor=request.cursor)
    current = request

    while True:
        result = client.call(current.method, current.params_list())
        page = machine.on_page(decode_page(result, validator))
        logger.debug(
            "%s page %d: %d items, hasNextPage=%s",
            request.method,
            machine.pages_fetched,
            len(page.items),
            page.has_next_page,
        )
        yield page

        if machine.is_done:
            break
        current = current.with_cursor(machine.advance())
