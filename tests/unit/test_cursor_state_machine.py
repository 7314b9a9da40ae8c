"""
Unit тесты для rpc/cursor.py

Покрытие:
- decode_page: OK / SCHEMA_ERROR, hasNextPage без cursor
- Переходы FETCHING → HAS_MORE → FETCHING → DONE
- Повтор cursor и вызовы вне состояния → PaginationProtocolError
- iterate_pages: ровно N запросов на N страниц, cursor из предыдущей страницы
"""

import pytest

from src.core.contracts import TransactionPageValidator
from src.core.errors import PaginationProtocolError
from src.rpc import (
    CursorState,
    CursorStateMachine,
    PageDecodeStatus,
    decode_page,
    iterate_pages,
    query_transactions_to_address,
)


@pytest.fixture
def page_validator():
    return TransactionPageValidator()


@pytest.fixture
def request_body():
    return query_transactions_to_address("0xtarget", limit=2)


# =============================================================================
# DECODE
# =============================================================================


def test_decode_page_ok(page_validator, make_page):
    decoded = decode_page(make_page([{"digest": "d1"}], next_cursor="c1"), page_validator)

    assert decoded.ok is True
    assert decoded.status == PageDecodeStatus.OK
    assert decoded.page.items == [{"digest": "d1"}]
    assert decoded.page.has_next_page is True
    assert decoded.page.next_cursor == "c1"


def test_decode_page_schema_error(page_validator):
    decoded = decode_page({"data": []}, page_validator)

    assert decoded.ok is False
    assert decoded.status == PageDecodeStatus.SCHEMA_ERROR
    assert decoded.page is None
    assert "hasNextPage" in decoded.error


def test_decode_page_has_next_without_cursor(page_validator, make_page):
    decoded = decode_page(make_page([], next_cursor=None, has_next_page=True), page_validator)

    assert decoded.status == PageDecodeStatus.SCHEMA_ERROR
    assert "nextCursor" in decoded.error


def test_decode_page_last_page_with_cursor(page_validator, make_page):
    """hasNextPage=false с непустым cursor — последняя страница."""
    decoded = decode_page(make_page([], next_cursor="c9", has_next_page=False), page_validator)

    assert decoded.ok is True
    assert decoded.page.has_next_page is False


# =============================================================================
# STATE MACHINE
# =============================================================================


def test_state_transitions(page_validator, make_page):
    machine = CursorStateMachine("m")
    assert machine.state == CursorState.FETCHING

    machine.on_page(decode_page(make_page([], next_cursor="c1"), page_validator))
    assert machine.state == CursorState.HAS_MORE
    assert machine.cursor == "c1"

    assert machine.advance() == "c1"
    assert machine.state == CursorState.FETCHING

    machine.on_page(decode_page(make_page([]), page_validator))
    assert machine.is_done
    assert machine.pages_fetched == 2


def test_repeated_cursor_is_protocol_error(page_validator, make_page):
    machine = CursorStateMachine("m")
    machine.on_page(decode_page(make_page([], next_cursor="c1"), page_validator))
    machine.advance()

    with pytest.raises(PaginationProtocolError) as exc_info:
        machine.on_page(decode_page(make_page([], next_cursor="c1"), page_validator))

    assert exc_info.value.cursor == "c1"
    assert exc_info.value.method == "m"


def test_initial_cursor_counts_as_seen(page_validator, make_page):
    machine = CursorStateMachine("m", initial_cursor="c0")

    with pytest.raises(PaginationProtocolError):
        machine.on_page(decode_page(make_page([], next_cursor="c0"), page_validator))


def test_malformed_page_is_protocol_error(page_validator):
    machine = CursorStateMachine("m")

    with pytest.raises(PaginationProtocolError):
        machine.on_page(decode_page({"data": "nope"}, page_validator))


def test_page_after_done_is_protocol_error(page_validator, make_page):
    machine = CursorStateMachine("m")
    machine.on_page(decode_page(make_page([]), page_validator))

    with pytest.raises(PaginationProtocolError):
        machine.on_page(decode_page(make_page([]), page_validator))


def test_advance_without_more_pages(page_validator):
    machine = CursorStateMachine("m")

    with pytest.raises(PaginationProtocolError):
        machine.advance()


# =============================================================================
# ITERATION
# =============================================================================


def test_iterate_three_pages_three_requests(make_client, make_page, page_validator, request_body):
    """3 страницы → ровно 3 запроса, cursor берётся из предыдущей страницы."""
    client, session = make_client([
        make_page([{"digest": "d1"}, {"digest": "d2"}], next_cursor="c1"),
        make_page([{"digest": "d3"}, {"digest": "d4"}], next_cursor="c2"),
        make_page([{"digest": "d5"}]),
    ])

    pages = list(iterate_pages(client, request_body, page_validator))

    assert len(pages) == 3
    assert [item["digest"] for page in pages for item in page.items] == ["d1", "d2", "d3", "d4", "d5"]
    assert len(session.requests) == 3
    assert session.cursors == [None, "c1", "c2"]
    # Остальные параметры не меняются между страницами
    assert all(r["params"][0] == session.requests[0]["params"][0] for r in session.requests)
    assert request_body.cursor is None


def test_iterate_single_empty_page(make_client, make_page, page_validator, request_body):
    client, session = make_client([make_page([])])

    pages = list(iterate_pages(client, request_body, page_validator))

    assert len(pages) == 1
    assert pages[0].items == []
    assert len(session.requests) == 1


def test_iterate_stops_on_malformed_page(make_client, make_page, page_validator, request_body):
    client, session = make_client([
        make_page([{"digest": "d1"}], next_cursor="c1"),
        {"data": [], "hasNextPage": True},
    ])

    iterator = iterate_pages(client, request_body, page_validator)
    next(iterator)

    with pytest.raises(PaginationProtocolError):
        next(iterator)

    assert len(session.requests) == 2
