import asyncio

import httpx
import pytest

from shared.errors import InvalidTransition, NetworkError, ValidationError
from services.order_service.board import OrderBoard
from services.order_service.statuses import OrderStatus

from conftest import json_body, make_order


def page_of(page: int, limit: int = 10, total: int = 30) -> dict:
    start = (page - 1) * limit
    return {
        "orders": [make_order(id=f"order-{n}") for n in range(start, min(start + limit, total))],
        "total": total,
    }


def paged_handler(total: int = 30):
    def handler(request: httpx.Request) -> httpx.Response:
        page = int(request.url.params.get("page", "1"))
        limit = int(request.url.params.get("limit", "10"))
        return httpx.Response(200, json=page_of(page, limit, total))
    return handler


async def settle():
    for _ in range(5):
        await asyncio.sleep(0)


async def test_refresh_loads_page_and_total(api, backend, admin_session):
    backend.on("GET", "/api/orders", handler=paged_handler())
    board = OrderBoard(api, admin_session)

    assert await board.refresh()
    assert len(board.orders) == 10
    assert board.paginator.total_pages == 3


async def test_moving_out_of_range_sends_nothing(api, backend, admin_session):
    backend.on("GET", "/api/orders", handler=paged_handler())
    board = OrderBoard(api, admin_session)
    await board.refresh()
    sent = len(backend.requests)

    assert not await board.go_to_page(0)
    assert not await board.go_to_page(4)
    assert not await board.previous_page()
    assert len(backend.requests) == sent
    assert board.paginator.page == 1


async def test_late_response_for_older_page_is_discarded(api, backend, admin_session):
    backend.on("GET", "/api/orders", handler=paged_handler())
    board = OrderBoard(api, admin_session)
    await board.refresh()

    page_two = backend.gate(("GET", "/api/orders", "2"))
    page_three = backend.gate(("GET", "/api/orders", "3"))
    older = asyncio.create_task(board.go_to_page(2))
    await settle()
    newer = asyncio.create_task(board.go_to_page(3))
    await settle()

    page_three.set()
    await newer
    page_two.set()
    await older

    assert board.paginator.page == 3
    assert sorted(o.id for o in board.orders) == [f"order-{n}" for n in range(20, 30)]


async def test_identical_queries_share_one_request(api, backend, admin_session):
    backend.on("GET", "/api/orders", handler=paged_handler())
    gate = backend.gate(("GET", "/api/orders", "1"))
    board = OrderBoard(api, admin_session)

    first = asyncio.create_task(board.refresh())
    second = asyncio.create_task(board.refresh())
    await settle()
    gate.set()

    assert await first is False
    assert await second is True
    assert len(backend.calls("GET", "/api/orders")) == 1


async def test_filters_reset_to_first_page(api, backend, admin_session):
    backend.on("GET", "/api/orders", handler=paged_handler())
    board = OrderBoard(api, admin_session)
    await board.refresh()
    await board.go_to_page(2)

    await board.set_filters(status="sended", search="  kasun ")

    last = backend.requests[-1]
    assert last.url.params["page"] == "1"
    assert last.url.params["status"] == "sended"
    assert last.url.params["search"] == "kasun"
    assert board.paginator.page == 1


async def test_status_change_is_visible_then_confirmed(api, backend, admin_session):
    backend.on("GET", "/api/orders", body={"orders": [make_order(id="o1")], "total": 1})
    seen = []

    def accept(request):
        seen.append(board.cache.get("o1").status)
        return httpx.Response(200, json={"success": True})

    backend.on("PUT", "/api/orders/o1/status", handler=accept)
    board = OrderBoard(api, admin_session)
    await board.refresh()

    updated = await board.change_status("o1", "sended")

    assert seen == [OrderStatus.SENDED]
    assert updated.status is OrderStatus.SENDED
    assert board.cache.get("o1").status is OrderStatus.SENDED
    assert json_body(backend.calls("PUT", "/api/orders/o1/status")[0]) == {"status": "sended"}


async def test_failed_status_write_rolls_back(api, backend, admin_session):
    backend.on("GET", "/api/orders", body={"orders": [make_order(id="o1")], "total": 1})
    seen = []

    def reject(request):
        seen.append(board.cache.get("o1").status)
        return httpx.Response(500, json={"message": "database offline"})

    backend.on("PUT", "/api/orders/o1/status", handler=reject)
    board = OrderBoard(api, admin_session)
    await board.refresh()

    with pytest.raises(NetworkError) as err:
        await board.change_status("o1", "sended")

    assert err.value.message == "database offline"
    assert seen == [OrderStatus.SENDED]
    assert board.cache.get("o1").status is OrderStatus.RECEIVED


async def test_illegal_courier_move_never_reaches_backend(api, backend, courier_session):
    backend.on("GET", "/api/courier/orders", body={"data": [make_order(id="o1")]})
    board = OrderBoard(api, courier_session)
    await board.refresh()

    with pytest.raises(InvalidTransition):
        await board.change_status("o1", "delivered")

    assert backend.calls("PUT", "/api/courier/o1/status") == []
    assert board.cache.get("o1").status is OrderStatus.RECEIVED


async def test_courier_search_matches_address(api, backend, courier_session):
    backend.on(
        "GET",
        "/api/courier/orders",
        body=[make_order(id="o1"), make_order(id="o2", address="Galle Road, Colombo")],
    )
    board = OrderBoard(api, courier_session)

    await board.set_filters(search="galle")

    assert [o.id for o in board.orders] == ["o2"]
    assert board.paginator.total == 1


async def test_page_size_change_goes_back_to_first_page(api, backend, admin_session):
    backend.on("GET", "/api/orders", handler=paged_handler())
    board = OrderBoard(api, admin_session)
    await board.refresh()
    await board.go_to_page(3)

    await board.set_limit(20)

    assert board.paginator.page == 1
    assert backend.requests[-1].url.params["limit"] == "20"
    assert board.paginator.total_pages == 2


async def test_unsupported_page_size_is_rejected(api, backend, admin_session):
    board = OrderBoard(api, admin_session)
    with pytest.raises(ValidationError):
        await board.set_limit(7)
    assert backend.requests == []
