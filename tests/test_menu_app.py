from __future__ import annotations

import asyncio
from decimal import Decimal

import pytest

import menu_order.menu_app as menu_app_module
from menu_order.cart import CartAggregator
from menu_order.checkout_modal import CheckoutModal
from menu_order.menu_app import MenuOrderApp
from menu_order.models import Customization
from menu_order.persistence import CheckoutDetails, list_orders, save_order
from menu_order.tracking_modal import TrackingModal

DETAILS = CheckoutDetails(customer_name="Ana", customer_phone="555-0101", delivery_address="Rua A, 10")


@pytest.fixture
def app_env(temp_db, tmp_path, monkeypatch):
    """Headless app setup: temp database, temp debug log, printer reported missing."""
    monkeypatch.setattr(menu_app_module, "DEBUG_LOG_PATH", str(tmp_path / "debug.log"))
    monkeypatch.setattr(menu_app_module, "PRINT_TICKETS", True)
    monkeypatch.setattr(menu_app_module, "check_printer_dependencies", lambda: (False, "Printer not found"))
    return monkeypatch


def _run(scenario) -> None:
    asyncio.run(scenario())


def _two_variant_cart(make_candidate) -> CartAggregator:
    cart = CartAggregator()
    cart.add_line(make_candidate("X", Decimal("10.00")))
    cart.add_line(make_candidate("X", Decimal("10.00"), customizations={"bacon": Customization("Bacon", Decimal("8"))}))
    cart.add_line(make_candidate("Y", Decimal("5.00")))
    return cart


def test_submit_without_printer_clears_cart_and_skips_ticket(app_env, make_candidate) -> None:
    cart = CartAggregator()
    cart.add_line(make_candidate("X", Decimal("11.00"), quantity=2))
    app = MenuOrderApp(cart=cart)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            app._submit_order(DETAILS)
            await pilot.pause()

    _run(scenario)

    assert cart.is_empty
    [order] = list_orders()
    assert order.total_amount == Decimal("22")
    assert order.ticket_status == "SKIPPED"
    assert "ticket skipped" in app.system_status


def test_submit_records_print_failure_after_clearing_cart(app_env, make_candidate) -> None:
    app_env.setattr(menu_app_module, "check_printer_dependencies", lambda: (True, "Printer ready"))

    def broken_printer(order) -> None:
        raise RuntimeError("printer offline")

    app_env.setattr(menu_app_module, "print_order_ticket", broken_printer)
    cart = CartAggregator()
    cart.add_line(make_candidate("X"))
    app = MenuOrderApp(cart=cart)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            app._submit_order(DETAILS)
            await pilot.pause()

    _run(scenario)

    assert cart.is_empty
    assert [order.ticket_status for order in list_orders()] == ["PRINT_FAILED"]
    assert "print failed: printer offline" in app.system_status


def test_submit_marks_ticket_printed(app_env, make_candidate) -> None:
    app_env.setattr(menu_app_module, "check_printer_dependencies", lambda: (True, "Printer ready"))
    printed = []
    app_env.setattr(menu_app_module, "print_order_ticket", printed.append)
    cart = CartAggregator()
    cart.add_line(make_candidate("X", quantity=3))
    app = MenuOrderApp(cart=cart)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            app._submit_order(DETAILS)
            await pilot.pause()

    _run(scenario)

    assert cart.is_empty
    [order] = list_orders()
    assert order.ticket_status == "PRINTED"
    assert [saved.order_id for saved in printed] == [order.order_id]
    assert printed[0].items[0].quantity == 3


def test_rejected_submission_keeps_cart(app_env, make_candidate) -> None:
    cart = CartAggregator()
    cart.add_line(make_candidate("X"))
    before = cart.state
    app = MenuOrderApp(cart=cart)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            app._submit_order(CheckoutDetails(customer_name="", customer_phone="", delivery_address=""))
            await pilot.pause()

    _run(scenario)

    assert cart.state is before
    assert list_orders() == []
    assert app.system_status.startswith("Order not saved")


def test_checkout_modal_submits_through_enter(app_env, make_candidate) -> None:
    cart = CartAggregator()
    cart.add_line(make_candidate("X", Decimal("7.50"), quantity=2))
    app = MenuOrderApp(cart=cart)
    seen = {}

    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.press("ctrl+s")
            await pilot.pause()
            modal = app.screen
            seen["modal"] = modal
            seen["cart"] = modal.cart
            modal.values.update(
                customer_name=DETAILS.customer_name,
                customer_phone=DETAILS.customer_phone,
                delivery_address=DETAILS.delivery_address,
            )
            await pilot.press("enter")
            await pilot.pause()

    _run(scenario)

    assert isinstance(seen["modal"], CheckoutModal)
    assert seen["cart"].grand_total == Decimal("15")
    assert cart.is_empty
    [order] = list_orders()
    assert order.customer_name == "Ana"
    assert order.ticket_status == "SKIPPED"


def test_rejected_add_shows_on_status_line(app_env, make_candidate) -> None:
    cart = CartAggregator()
    cart.add_line(make_candidate("X"))
    before = cart.state
    app = MenuOrderApp(cart=cart)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            app._on_customized(make_candidate("Y", quantity=0, display_name="Soup"))
            await pilot.pause()

    _run(scenario)

    assert cart.state is before
    assert app.system_status.startswith("Could not add Soup")


def test_added_line_becomes_selected(app_env, make_candidate) -> None:
    cart = CartAggregator()
    cart.add_line(make_candidate("X"))
    cart.add_line(make_candidate("Y"))
    app = MenuOrderApp(cart=cart)
    selections = []

    async def scenario() -> None:
        async with app.run_test() as pilot:
            app._on_customized(make_candidate("X", customizations={"bacon": Customization("Bacon", Decimal("8"))}))
            await pilot.pause()
            selections.append(app.line_selected_index)
            app._on_customized(make_candidate("Y", quantity=2))
            await pilot.pause()
            selections.append(app.line_selected_index)

    _run(scenario)

    assert selections == [2, 1]
    assert [line.quantity for line in cart.lines] == [1, 3, 1]


def test_quantity_keys_apply_to_every_variant(app_env, make_candidate) -> None:
    cart = _two_variant_cart(make_candidate)
    app = MenuOrderApp(cart=cart)
    snapshots = []

    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.press("j")
            await pilot.press("+")
            await pilot.pause()
            snapshots.append([(line.item_id, line.quantity) for line in cart.lines])
            await pilot.press("-")
            await pilot.press("-")
            await pilot.pause()
            snapshots.append([(line.item_id, line.quantity) for line in cart.lines])

    _run(scenario)

    assert snapshots[0] == [("X", 2), ("X", 2), ("Y", 1)]
    assert snapshots[1] == [("Y", 1)]


def test_delete_key_removes_every_variant(app_env, make_candidate) -> None:
    cart = _two_variant_cart(make_candidate)
    app = MenuOrderApp(cart=cart)

    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.press("j")
            await pilot.press("j")
            await pilot.press("d")
            await pilot.pause()

    _run(scenario)

    assert [line.item_id for line in cart.lines] == ["Y"]


def test_tracking_key_opens_orders_and_advances_status(app_env, make_candidate) -> None:
    cart = CartAggregator()
    cart.add_line(make_candidate("X"))
    save_order(cart.order_lines(), DETAILS)
    app = MenuOrderApp()
    seen = {}

    async def scenario() -> None:
        async with app.run_test() as pilot:
            await pilot.press("t")
            await pilot.pause()
            seen["modal"] = app.screen
            await pilot.press("s")
            await pilot.pause()
            seen["orders"] = list(app.screen.orders)

    _run(scenario)

    assert isinstance(seen["modal"], TrackingModal)
    assert [order.status for order in seen["orders"]] == ["confirmed"]
