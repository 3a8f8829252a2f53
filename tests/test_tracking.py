from __future__ import annotations

from decimal import Decimal

from menu_order.cart import CartAggregator
from menu_order.models import Customization, LineCandidate
from menu_order.persistence import CheckoutDetails, load_order_items, save_order
from menu_order.tracking_modal import format_order_items, format_progress_row, next_status, progress_steps


def test_status_progression() -> None:
    assert next_status("pending") == "confirmed"
    assert next_status("confirmed") == "preparing"
    assert next_status("preparing") == "out_for_delivery"
    assert next_status("out_for_delivery") == "delivered"


def test_terminal_statuses_do_not_advance() -> None:
    assert next_status("delivered") is None
    assert next_status("cancelled") is None
    assert next_status("unknown") is None


def test_progress_steps_mark_the_current_step() -> None:
    assert progress_steps("preparing") == [
        ("pending", "done"),
        ("confirmed", "done"),
        ("preparing", "current"),
        ("out_for_delivery", "todo"),
    ]
    assert [state for _, state in progress_steps("pending")] == ["current", "todo", "todo", "todo"]


def test_progress_steps_for_finished_and_cancelled_orders() -> None:
    assert [state for _, state in progress_steps("delivered")] == ["done"] * 4
    assert [state for _, state in progress_steps("cancelled")] == ["todo"] * 4


def test_progress_row_text() -> None:
    assert format_progress_row("confirmed").plain == "✓ Received ─ ● Confirmed ─ ○ Preparing ─ ○ Out for delivery"


def test_order_items_render_persisted_lines(temp_db) -> None:
    cart = CartAggregator()
    cart.add_line(
        LineCandidate(
            item_id="burger",
            display_name="Classic Burger",
            unit_price=Decimal("39.90"),
            quantity=2,
            customizations={"bacon": Customization("Bacon", Decimal("8"))},
        )
    )
    cart.add_line(LineCandidate(item_id="salad", display_name="Fruit Salad", unit_price=Decimal("12")))
    saved = save_order(
        cart.order_lines(),
        CheckoutDetails(customer_name="Ana", customer_phone="1", delivery_address="x"),
    )

    text = format_order_items(load_order_items(saved.order_id))

    assert text.plain.splitlines() == [
        "2x Classic Burger  R$ 95,80  [Bacon +R$ 8,00]",
        "1x Fruit Salad  R$ 12,00",
    ]


def test_order_items_empty() -> None:
    assert format_order_items([]).plain == ""
