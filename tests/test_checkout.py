from __future__ import annotations

from decimal import Decimal

import pytest

from menu_order.cart import CartAggregator
from menu_order.data import DISHES_BY_ID, build_candidate, toggle_customization
from menu_order.persistence import CheckoutDetails, list_orders, load_order_items, save_order


def test_saved_order_matches_cart_totals(temp_db) -> None:
    cart = CartAggregator()
    burger = DISHES_BY_ID["classic_burger"]
    cart.add_line(build_candidate(burger, toggle_customization({}, "bacon"), quantity=2))
    cart.add_line(build_candidate(DISHES_BY_ID["fruit_salad"], {}))
    expected_total = cart.grand_total

    saved = save_order(
        cart.order_lines(),
        CheckoutDetails(customer_name="Ana", customer_phone="1", delivery_address="x"),
    )

    assert saved.total_amount == expected_total == Decimal("107.8")
    assert [item.quantity for item in load_order_items(saved.order_id)] == [2, 1]


def test_failed_submission_leaves_cart_untouched(temp_db) -> None:
    cart = CartAggregator()
    cart.add_line(build_candidate(DISHES_BY_ID["bruschetta"], {}))
    before = cart.state

    with pytest.raises(ValueError):
        save_order(cart.order_lines(), CheckoutDetails(customer_name="", customer_phone="", delivery_address=""))

    assert cart.state is before
    assert list_orders() == []
