from __future__ import annotations

from decimal import Decimal

from menu_order.data import DISHES_BY_ID
from menu_order.models import CartLine, CartState, Customization
from menu_order.rendering import (
    format_cart_line,
    format_customization_tags,
    format_dish_label,
    format_money,
    format_order_status,
    format_order_summary,
)


def test_format_money_uses_configured_separators() -> None:
    assert format_money(Decimal("10")) == "R$ 10,00"
    assert format_money(Decimal("1234.5")) == "R$ 1.234,50"
    assert format_money(0.125) == "R$ 0,13"


def test_customization_tags_list_surcharges_and_note_last() -> None:
    tags = format_customization_tags(
        {
            "note": Customization("well done"),
            "no_onion": Customization("No Onion"),
            "bacon": Customization("Bacon", Decimal("8")),
        }
    )
    assert tags.plain == '[Bacon +R$ 8,00] [No Onion] "well done"'


def test_cart_line_shows_quantity_and_total() -> None:
    line = CartLine(
        item_id="x",
        display_name="Classic Burger",
        unit_price=Decimal("39.90"),
        quantity=2,
        customizations={"bacon": Customization("Bacon", Decimal("8"))},
    )
    assert format_cart_line(line).plain == "2x Classic Burger  R$ 95,80"


def test_dish_label_shows_list_and_promotion_price() -> None:
    assert format_dish_label(DISHES_BY_ID["veggie_burger"]).plain == "M Veggie Burger  R$ 36,00 R$ 31,50"
    assert format_dish_label(DISHES_BY_ID["bruschetta"]).plain == "S Bruschetta  R$ 18,00"


def test_order_status_labels() -> None:
    assert format_order_status("out_for_delivery") == "Out for Delivery"
    assert format_order_status("on_hold") == "On Hold"


def test_order_summary_lists_every_line_then_total() -> None:
    burger = CartLine(
        item_id="burger",
        display_name="Classic Burger",
        unit_price=Decimal("39.90"),
        quantity=2,
        customizations={"bacon": Customization("Bacon", Decimal("8")), "note": Customization("no salt")},
    )
    salad = CartLine(item_id="salad", display_name="Fruit Salad", unit_price=Decimal("12"), quantity=1)

    summary = format_order_summary(CartState(lines=(burger, salad)))

    assert summary.plain.splitlines() == [
        "2x Classic Burger  R$ 95,80",
        "    2 × R$ 47,90",
        '    [Bacon +R$ 8,00] "no salt"',
        "1x Fruit Salad  R$ 12,00",
        "    1 × R$ 12,00",
        "",
        "3 item(s), total R$ 107,80",
    ]


def test_order_summary_of_empty_cart_is_just_the_total() -> None:
    assert format_order_summary(CartState()).plain == "0 item(s), total R$ 0,00"
