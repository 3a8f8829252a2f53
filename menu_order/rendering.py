"""Rendering helpers for dishes, cart lines and order status."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping

from rich.text import Text

from menu_order.config import CURRENCY_SYMBOL, DECIMAL_SEPARATOR, THOUSANDS_SEPARATOR
from menu_order.constant import NOTE_KEY, ORDER_STATUS_LABELS
from menu_order.data import effective_price
from menu_order.models import CartLine, CartState, Customization, Dish

_CENTS = Decimal("0.01")


def format_money(amount: Decimal | int | float) -> str:
    """Format an amount as ``R$ 1.234,50`` using the configured separators."""
    value = Decimal(str(amount)).quantize(_CENTS, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, cents = f"{abs(value):,.2f}".split(".")
    whole = whole.replace(",", THOUSANDS_SEPARATOR)
    return f"{sign}{CURRENCY_SYMBOL} {whole}{DECIMAL_SEPARATOR}{cents}"


def badge_style(category: str) -> str:
    """Return a consistent badge style for category tags."""
    if category == "mains":
        return "bold #ffffff on #b23a48"
    if category == "desserts":
        return "bold #ffffff on #2f6db5"
    return "bold #0b1f0f on #5fbf72"


def category_badge(category: str) -> str:
    return category[:1].upper() if category else "?"


def format_dish_label(dish: Dish) -> Text:
    """Render a dish with its category tag and effective price."""
    text = Text()
    text.append(category_badge(dish.category), style=badge_style(dish.category))
    text.append(f" {dish.name}  ")
    price = effective_price(dish)
    if price != dish.price:
        text.append(format_money(dish.price), style="dim strike")
        text.append(" ")
        text.append(format_money(price), style="bold #ffb347")
    else:
        text.append(format_money(price))
    return text


def format_customization_tags(customizations: Mapping[str, Customization]) -> Text:
    """Render selected customizations as compact tags, notes last."""
    text = Text()
    keys = sorted(key for key in customizations if key != NOTE_KEY)
    for idx, key in enumerate(keys):
        if idx > 0:
            text.append(" ")
        customization = customizations[key]
        label = customization.label
        if customization.surcharge > 0:
            label = f"{label} +{format_money(customization.surcharge)}"
        text.append(f"[{label}]", style="white")
    if NOTE_KEY in customizations:
        if keys:
            text.append(" ")
        text.append(f'"{customizations[NOTE_KEY].label}"', style="italic")
    return text


def format_cart_line(line: CartLine) -> Text:
    text = Text()
    text.append(f"{line.quantity}x ", style="bold")
    text.append(line.display_name)
    text.append(f"  {format_money(line.line_total)}", style="bold")
    return text


def format_order_status(status: str) -> str:
    return ORDER_STATUS_LABELS.get(status, status.replace("_", " ").title())


def format_order_summary(cart: CartState) -> Text:
    """Render every cart line with its per-unit price, then the order total."""
    text = Text()
    for idx, line in enumerate(cart.lines):
        if idx > 0:
            text.append("\n")
        text.append_text(format_cart_line(line))
        text.append(f"\n    {line.quantity} × {format_money(line.unit_price + line.unit_surcharge)}", style="dim")
        if line.customizations:
            text.append("\n    ")
            text.append_text(format_customization_tags(line.customizations))
    if cart.lines:
        text.append("\n\n")
    text.append(f"{cart.total_unit_count} item(s), total {format_money(cart.grand_total)}", style="bold")
    return text
