"""Static menu catalog and customization helpers."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Mapping

from menu_order.constant import (
    ADD_ON_CATALOG,
    CATEGORY_CUSTOMIZATION_DEFAULTS,
    CATEGORY_LABELS,
    DIETARY_FILTERS,
    DISH_CUSTOMIZATION_OVERRIDES,
    DISH_META_BY_ID,
    NOTE_KEY,
    NOTE_MAX_LENGTH,
    REMOVAL_CATALOG,
)
from menu_order.models import Customization, Dish, LineCandidate


def _money(value: object) -> Decimal:
    return Decimal(str(value))


DISHES_BY_ID: dict[str, Dish] = {
    dish_id: Dish(
        dish_id=dish_id,
        name=str(meta["name"]),
        description=str(meta.get("description", "")),
        category=str(meta["category"]),
        price=_money(meta["price"]),
        promotion_price=_money(meta["promotion_price"]) if meta.get("promotion_price") is not None else None,
        tags=frozenset(meta.get("tags", [])),  # type: ignore[arg-type]
        available=bool(meta.get("available", True)),
    )
    for dish_id, meta in DISH_META_BY_ID.items()
}

CUSTOMIZATION_CATALOG: dict[str, Customization] = {
    **{
        option_id: Customization(label=str(meta["label"]), surcharge=_money(meta["surcharge"]))
        for option_id, meta in ADD_ON_CATALOG.items()
    },
    **{option_id: Customization(label=label) for option_id, label in REMOVAL_CATALOG.items()},
}


def effective_price(dish: Dish) -> Decimal:
    """Promotional price when the dish is on promotion and has one, else the list price."""
    if dish.is_promotion and dish.promotion_price is not None:
        return dish.promotion_price
    return dish.price


def filter_dishes(category: str = "all", filters: Iterable[str] = (), query: str = "") -> list[Dish]:
    """List available dishes matching a category, every dietary filter and a text query."""
    if category not in CATEGORY_LABELS:
        raise ValueError(f"Unknown category: {category}")
    selected = set(filters)
    unknown = selected - set(DIETARY_FILTERS)
    if unknown:
        raise ValueError(f"Unknown filters: {', '.join(sorted(unknown))}")

    q = query.strip().lower()
    results = []
    for dish in DISHES_BY_ID.values():
        if not dish.available:
            continue
        if category != "all" and dish.category != category:
            continue
        if not selected <= dish.tags:
            continue
        if q and q not in dish.name.lower() and q not in dish.description.lower():
            continue
        results.append(dish)
    return results


def available_customizations_for_dish(dish_id: str) -> list[str]:
    """Resolve which customization ids can be chosen for the given dish."""
    dish = DISHES_BY_ID.get(dish_id)
    if dish is None:
        return []
    option_ids = list(CATEGORY_CUSTOMIZATION_DEFAULTS.get(dish.category, []))
    overrides = DISH_CUSTOMIZATION_OVERRIDES.get(dish_id, {})
    for option_id in overrides.get("remove", []):
        if option_id in option_ids:
            option_ids.remove(option_id)
    for option_id in overrides.get("add", []):
        if option_id not in option_ids:
            option_ids.append(option_id)
    return [option_id for option_id in option_ids if option_id in CUSTOMIZATION_CATALOG]


def customization_for_id(option_id: str) -> Customization:
    try:
        return CUSTOMIZATION_CATALOG[option_id]
    except KeyError:
        raise ValueError(f"Unknown customization: {option_id}") from None


def toggle_customization(selection: Mapping[str, Customization], option_id: str) -> dict[str, Customization]:
    """Return a copy of ``selection`` with ``option_id`` inserted if absent or removed if present."""
    updated = dict(selection)
    if option_id in updated:
        del updated[option_id]
    else:
        updated[option_id] = customization_for_id(option_id)
    return updated


def with_note(selection: Mapping[str, Customization], text: str) -> dict[str, Customization]:
    """Attach a free-text note; blank text drops it."""
    updated = dict(selection)
    normalized = " ".join(text.split())[:NOTE_MAX_LENGTH]
    if normalized:
        updated[NOTE_KEY] = Customization(label=normalized)
    else:
        updated.pop(NOTE_KEY, None)
    return updated


def build_candidate(dish: Dish, selection: Mapping[str, Customization], quantity: int = 1) -> LineCandidate:
    return LineCandidate(
        item_id=dish.dish_id,
        display_name=dish.name,
        unit_price=effective_price(dish),
        quantity=quantity,
        customizations=dict(selection),
    )


def preview_total(dish: Dish, selection: Mapping[str, Customization], quantity: int = 1) -> Decimal:
    surcharge = sum((c.surcharge for c in selection.values()), Decimal("0"))
    return (effective_price(dish) + surcharge) * quantity
