"""Cart aggregation: merge additions, keep derived totals consistent."""

from __future__ import annotations

import math
import threading
from decimal import Decimal
from typing import Mapping

from menu_order.models import (
    AddLine,
    CartCommand,
    CartLine,
    CartState,
    Clear,
    Customization,
    LineCandidate,
    OrderLine,
    RemoveLine,
    SetQuantity,
)


class InvalidLineInput(ValueError):
    """Raised when an add-to-cart request is malformed."""


class InvalidQuantityInput(ValueError):
    """Raised when a quantity update is not an integer."""


def _is_integer(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _to_money(value: object, name: str) -> Decimal:
    """Convert a non-negative finite number to Decimal or raise InvalidLineInput."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidLineInput(f"{name} must be a number, got {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidLineInput(f"{name} must be finite")
        amount = Decimal(str(value))
    else:
        amount = Decimal(value)
    if not amount.is_finite():
        raise InvalidLineInput(f"{name} must be finite")
    if amount < 0:
        raise InvalidLineInput(f"{name} must be >= 0")
    return amount


def _normalize_customizations(raw: object) -> dict[str, Customization]:
    if not isinstance(raw, Mapping):
        raise InvalidLineInput("customizations must be a mapping")

    normalized: dict[str, Customization] = {}
    for key, value in raw.items():
        if not isinstance(key, str) or not key:
            raise InvalidLineInput(f"customization key must be a non-empty string, got {key!r}")
        if isinstance(value, Customization):
            label, surcharge = value.label, value.surcharge
        elif isinstance(value, Mapping) and "label" in value:
            label, surcharge = value["label"], value.get("surcharge", 0)
        else:
            raise InvalidLineInput(f"customization {key!r} needs a label and surcharge")
        if not isinstance(label, str):
            raise InvalidLineInput(f"customization {key!r} label must be a string")
        normalized[key] = Customization(label=label, surcharge=_to_money(surcharge, f"surcharge of {key!r}"))
    return normalized


def validate_candidate(candidate: LineCandidate) -> CartLine:
    """Check an add request and return the line it would create."""
    if not isinstance(candidate, LineCandidate):
        raise InvalidLineInput(f"expected LineCandidate, got {type(candidate).__name__}")
    if not isinstance(candidate.item_id, str) or not candidate.item_id.strip():
        raise InvalidLineInput("item_id is required")
    if not isinstance(candidate.display_name, str):
        raise InvalidLineInput("display_name must be a string")
    if not _is_integer(candidate.quantity) or candidate.quantity < 1:
        raise InvalidLineInput(f"quantity must be a positive integer, got {candidate.quantity!r}")

    return CartLine(
        item_id=candidate.item_id,
        display_name=candidate.display_name,
        unit_price=_to_money(candidate.unit_price, "unit_price"),
        quantity=candidate.quantity,
        customizations=_normalize_customizations(candidate.customizations),
    )


def canonical_customizations(customizations: Mapping[str, Customization]) -> tuple[tuple[str, str, Decimal], ...]:
    """Order-independent encoding used only to compare customization sets."""
    return tuple(sorted((key, c.label, c.surcharge) for key, c in customizations.items()))


def line_key(line: CartLine) -> tuple[str, tuple[tuple[str, str, Decimal], ...]]:
    """Merge identity of a line: item id plus its exact customization set."""
    return (line.item_id, canonical_customizations(line.customizations))


def _with_quantity(line: CartLine, quantity: int) -> CartLine:
    return CartLine(
        item_id=line.item_id,
        display_name=line.display_name,
        unit_price=line.unit_price,
        quantity=quantity,
        customizations=line.customizations,
    )


def _add_line(state: CartState, candidate: LineCandidate) -> CartState:
    incoming = validate_candidate(candidate)
    key = line_key(incoming)

    lines = list(state.lines)
    for idx, existing in enumerate(lines):
        if line_key(existing) == key:
            # First write wins for name, price and customizations; only quantity accumulates.
            lines[idx] = _with_quantity(existing, existing.quantity + incoming.quantity)
            return CartState(lines=tuple(lines))

    lines.append(incoming)
    return CartState(lines=tuple(lines))


def _remove_line(state: CartState, item_id: str) -> CartState:
    return CartState(lines=tuple(line for line in state.lines if line.item_id != item_id))


def _set_quantity(state: CartState, item_id: str, quantity: int) -> CartState:
    if not _is_integer(quantity):
        raise InvalidQuantityInput(f"quantity must be an integer, got {quantity!r}")
    if quantity <= 0:
        return _remove_line(state, item_id)
    # Every variant of the item gets the same quantity.
    return CartState(
        lines=tuple(_with_quantity(line, quantity) if line.item_id == item_id else line for line in state.lines)
    )


def apply_command(state: CartState, command: CartCommand) -> CartState:
    """Return the state that results from one command; ``state`` is never modified."""
    if isinstance(command, AddLine):
        return _add_line(state, command.candidate)
    if isinstance(command, RemoveLine):
        return _remove_line(state, command.item_id)
    if isinstance(command, SetQuantity):
        return _set_quantity(state, command.item_id, command.quantity)
    if isinstance(command, Clear):
        return CartState()
    raise TypeError(f"Unknown cart command: {command!r}")


def to_order_line(line: CartLine) -> OrderLine:
    return OrderLine(
        item_id=line.item_id,
        display_name=line.display_name,
        quantity=line.quantity,
        unit_price=line.unit_price,
        surcharges={key: c.surcharge for key, c in line.customizations.items()},
        labels={key: c.label for key, c in line.customizations.items()},
        total=line.line_total,
    )


class CartAggregator:
    """Owns the session cart; every mutation is one atomic state transition."""

    def __init__(self, state: CartState | None = None) -> None:
        self._state = state if state is not None else CartState()
        self._lock = threading.Lock()

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return self._state.lines

    @property
    def grand_total(self) -> Decimal:
        return self._state.grand_total

    @property
    def total_unit_count(self) -> int:
        return self._state.total_unit_count

    @property
    def is_empty(self) -> bool:
        return self._state.is_empty

    def dispatch(self, command: CartCommand) -> CartState:
        with self._lock:
            # Assigned only after the transition succeeds, so a rejected command changes nothing.
            self._state = apply_command(self._state, command)
            return self._state

    def add_line(self, candidate: LineCandidate) -> CartState:
        return self.dispatch(AddLine(candidate))

    def remove_line(self, item_id: str) -> CartState:
        return self.dispatch(RemoveLine(item_id))

    def set_quantity(self, item_id: str, quantity: int) -> CartState:
        return self.dispatch(SetQuantity(item_id, quantity))

    def clear(self) -> CartState:
        return self.dispatch(Clear())

    def order_lines(self) -> list[OrderLine]:
        """Snapshot of the cart in the shape order submission expects."""
        return [to_order_line(line) for line in self._state.lines]
