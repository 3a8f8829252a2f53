"""Domain models for menu-order."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Customization:
    """A selected modifier; its presence in a line's mapping means it is included."""

    label: str
    surcharge: Decimal = Decimal("0")


@dataclass(frozen=True)
class Dish:
    """A catalog entry as listed on the menu."""

    dish_id: str
    name: str
    description: str
    category: str
    price: Decimal
    promotion_price: Decimal | None = None
    tags: frozenset[str] = frozenset()
    available: bool = True

    @property
    def is_promotion(self) -> bool:
        return "promotion" in self.tags


@dataclass(frozen=True)
class LineCandidate:
    """An add-to-cart request as resolved by the catalog."""

    item_id: str
    display_name: str
    unit_price: Decimal | float | int
    quantity: int = 1
    customizations: Mapping[str, Customization] = field(default_factory=dict)


@dataclass(frozen=True)
class CartLine:
    """One priced, quantified entry in the cart."""

    item_id: str
    display_name: str
    unit_price: Decimal
    quantity: int
    customizations: Mapping[str, Customization] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Private read-only copy so callers cannot reach into cart state.
        object.__setattr__(self, "customizations", MappingProxyType(dict(self.customizations)))

    @property
    def unit_surcharge(self) -> Decimal:
        return sum((c.surcharge for c in self.customizations.values()), Decimal("0"))

    @property
    def line_total(self) -> Decimal:
        return (self.unit_price + self.unit_surcharge) * self.quantity


@dataclass(frozen=True)
class CartState:
    """Immutable cart snapshot; totals are always derived from ``lines``."""

    lines: tuple[CartLine, ...] = ()

    @property
    def grand_total(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0"))

    @property
    def total_unit_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines


@dataclass(frozen=True)
class AddLine:
    candidate: LineCandidate


@dataclass(frozen=True)
class RemoveLine:
    item_id: str


@dataclass(frozen=True)
class SetQuantity:
    item_id: str
    quantity: int


@dataclass(frozen=True)
class Clear:
    pass


CartCommand = AddLine | RemoveLine | SetQuantity | Clear


@dataclass(frozen=True)
class OrderLine:
    """A finalized cart line handed to order submission."""

    item_id: str
    display_name: str
    quantity: int
    unit_price: Decimal
    surcharges: dict[str, Decimal]
    labels: dict[str, str]
    total: Decimal
