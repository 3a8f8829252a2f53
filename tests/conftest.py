"""Shared pytest fixtures."""
from __future__ import annotations

from decimal import Decimal

import pytest

from menu_order.cart import CartAggregator
from menu_order.models import Customization, LineCandidate


@pytest.fixture
def cart() -> CartAggregator:
    return CartAggregator()


@pytest.fixture
def make_candidate():
    def _make(
        item_id: str = "X",
        unit_price: object = Decimal("10.00"),
        quantity: int = 1,
        customizations: dict[str, Customization] | None = None,
        display_name: str | None = None,
    ) -> LineCandidate:
        return LineCandidate(
            item_id=item_id,
            display_name=display_name if display_name is not None else f"Dish {item_id}",
            unit_price=unit_price,
            quantity=quantity,
            customizations=customizations or {},
        )

    return _make


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Point the SQLite store at a per-test database file."""
    import menu_order.persistence as persistence_module

    db_file = tmp_path / "orders.db"
    monkeypatch.setattr(persistence_module, "DB_PATH", str(db_file))
    persistence_module.bootstrap_schema()
    return db_file
