"""SQLite persistence for submitted orders."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Iterable
from uuid import uuid4

from menu_order.config import DB_PATH
from menu_order.constant import ORDER_STATUS_LABELS, PAYMENT_METHODS, TICKET_STATUSES
from menu_order.models import OrderLine


@dataclass(frozen=True)
class CheckoutDetails:
    """Customer data collected at checkout."""

    customer_name: str
    customer_phone: str
    delivery_address: str
    customer_email: str = ""
    payment_method: str = "pix"
    notes: str = ""

    def missing_fields(self) -> list[str]:
        required = ("customer_name", "customer_phone", "delivery_address")
        return [name for name in required if not getattr(self, name).strip()]


@dataclass(frozen=True)
class SavedOrder:
    """Saved order metadata and copied lines."""

    order_id: str
    created_at: str
    details: CheckoutDetails
    total_amount: Decimal
    items: list[OrderLine]


@dataclass(frozen=True)
class OrderSummary:
    order_id: str
    created_at: str
    customer_name: str
    total_amount: Decimal
    status: str
    payment_status: str
    ticket_status: str


@dataclass(frozen=True)
class StoredOrderItem:
    item_id: str
    display_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    customizations: dict[str, tuple[str, Decimal]] = field(default_factory=dict)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _connect() -> sqlite3.Connection:
    db_file = Path(DB_PATH)
    db_file.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(db_file)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def bootstrap_schema() -> None:
    """Create persistence schema if it does not already exist."""
    with _connect() as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS orders (
                id TEXT PRIMARY KEY,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                customer_name TEXT NOT NULL,
                customer_email TEXT NOT NULL DEFAULT '',
                customer_phone TEXT NOT NULL,
                delivery_address TEXT NOT NULL,
                notes TEXT NOT NULL DEFAULT '',
                payment_method TEXT NOT NULL,
                payment_status TEXT NOT NULL DEFAULT 'pending',
                total_amount TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending',
                ticket_status TEXT NOT NULL DEFAULT 'SAVED'
            );

            CREATE TABLE IF NOT EXISTS order_items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                order_id TEXT NOT NULL,
                line_index INTEGER NOT NULL,
                dish_id TEXT NOT NULL,
                dish_name TEXT NOT NULL,
                quantity INTEGER NOT NULL,
                unit_price TEXT NOT NULL,
                total_price TEXT NOT NULL,
                FOREIGN KEY(order_id) REFERENCES orders(id) ON DELETE CASCADE
            );

            CREATE TABLE IF NOT EXISTS order_item_customizations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                order_item_id INTEGER NOT NULL,
                customization_key TEXT NOT NULL,
                label TEXT NOT NULL,
                surcharge TEXT NOT NULL,
                FOREIGN KEY(order_item_id) REFERENCES order_items(id) ON DELETE CASCADE
            );

            CREATE INDEX IF NOT EXISTS idx_order_items_order_id_line
                ON order_items(order_id, line_index);

            CREATE INDEX IF NOT EXISTS idx_order_item_customizations_item_id
                ON order_item_customizations(order_item_id);
            """
        )


def save_order(lines: Iterable[OrderLine], details: CheckoutDetails) -> SavedOrder:
    """Persist a finalized cart with its checkout details and return saved metadata."""
    copied_lines = list(lines)
    if not copied_lines:
        raise ValueError("Cannot save an empty order")
    missing = details.missing_fields()
    if missing:
        raise ValueError(f"Missing checkout fields: {', '.join(missing)}")
    if details.payment_method not in PAYMENT_METHODS:
        raise ValueError(f"Unknown payment method: {details.payment_method}")

    order_id = uuid4().hex
    created_at = _utc_now_iso()
    total_amount = sum((line.total for line in copied_lines), Decimal("0"))

    with _connect() as conn:
        with conn:
            conn.execute(
                """
                INSERT INTO orders (
                    id, created_at, updated_at, customer_name, customer_email, customer_phone,
                    delivery_address, notes, payment_method, total_amount
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    order_id,
                    created_at,
                    created_at,
                    details.customer_name.strip(),
                    details.customer_email.strip(),
                    details.customer_phone.strip(),
                    details.delivery_address.strip(),
                    details.notes.strip(),
                    details.payment_method,
                    str(total_amount),
                ),
            )

            for idx, line in enumerate(copied_lines):
                cur = conn.execute(
                    """
                    INSERT INTO order_items (order_id, line_index, dish_id, dish_name, quantity, unit_price, total_price)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (order_id, idx, line.item_id, line.display_name, line.quantity, str(line.unit_price), str(line.total)),
                )
                order_item_id = int(cur.lastrowid)

                for key in sorted(line.surcharges):
                    conn.execute(
                        """
                        INSERT INTO order_item_customizations (order_item_id, customization_key, label, surcharge)
                        VALUES (?, ?, ?, ?)
                        """,
                        (order_item_id, key, line.labels.get(key, key), str(line.surcharges[key])),
                    )

    return SavedOrder(
        order_id=order_id,
        created_at=created_at,
        details=details,
        total_amount=total_amount,
        items=copied_lines,
    )


def _update_column(order_id: str, column: str, value: str) -> None:
    with _connect() as conn:
        with conn:
            cur = conn.execute(
                f"UPDATE orders SET {column} = ?, updated_at = ? WHERE id = ?",
                (value, _utc_now_iso(), order_id),
            )
            if cur.rowcount == 0:
                raise KeyError(order_id)


def update_order_status(order_id: str, status: str) -> None:
    """Move a persisted order to a new lifecycle status."""
    if status not in ORDER_STATUS_LABELS:
        raise ValueError(f"Unknown order status: {status}")
    _update_column(order_id, "status", status)


def update_ticket_status(order_id: str, ticket_status: str) -> None:
    """Record the kitchen ticket outcome for a persisted order."""
    if ticket_status not in TICKET_STATUSES:
        raise ValueError(f"Unknown ticket status: {ticket_status}")
    _update_column(order_id, "ticket_status", ticket_status)


def list_orders(limit: int = 20) -> list[OrderSummary]:
    """Return the most recent orders first."""
    with _connect() as conn:
        rows = conn.execute(
            """
            SELECT id, created_at, customer_name, total_amount, status, payment_status, ticket_status
            FROM orders
            ORDER BY created_at DESC, rowid DESC
            LIMIT ?
            """,
            (limit,),
        ).fetchall()
    return [
        OrderSummary(
            order_id=row[0],
            created_at=row[1],
            customer_name=row[2],
            total_amount=Decimal(row[3]),
            status=row[4],
            payment_status=row[5],
            ticket_status=row[6],
        )
        for row in rows
    ]


def load_order_items(order_id: str) -> list[StoredOrderItem]:
    """Load the persisted lines of one order in cart order."""
    with _connect() as conn:
        item_rows = conn.execute(
            """
            SELECT id, dish_id, dish_name, quantity, unit_price, total_price
            FROM order_items
            WHERE order_id = ?
            ORDER BY line_index
            """,
            (order_id,),
        ).fetchall()

        items: list[StoredOrderItem] = []
        for item_row in item_rows:
            customization_rows = conn.execute(
                """
                SELECT customization_key, label, surcharge
                FROM order_item_customizations
                WHERE order_item_id = ?
                ORDER BY customization_key
                """,
                (item_row[0],),
            ).fetchall()
            items.append(
                StoredOrderItem(
                    item_id=item_row[1],
                    display_name=item_row[2],
                    quantity=int(item_row[3]),
                    unit_price=Decimal(item_row[4]),
                    total_price=Decimal(item_row[5]),
                    customizations={row[0]: (row[1], Decimal(row[2])) for row in customization_rows},
                )
            )
    return items
