"""Order tracking modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import ModalScreen
from textual.widgets import Static

from menu_order.config import TRACKING_ORDER_LIMIT, TRACKING_REFRESH_SECONDS
from menu_order.constant import ORDER_STATUS_LABELS
from menu_order.models import Customization
from menu_order.persistence import OrderSummary, StoredOrderItem, list_orders, load_order_items, update_order_status
from menu_order.rendering import format_customization_tags, format_money, format_order_status

# Statuses that "advance" walks through; cancelled is terminal and set separately.
_PROGRESSION = [status for status in ORDER_STATUS_LABELS if status != "cancelled"]


def next_status(status: str) -> str | None:
    """Return the status after ``status`` in the delivery flow, or None at the end."""
    if status not in _PROGRESSION:
        return None
    idx = _PROGRESSION.index(status)
    if idx + 1 >= len(_PROGRESSION):
        return None
    return _PROGRESSION[idx + 1]


_STEP_LABELS: dict[str, str] = {
    "pending": "Received",
    "confirmed": "Confirmed",
    "preparing": "Preparing",
    "out_for_delivery": "Out for delivery",
}
_STEP_MARKS = {"done": "✓", "current": "●", "todo": "○"}


def progress_steps(status: str) -> list[tuple[str, str]]:
    """Return ``(step, state)`` pairs for the tracked steps.

    ``state`` is ``done``, ``current`` or ``todo``. Delivered orders have every
    step done; cancelled or unknown statuses have none reached.
    """
    reached = _PROGRESSION.index(status) if status in _PROGRESSION else -1
    steps: list[tuple[str, str]] = []
    for idx, step in enumerate(_STEP_LABELS):
        if reached < 0 or idx > reached:
            state = "todo"
        elif idx == reached:
            state = "current"
        else:
            state = "done"
        steps.append((step, state))
    return steps


def format_progress_row(status: str) -> Text:
    text = Text()
    for idx, (step, state) in enumerate(progress_steps(status)):
        if idx > 0:
            text.append(" ─ ", style="dim")
        style = "bold #ffb347" if state == "current" else ("#5fbf72" if state == "done" else "dim")
        text.append(f"{_STEP_MARKS[state]} {_STEP_LABELS[step]}", style=style)
    return text


def format_order_items(items: list[StoredOrderItem]) -> Text:
    """Render persisted order lines, one per row, with their customization tags."""
    text = Text()
    for idx, item in enumerate(items):
        if idx > 0:
            text.append("\n")
        text.append(f"{item.quantity}x {item.display_name}  {format_money(item.total_price)}")
        if item.customizations:
            tags = {
                key: Customization(label=label, surcharge=surcharge)
                for key, (label, surcharge) in item.customizations.items()
            }
            text.append("  ")
            text.append_text(format_customization_tags(tags))
    return text


def status_style(status: str) -> str:
    if status == "cancelled":
        return "bold #ffffff on #b23a48"
    if status == "delivered":
        return "bold #0b1f0f on #5fbf72"
    if status == "pending":
        return "bold #1f1a0b on #f2d16b"
    return "bold #ffffff on #2f6db5"


class TrackingModal(ModalScreen[None]):
    """Recent orders with their status, refreshed on an interval."""

    BINDINGS = [
        ("escape", "close", "Close"),
        ("q", "close", "Close"),
        ("ctrl+c", "close", "Close"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("s", "advance_status", "Advance status"),
        ("x", "cancel_order", "Cancel order"),
    ]

    CSS = """
    TrackingModal {
        align: center middle;
        background: $background 60%;
    }

    #tracking-dialog {
        width: 80;
        height: auto;
        max-height: 90%;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #tracking-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #tracking-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    def __init__(self) -> None:
        super().__init__()
        self.orders: list[OrderSummary] = []
        self.cursor_index = 0
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="tracking-dialog"):
            yield Static("My Orders", id="tracking-title")
            yield Static(id="tracking-body")
            yield Static("J/K/↑/↓ move, S advance status, X cancel, Esc/q close", id="tracking-help")

    def on_mount(self) -> None:
        self._reload()
        self.set_interval(TRACKING_REFRESH_SECONDS, self._reload)

    def action_close(self) -> None:
        self.dismiss(None)

    def action_move_cursor(self, delta: int) -> None:
        if not self.orders:
            return
        self.cursor_index = (self.cursor_index + delta) % len(self.orders)
        self._refresh_content()

    def action_advance_status(self) -> None:
        order = self._selected()
        if order is None:
            return
        target = next_status(order.status)
        if target is None:
            self.error = f"{format_order_status(order.status)} is final"
            self._refresh_content()
            return
        self._set_status(order, target)

    def action_cancel_order(self) -> None:
        order = self._selected()
        if order is None:
            return
        if order.status in {"delivered", "cancelled"}:
            self.error = f"{format_order_status(order.status)} orders cannot be cancelled"
            self._refresh_content()
            return
        self._set_status(order, "cancelled")

    def _set_status(self, order: OrderSummary, status: str) -> None:
        try:
            update_order_status(order.order_id, status)
        except (KeyError, ValueError) as exc:
            self.error = f"Status update failed: {exc}"
            self._refresh_content()
            return
        self.error = ""
        self._reload()

    def _selected(self) -> OrderSummary | None:
        if not (0 <= self.cursor_index < len(self.orders)):
            return None
        return self.orders[self.cursor_index]

    def _reload(self) -> None:
        self.orders = list_orders(TRACKING_ORDER_LIMIT)
        if self.cursor_index >= len(self.orders):
            self.cursor_index = max(0, len(self.orders) - 1)
        self._refresh_content()

    def _refresh_content(self) -> None:
        body = self.query_one("#tracking-body", Static)
        if not self.orders:
            body.update("(no orders yet)")
            return

        content = Text(style="white")
        for idx, order in enumerate(self.orders):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            content.append(f"{pointer}#{order.order_id[:8]} ")
            content.append(f" {format_order_status(order.status)} ", style=status_style(order.status))
            content.append(f" {order.customer_name}  {format_money(order.total_amount)}")
            payment = "Paid" if order.payment_status == "paid" else "Pending"
            content.append(f"  Payment: {payment}  Ticket: {order.ticket_status}", style="dim")

        selected = self._selected()
        if selected is not None:
            content.append("\n\n")
            content.append_text(format_progress_row(selected.status))
            items = load_order_items(selected.order_id)
            if items:
                content.append("\n")
                content.append_text(format_order_items(items))
        if self.error:
            content.append(f"\n\n{self.error}", style="#ffb3b3")
        body.update(content)
