"""Main Textual app class."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from menu_order.cart import CartAggregator, InvalidLineInput, InvalidQuantityInput, line_key, validate_candidate
from menu_order.checkout_modal import CheckoutModal
from menu_order.config import DEBUG_LOG_PATH, PRINT_TICKETS
from menu_order.constant import CATEGORY_KEYS, CATEGORY_LABELS, DIETARY_FILTER_KEYS, DIETARY_FILTERS
from menu_order.customization_modal import CustomizationModal
from menu_order.data import filter_dishes
from menu_order.models import CartLine, Dish, LineCandidate
from menu_order.persistence import CheckoutDetails, bootstrap_schema, save_order, update_ticket_status
from menu_order.printer import check_printer_dependencies, print_order_ticket
from menu_order.rendering import badge_style, format_cart_line, format_customization_tags, format_dish_label, format_money
from menu_order.tracking_modal import TrackingModal


class MenuOrderApp(App):
    """A Textual app for browsing the menu, building a cart and submitting orders."""

    TITLE = "Menu Order"
    SUB_TITLE = "Starters / Mains / Desserts"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #cart-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #search-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 4;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-list {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #cart-total {
        height: 1;
        text-style: bold;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    category = reactive("all")
    query = reactive("")
    selected_index = reactive(0)
    line_selected_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "customize_selected", "Customize dish"),
        ("backspace", "backspace_query", "Delete query char"),
        Binding("ctrl+s", "checkout", "Checkout", priority=True),
        ("ctrl+c", "cancel_active_mode", "Exit active mode"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, cart: CartAggregator | None = None) -> None:
        super().__init__()
        self.cart = cart if cart is not None else CartAggregator()
        self.active_filters: set[str] = set()
        self.system_status = ""
        self.printer_ready = False
        self._debug_log_path = Path(DEBUG_LOG_PATH)
        self._log_debug("app_init")

    def _log_debug(self, message: str) -> None:
        try:
            ts = datetime.now(timezone.utc).isoformat()
            self._debug_log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._debug_log_path.open("a", encoding="utf-8") as fh:
                fh.write(f"{ts} {message}\n")
        except Exception:
            # Logging must never interfere with app flow.
            return

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="cart-pane"):
                yield Static("Cart", classes="pane-title")
                yield Static("(cart is empty)", id="cart-list")
                yield Static(id="cart-total")
            with Vertical(id="search-pane"):
                yield Static(id="search-bar")
                yield Static(id="results")

    def on_mount(self) -> None:
        bootstrap_schema()
        self.printer_ready, msg = check_printer_dependencies()
        self.system_status = msg
        self._log_debug(f"on_mount printer_status={msg!r}")
        self._refresh_all()

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, ModalScreen):
            return

        self._log_debug(
            f"on_key key={event.key!r} char={event.character!r} printable={event.is_printable} state={self.input_state!r}"
        )

        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        char = event.character
        if self.input_state == "normal":
            if self._handle_normal_key(char.lower()):
                event.stop()
            return

        if not (char.isalnum() or char == " "):
            return
        self.query += char
        self.selected_index = 0
        self._refresh_search()
        event.stop()

    def _handle_normal_key(self, key: str) -> bool:
        if key in CATEGORY_KEYS:
            self.category = CATEGORY_KEYS[key]
            self.input_state = "active"
            self.query = ""
            self.selected_index = 0
            self._refresh_search()
            return True

        if key in DIETARY_FILTER_KEYS:
            self.active_filters ^= {DIETARY_FILTER_KEYS[key]}
            self._refresh_search()
            return True

        if key == "c":
            self.active_filters.clear()
            self._refresh_search()
            return True

        if key == "j":
            self._move_line_selection(1)
            return True

        if key == "k":
            self._move_line_selection(-1)
            return True

        if key == "+":
            self._change_selected_quantity(1)
            return True

        if key == "-":
            self._change_selected_quantity(-1)
            return True

        if key == "d":
            self._remove_selected_line()
            return True

        if key == "x":
            self.cart.clear()
            self._log_debug("cart_cleared")
            self._refresh_cart()
            return True

        if key == "t":
            self.push_screen(TrackingModal())
            return True

        return False

    def action_cancel_active_mode(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state == "normal":
            return

        self.input_state = "normal"
        self.query = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_customize_selected(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            return

        dish = results[self.selected_index]
        self.push_screen(CustomizationModal(dish), self._on_customized)

    def _on_customized(self, candidate: LineCandidate | None) -> None:
        if candidate is None:
            return
        try:
            key = line_key(validate_candidate(candidate))
            self.cart.add_line(candidate)
        except InvalidLineInput as exc:
            self.system_status = f"Could not add {candidate.display_name}: {exc}"
            self._log_debug(f"add_rejected item={candidate.item_id!r} error={exc!r}")
            self._refresh_search()
            return

        self._log_debug(f"add_line item={candidate.item_id!r} qty={candidate.quantity}")
        self.line_selected_index = self._index_of_line(key)
        self.system_status = f"Added {candidate.quantity}x {candidate.display_name}"
        self._refresh_all()

    def action_backspace_query(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        if not self.query:
            return
        self.query = self.query[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_checkout(self) -> None:
        self._log_debug(
            f"checkout_enter state={self.input_state!r} lines={len(self.cart.lines)} screen={type(self.screen).__name__}"
        )
        if isinstance(self.screen, ModalScreen):
            self._log_debug("checkout_blocked reason=modal")
            return
        if self.input_state != "normal":
            self.system_status = "Checkout only in NORMAL mode (Ctrl+C to exit active)"
            self._refresh_search()
            self._log_debug("checkout_blocked reason=not_normal")
            return
        if self.cart.is_empty:
            self.system_status = "Nothing to submit"
            self._refresh_search()
            self._log_debug("checkout_blocked reason=empty_cart")
            return

        self.push_screen(CheckoutModal(self.cart.state), self._on_checkout_details)

    def _on_checkout_details(self, details: CheckoutDetails | None) -> None:
        if details is None:
            self._log_debug("checkout_cancelled")
            return
        self._submit_order(details)

    def _submit_order(self, details: CheckoutDetails) -> None:
        try:
            order = save_order(self.cart.order_lines(), details)
        except ValueError as exc:
            self.system_status = f"Order not saved: {exc}"
            self._refresh_search()
            self._log_debug(f"submit_rejected error={exc!r}")
            return

        self._log_debug(f"submit_saved order_id={order.order_id} lines={len(order.items)}")
        self.cart.clear()
        self.line_selected_index = None

        if not (PRINT_TICKETS and self.printer_ready):
            update_ticket_status(order.order_id, "SKIPPED")
            self.system_status = f"Saved {order.order_id[:8]} ({format_money(order.total_amount)}), ticket skipped"
            self._refresh_all()
            return

        try:
            print_order_ticket(order)
        except Exception as exc:
            update_ticket_status(order.order_id, "PRINT_FAILED")
            self.system_status = f"Saved {order.order_id[:8]} but print failed: {exc}"
            self._refresh_all()
            self._log_debug(f"submit_print_failed order_id={order.order_id} error={exc!r}")
            return

        update_ticket_status(order.order_id, "PRINTED")
        self.system_status = f"Saved + printed: {order.order_id[:8]}"
        self._refresh_all()
        self._log_debug(f"submit_printed order_id={order.order_id}")

    def _filtered_results(self) -> list[Dish]:
        return filter_dishes(self.category, self.active_filters, self.query)

    def _refresh_all(self) -> None:
        self._refresh_cart()
        self._refresh_search()

    def _index_of_line(self, key: tuple) -> int | None:
        for idx, line in enumerate(self.cart.lines):
            if line_key(line) == key:
                return idx
        return None

    def _selected_line(self) -> CartLine | None:
        lines = self.cart.lines
        if self.line_selected_index is None:
            return None
        if not (0 <= self.line_selected_index < len(lines)):
            return None
        return lines[self.line_selected_index]

    def _move_line_selection(self, delta: int) -> None:
        lines = self.cart.lines
        if not lines:
            return

        if self.line_selected_index is None:
            self.line_selected_index = 0 if delta > 0 else len(lines) - 1
        else:
            self.line_selected_index = (self.line_selected_index + delta) % len(lines)
        self._refresh_cart()

    def _change_selected_quantity(self, delta: int) -> None:
        line = self._selected_line()
        if line is None:
            return
        try:
            self.cart.set_quantity(line.item_id, line.quantity + delta)
        except InvalidQuantityInput as exc:
            self.system_status = str(exc)
            self._refresh_search()
            return
        self._log_debug(f"set_quantity item={line.item_id!r} qty={line.quantity + delta}")
        self._refresh_cart()

    def _remove_selected_line(self) -> None:
        line = self._selected_line()
        if line is None:
            return
        self.cart.remove_line(line.item_id)
        self._log_debug(f"remove_line item={line.item_id!r}")
        self._refresh_cart()

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            half = rows // 2
            start = selected - half
            start = max(0, start)
            start = min(start, total - rows)

        return (start, start + rows)

    def _refresh_cart(self) -> None:
        try:
            cart_widget = self.query_one("#cart-list", Static)
            total_widget = self.query_one("#cart-total", Static)
        except NoMatches:
            return

        state = self.cart.state
        total_widget.update(f"{state.total_unit_count} item(s)  Total: {format_money(state.grand_total)}")
        if not state.lines:
            self.line_selected_index = None
            cart_widget.update("(cart is empty)")
            return

        if self.line_selected_index is not None and self.line_selected_index >= len(state.lines):
            self.line_selected_index = len(state.lines) - 1

        visible_rows = self._visible_rows(cart_widget)
        start, end = self._window_bounds(len(state.lines), visible_rows, self.line_selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")

            line = state.lines[idx]
            pointer = "➤ " if idx == self.line_selected_index else "  "
            lines.append(pointer)
            lines.append(f"{idx + 1}. ")
            lines.append_text(format_cart_line(line))

            if line.customizations:
                lines.append("\n      ")
                lines.append_text(format_customization_tags(line.customizations))

        if end < len(state.lines):
            lines.append("\n⋮", style="dim")

        cart_widget.update(lines)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        if self.input_state == "normal":
            self._refresh_results([])
            return
        self._refresh_results(self._filtered_results())

    def _filters_label(self) -> str:
        if not self.active_filters:
            return "no filters"
        return ", ".join(DIETARY_FILTERS[name] for name in DIETARY_FILTERS if name in self.active_filters)

    def _refresh_search_bar(self) -> None:
        bar = self.query_one("#search-bar", Static)
        if self.input_state == "normal":
            status = self.system_status or "Ready"
            bar.update(
                Text(
                    "0-3 search, V/E/G/P filters, J/K select, +/- qty, D remove, T orders, Ctrl+S checkout.\n"
                    f"[{self._filters_label()}] {status}"
                )
            )
            return

        text = Text()
        text.append(f" {CATEGORY_LABELS[self.category]} ", style=badge_style(self.category))
        text.append(f": {self.query}")
        text.append(f"\n[{self._filters_label()}]", style="dim")
        bar.update(text)

    def _refresh_results(self, results: list[Dish]) -> None:
        results_widget = self.query_one("#results", Static)
        if self.input_state == "normal":
            results_widget.update("")
            return

        if not results:
            results_widget.update("No dishes found")
            return

        if self.selected_index >= len(results):
            self.selected_index = 0

        visible_rows = self._visible_rows(results_widget)
        start, end = self._window_bounds(len(results), visible_rows, self.selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            lines.append(pointer)
            lines.append_text(format_dish_label(results[idx]))

        if end < len(results):
            lines.append("\n⋮", style="dim")

        results_widget.update(lines)
