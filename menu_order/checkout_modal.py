"""Checkout details entry modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from menu_order.constant import PAYMENT_METHODS
from menu_order.models import CartState
from menu_order.persistence import CheckoutDetails
from menu_order.rendering import format_order_summary

_FIELD_LABELS: dict[str, str] = {
    "customer_name": "Name *",
    "customer_phone": "Phone *",
    "delivery_address": "Address *",
    "customer_email": "Email",
    "notes": "Notes",
    "payment_method": "Payment",
}
_FIELD_MAX_LENGTH = 80


class CheckoutModal(ModalScreen[CheckoutDetails | None]):
    """Prompt for customer details and payment method before submitting."""

    CSS = """
    CheckoutModal {
        align: center middle;
        background: $background 60%;
    }

    #checkout-dialog {
        width: 72;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #checkout-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #checkout-summary {
        color: white;
        margin-bottom: 1;
    }

    #checkout-fields {
        color: white;
        margin-bottom: 1;
    }

    #checkout-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #checkout-help {
        color: #dddddd;
    }
    """

    def __init__(self, cart: CartState) -> None:
        super().__init__()
        self.cart = cart
        self.values: dict[str, str] = {name: "" for name in _FIELD_LABELS if name != "payment_method"}
        self.payment_method = next(iter(PAYMENT_METHODS))
        self.field_index = 0
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="checkout-dialog"):
            yield Static("Checkout", id="checkout-title")
            yield Static(format_order_summary(self.cart), id="checkout-summary")
            yield Static(id="checkout-fields")
            yield Static(id="checkout-error")
            yield Static(
                "↑/↓/Tab move. Type to edit. ←/→ change payment. Enter confirm. Esc/Ctrl+C cancel.",
                id="checkout-help",
            )

    def on_mount(self) -> None:
        self._refresh_content()

    @property
    def current_field(self) -> str:
        return list(_FIELD_LABELS)[self.field_index]

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key in {"down", "tab"}:
            self.field_index = (self.field_index + 1) % len(_FIELD_LABELS)
        elif event.key in {"up", "shift+tab"}:
            self.field_index = (self.field_index - 1) % len(_FIELD_LABELS)
        elif self.current_field == "payment_method":
            if event.key in {"left", "right", "space"}:
                self._cycle_payment(-1 if event.key == "left" else 1)
        elif event.key == "backspace":
            self.values[self.current_field] = self.values[self.current_field][:-1]
        elif event.is_printable and event.character:
            if len(self.values[self.current_field]) < _FIELD_MAX_LENGTH:
                self.values[self.current_field] += event.character
        else:
            return

        self.error = ""
        self._refresh_content()
        event.stop()

    def _cycle_payment(self, delta: int) -> None:
        methods = list(PAYMENT_METHODS)
        idx = methods.index(self.payment_method)
        self.payment_method = methods[(idx + delta) % len(methods)]

    def details(self) -> CheckoutDetails:
        return CheckoutDetails(payment_method=self.payment_method, **self.values)

    def _confirm(self) -> None:
        details = self.details()
        missing = details.missing_fields()
        if missing:
            labels = ", ".join(_FIELD_LABELS[name].rstrip(" *") for name in missing)
            self.error = f"Please fill in: {labels}"
            self._refresh_content()
            return
        self.dismiss(details)

    def _refresh_content(self) -> None:
        fields_widget = self.query_one("#checkout-fields", Static)
        error_widget = self.query_one("#checkout-error", Static)

        content = Text()
        for idx, (name, label) in enumerate(_FIELD_LABELS.items()):
            if idx > 0:
                content.append("\n")
            active = idx == self.field_index
            pointer = "➤ " if active else "  "
            if name == "payment_method":
                value = f"< {PAYMENT_METHODS[self.payment_method]} >"
            else:
                value = self.values[name] + ("|" if active else "")
            content.append(f"{pointer}{label:<10} {value}", style="bold white" if active else "white")

        fields_widget.update(content)
        error_widget.update(self.error or "")
