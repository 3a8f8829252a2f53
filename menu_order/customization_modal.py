"""Dish customization modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Static

from menu_order.constant import NOTE_KEY
from menu_order.data import (
    CUSTOMIZATION_CATALOG,
    available_customizations_for_dish,
    build_candidate,
    preview_total,
    toggle_customization,
    with_note,
)
from menu_order.models import Customization, Dish, LineCandidate
from menu_order.rendering import format_dish_label, format_money


class CustomizationModal(ModalScreen[LineCandidate | None]):
    """Centered modal to pick options, quantity and a note before adding a dish."""

    BINDINGS = [
        ("escape", "close", "Cancel"),
        ("ctrl+c", "close", "Cancel"),
        ("j", "move_cursor(1)", "Next"),
        ("k", "move_cursor(-1)", "Previous"),
        ("up", "move_cursor(-1)", "Previous"),
        ("down", "move_cursor(1)", "Next"),
        ("enter", "toggle_current", "Toggle"),
        ("a", "confirm", "Add to cart"),
    ]

    CSS = """
    CustomizationModal {
        align: center middle;
        background: $background 60%;
    }

    #custom-dialog {
        width: 68;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #custom-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #custom-body {
        margin-bottom: 1;
        color: white;
    }

    #custom-help {
        margin-top: 1;
        color: #dddddd;
    }
    """

    cursor_index = reactive(0)
    _OPTION_KIND = "option"
    _NOTE_KIND = "note"

    def __init__(self, dish: Dish) -> None:
        super().__init__()
        self.dish = dish
        self.option_ids = available_customizations_for_dish(dish.dish_id)
        self.selection: dict[str, Customization] = {}
        self.quantity = 1
        self.typing_note = False
        self.note_input_value = ""

    def compose(self) -> ComposeResult:
        with Container(id="custom-dialog"):
            yield Static(f"Customize {self.dish.name}", id="custom-title")
            yield Static(id="custom-body")
            yield Static(id="custom-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event) -> None:
        if not self.typing_note:
            if event.character == "+":
                self.quantity += 1
                self._refresh_content()
                event.stop()
            elif event.character == "-":
                self.quantity = max(1, self.quantity - 1)
                self._refresh_content()
                event.stop()
            return

        if event.key == "escape":
            self.typing_note = False
            self.note_input_value = ""
            self._refresh_content()
            event.stop()
            return

        if event.key == "enter":
            self.selection = with_note(self.selection, self.note_input_value)
            self.typing_note = False
            self.note_input_value = ""
            self._refresh_content()
            event.stop()
            return

        if event.key == "backspace":
            if self.note_input_value:
                self.note_input_value = self.note_input_value[:-1]
            self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            self.note_input_value += event.character
            self._refresh_content()
            event.stop()
            return

        # Ignore all non-text keys while typing.
        event.stop()

    def action_close(self) -> None:
        if self.typing_note:
            self.typing_note = False
            self.note_input_value = ""
            self._refresh_content()
            return
        self.dismiss(None)

    def action_confirm(self) -> None:
        if self.typing_note:
            return
        self.dismiss(build_candidate(self.dish, self.selection, self.quantity))

    def action_move_cursor(self, delta: int) -> None:
        if self.typing_note:
            return
        rows = self._rows()
        self.cursor_index = (self.cursor_index + delta) % len(rows)
        self._refresh_content()

    def action_toggle_current(self) -> None:
        if self.typing_note:
            return
        row_kind, option_id = self._rows()[self.cursor_index]
        if row_kind == self._NOTE_KIND:
            self.typing_note = True
            current = self.selection.get(NOTE_KEY)
            self.note_input_value = current.label if current is not None else ""
        else:
            self.selection = toggle_customization(self.selection, option_id)
        self._refresh_content()

    def _rows(self) -> list[tuple[str, str]]:
        rows = [(self._OPTION_KIND, option_id) for option_id in self.option_ids]
        rows.append((self._NOTE_KIND, NOTE_KEY))
        return rows

    def _refresh_content(self) -> None:
        body = self.query_one("#custom-body", Static)
        help_text = self.query_one("#custom-help", Static)

        content = Text(style="white")
        content.append_text(format_dish_label(self.dish))
        if self.dish.description:
            content.append(f"\n{self.dish.description}", style="dim")
        content.append(f"\n\nQuantity: {self.quantity}\n\n")

        for idx, (row_kind, option_id) in enumerate(self._rows()):
            if idx > 0:
                content.append("\n")
            pointer = "➤ " if idx == self.cursor_index else "  "
            if row_kind == self._OPTION_KIND:
                option = CUSTOMIZATION_CATALOG[option_id]
                is_checked = option_id in self.selection
                checked = "[x]" if is_checked else "[ ]"
                label = option.label
                if option.surcharge > 0:
                    label = f"{label}  +{format_money(option.surcharge)}"
                content.append(f"{pointer}{checked} {label}", style="bold white" if is_checked else "white")
            elif self.typing_note and idx == self.cursor_index:
                content.append(f"{pointer}Note: {self.note_input_value}|", style="bold white")
            else:
                note = self.selection.get(NOTE_KEY)
                content.append(f"{pointer}Note: {note.label if note else '(none)'}", style="white")

        content.append(f"\n\nTotal: {format_money(preview_total(self.dish, self.selection, self.quantity))}", style="bold")

        if self.typing_note:
            help_text.update("Type note, Enter confirm, Esc cancel typing")
        else:
            help_text.update("J/K/↑/↓ move, Enter toggle/edit note, +/- quantity, A add, Esc cancel")
        body.update(content)
