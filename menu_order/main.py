"""Entry point for the menu-order Textual app."""

from __future__ import annotations

from menu_order.menu_app import MenuOrderApp


def main() -> None:
    """Run the Textual application."""
    MenuOrderApp().run()


if __name__ == "__main__":
    main()
