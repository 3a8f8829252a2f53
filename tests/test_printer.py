from __future__ import annotations

from decimal import Decimal

import pytest

from menu_order import printer
from menu_order.models import OrderLine
from menu_order.persistence import CheckoutDetails, SavedOrder


def _order(notes: str = "") -> SavedOrder:
    line = OrderLine(
        item_id="classic_burger",
        display_name="Classic Burger",
        quantity=2,
        unit_price=Decimal("39.90"),
        surcharges={"note": Decimal("0"), "no_onion": Decimal("0"), "bacon": Decimal("8")},
        labels={"note": "well done", "no_onion": "No Onion", "bacon": "Bacon"},
        total=Decimal("95.80"),
    )
    return SavedOrder(
        order_id="abcdef0123456789",
        created_at="2026-01-01T00:00:00+00:00",
        details=CheckoutDetails(
            customer_name="Ana",
            customer_phone="1",
            delivery_address="x",
            payment_method="credit_card",
            notes=notes,
        ),
        total_amount=Decimal("95.80"),
        items=[line],
    )


def test_ticket_layout() -> None:
    rows = printer.ticket_lines(_order())

    assert [(row.kind, row.text) for row in rows] == [
        ("header", "#abcdef01"),
        ("compact", "Ana"),
        ("separator", ""),
        ("item", "2x Classic Burger"),
        ("detail", "    + Bacon"),
        ("detail", "    + No Onion"),
        ("detail", '    "well done"'),
        ("separator", ""),
        ("item", "Total R$ 95,80"),
        ("compact", "Credit Card"),
    ]


def test_ticket_includes_order_notes() -> None:
    rows = printer.ticket_lines(_order(notes="  ring twice "))
    assert rows[-1].text == "ring twice"


def test_font_override_from_environment(tmp_path, monkeypatch) -> None:
    font = tmp_path / "ticket.ttf"
    font.write_bytes(b"")
    monkeypatch.setenv("MENU_PRINTER_FONT_PATH", str(font))

    assert printer.resolve_printer_font_path() == str(font)


def test_missing_fonts_raise(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("MENU_PRINTER_FONT_PATH", raising=False)
    monkeypatch.setattr(printer, "PRINTER_FONT_PATH", str(tmp_path / "missing.ttf"))
    monkeypatch.setattr(printer, "_LINUX_FONT_FALLBACKS", ())

    with pytest.raises(RuntimeError, match="MENU_PRINTER_FONT_PATH"):
        printer.resolve_printer_font_path()


def test_dependency_check_reports_missing_font(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("MENU_PRINTER_FONT_PATH", raising=False)
    monkeypatch.setattr(printer, "PRINTER_FONT_PATH", str(tmp_path / "missing.ttf"))
    monkeypatch.setattr(printer, "_LINUX_FONT_FALLBACKS", ())

    ready, message = printer.check_printer_dependencies()

    assert ready is False
    assert message.startswith("Printer deps unavailable")
