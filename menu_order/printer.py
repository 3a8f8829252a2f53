"""Kitchen ticket printing on a USB ESC/POS thermal printer."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from time import sleep

from menu_order.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_TAIL_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from menu_order.constant import NOTE_KEY, PAYMENT_METHODS
from menu_order.persistence import SavedOrder
from menu_order.rendering import format_money

_SECTION_SEPARATOR_HEIGHT_PX = 20
_SECTION_SEPARATOR_THICKNESS_PX = 5
_SECTION_SEPARATOR_STRIPE_HEIGHT_PX = 2
_SECTION_SEPARATOR_PAUSE_SECONDS = 0.1
# Extra vertical headroom for full-size lines to avoid descender clipping on thermal output.
_MAIN_LINE_EXTRA_PX = 20
_FONT_OVERRIDE_ENV = "MENU_PRINTER_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)


@dataclass(frozen=True)
class TicketLine:
    """One row of the ticket layout; ``kind`` selects font size and decoration."""

    kind: str
    text: str


def ticket_lines(order: SavedOrder) -> list[TicketLine]:
    """Lay out a kitchen ticket for a saved order."""
    rows = [
        TicketLine("header", f"#{order.order_id[:8]}"),
        TicketLine("compact", order.details.customer_name),
        TicketLine("separator", ""),
    ]
    for line in order.items:
        rows.append(TicketLine("item", f"{line.quantity}x {line.display_name}"))
        for key in sorted(k for k in line.labels if k != NOTE_KEY):
            rows.append(TicketLine("detail", f"    + {line.labels[key]}"))
        if NOTE_KEY in line.labels:
            rows.append(TicketLine("detail", f'    "{line.labels[NOTE_KEY]}"'))

    rows.append(TicketLine("separator", ""))
    rows.append(TicketLine("item", f"Total {format_money(order.total_amount)}"))
    rows.append(TicketLine("compact", PAYMENT_METHODS.get(order.details.payment_method, order.details.payment_method)))
    if order.details.notes.strip():
        rows.append(TicketLine("compact", order.details.notes.strip()))
    return rows


def resolve_printer_font_path() -> str:
    """
    Resolve a printer font path.

    Resolution order:
    1. MENU_PRINTER_FONT_PATH (if set)
    2. PRINTER_FONT_PATH
    3. Known Linux fallbacks
    """
    env_override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    candidates: list[str] = []
    if env_override:
        candidates.append(env_override)
    candidates.append(PRINTER_FONT_PATH)
    candidates.extend(_LINUX_FONT_FALLBACKS)

    seen: set[str] = set()
    for candidate in candidates:
        if not candidate or candidate in seen:
            continue
        seen.add(candidate)
        if Path(candidate).is_file():
            return candidate

    raise RuntimeError(
        f"No usable printer font found. Set {_FONT_OVERRIDE_ENV} to a valid .ttf/.otf file. "
        f"Tried: {', '.join(seen)}"
    )


def check_printer_dependencies() -> tuple[bool, str]:
    """Check whether printer dependencies are importable."""
    try:
        from escpos.printer import Usb  # noqa: F401
        from PIL import ImageFont

        font_path = resolve_printer_font_path()
        ImageFont.truetype(font_path, max(10, PRINTER_FONT_SIZE // 2))
    except Exception as exc:
        return (False, f"Printer deps unavailable: {exc}")
    return (True, "Printer ready")


def _fit_text_to_px(text: str, font: object, max_width_px: int) -> str:
    from PIL import Image, ImageDraw

    scratch = Image.new("1", (1, 1), color=1)
    draw = ImageDraw.Draw(scratch)
    if draw.textbbox((0, 0), text, font=font)[2] <= max_width_px:
        return text
    ellipsis = "..."
    trimmed = text
    while trimmed:
        candidate = f"{trimmed}{ellipsis}"
        if draw.textbbox((0, 0), candidate, font=font)[2] <= max_width_px:
            return candidate
        trimmed = trimmed[:-1]
    return ellipsis


def _render_line(text: str, font: object, extra_px: int = _MAIN_LINE_EXTRA_PX) -> object:
    from PIL import Image, ImageDraw

    text = _fit_text_to_px(text, font, PRINTER_WIDTH_PX - (PRINTER_LEFT_INDENT_PX * 2))
    scratch = Image.new("1", (1, 1), color=1)
    bbox = ImageDraw.Draw(scratch).textbbox((0, 0), text, font=font)
    text_height = bbox[3] - bbox[1]
    canvas_height = max(12, text_height + extra_px)

    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)
    x = PRINTER_LEFT_INDENT_PX
    # Offset by bbox top so descenders (g, y, p, etc.) are not clipped.
    y = (canvas_height - text_height) // 2 - bbox[1]
    draw.text((x, y), text, font=font, fill=0)
    return img


def _render_spacer(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def _render_section_separator() -> object:
    from PIL import Image, ImageDraw

    img = Image.new("1", (PRINTER_WIDTH_PX, _SECTION_SEPARATOR_HEIGHT_PX), color=1)
    draw = ImageDraw.Draw(img)
    top = max(0, (_SECTION_SEPARATOR_HEIGHT_PX - _SECTION_SEPARATOR_THICKNESS_PX) // 2)
    bottom = min(_SECTION_SEPARATOR_HEIGHT_PX - 1, top + _SECTION_SEPARATOR_THICKNESS_PX - 1)
    draw.rectangle((0, top, PRINTER_WIDTH_PX - 1, bottom), fill=0)
    return img


def _print_section_separator(printer: object) -> None:
    """
    Print the separator in short stripes with tiny pauses.

    This reduces instantaneous heat so the line stays crisp
    instead of bleeding into adjacent dots.
    """
    separator = _render_section_separator()
    for top in range(0, separator.height, _SECTION_SEPARATOR_STRIPE_HEIGHT_PX):
        bottom = min(separator.height, top + _SECTION_SEPARATOR_STRIPE_HEIGHT_PX)
        stripe = separator.crop((0, top, PRINTER_WIDTH_PX, bottom))
        printer.image(stripe)
        if bottom < separator.height:
            sleep(_SECTION_SEPARATOR_PAUSE_SECONDS)


def print_order_ticket(order: SavedOrder) -> None:
    """Print the ticket for a saved order and cut at the end."""
    if not order.items:
        return

    try:
        from escpos.printer import Usb
        from PIL import ImageFont
    except Exception as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    font_path = resolve_printer_font_path()
    fonts = {
        "header": ImageFont.truetype(font_path, PRINTER_FONT_SIZE + 8),
        "item": ImageFont.truetype(font_path, PRINTER_FONT_SIZE),
        "detail": ImageFont.truetype(font_path, max(14, PRINTER_FONT_SIZE - 12)),
        "compact": ImageFont.truetype(font_path, max(10, PRINTER_FONT_SIZE // 2)),
    }

    for row in ticket_lines(order):
        if row.kind == "separator":
            _print_section_separator(printer)
            continue
        extra_px = _MAIN_LINE_EXTRA_PX if row.kind in {"header", "item"} else 6
        printer.image(_render_line(row.text, fonts[row.kind], extra_px=extra_px))

    # Give short tickets a minimal extra tail for easier tearing.
    if len(order.items) == 1:
        printer.image(_render_spacer(PRINTER_TAIL_SPACER_PX))

    printer.cut()
