"""Runtime configuration defaults for persistence, display and printing."""

from __future__ import annotations

DB_PATH = "data/menu_order.db"
DEBUG_LOG_PATH = "/tmp/menu-order-debug.log"

CURRENCY_SYMBOL = "R$"
DECIMAL_SEPARATOR = ","
THOUSANDS_SEPARATOR = "."

# Seconds between order-tracking refreshes.
TRACKING_REFRESH_SECONDS = 5.0
TRACKING_ORDER_LIMIT = 20

PRINT_TICKETS = True
PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 40
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 16
PRINTER_TAIL_SPACER_PX = 70
