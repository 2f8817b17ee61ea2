"""Thermal printing of client checks over ESC/POS."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from restaurant_manager.config import (
    PRINTER_FONT_ENV,
    PRINTER_FONT_FALLBACKS,
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_FOOTER_SPACER_PX,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from restaurant_manager.stats import CHECK_RULE, ClientCheck, format_client_check

_RULE_HEIGHT_PX = 14
_RULE_THICKNESS_PX = 3
_LINE_EXTRA_PX = 10


def font_candidates(override: str | None = None, fallbacks: Iterable[str] = PRINTER_FONT_FALLBACKS) -> list[str]:
    """Override (or the env variable), then the configured font, then fallbacks; blanks and repeats dropped."""
    if override is None:
        override = os.environ.get(PRINTER_FONT_ENV, "")
    ordered = [override, PRINTER_FONT_PATH, *fallbacks]
    return list(dict.fromkeys(path.strip() for path in ordered if path and path.strip()))


def resolve_printer_font_path(candidates: list[str] | None = None) -> str:
    """Return the first candidate font file that exists."""
    if candidates is None:
        candidates = font_candidates()
    found = next((path for path in candidates if Path(path).is_file()), None)
    if found is None:
        raise RuntimeError(
            f"No printer font among {len(candidates)} candidate(s); point {PRINTER_FONT_ENV} at a .ttf/.otf file"
        )
    return found


def load_printer_font(size: int = PRINTER_FONT_SIZE, candidates: list[str] | None = None) -> object:
    from PIL import ImageFont

    return ImageFont.truetype(resolve_printer_font_path(candidates), size)


def check_printer_dependencies() -> tuple[bool, str]:
    """Report whether the ESC/POS driver imports and the check font loads."""
    try:
        from escpos.printer import Usb  # noqa: F401

        load_printer_font()
    except Exception as exc:
        return (False, f"Printer unavailable: {exc}")
    return (True, f"Printer ready ({PRINTER_FONT_SIZE}px check font)")


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


def render_line(text: str, font: object) -> object:
    from PIL import Image, ImageDraw

    canvas_height = PRINTER_FONT_SIZE + _LINE_EXTRA_PX
    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)
    text = _fit_text_to_px(text, font, PRINTER_WIDTH_PX - 2 * PRINTER_LEFT_INDENT_PX)

    bbox = draw.textbbox((0, 0), text, font=font)
    text_height = bbox[3] - bbox[1]
    # Offset by bbox top so descenders are not clipped.
    y = (canvas_height - text_height) // 2 - bbox[1]
    draw.text((PRINTER_LEFT_INDENT_PX, y), text, font=font, fill=0)
    return img


def render_rule() -> object:
    from PIL import Image, ImageDraw

    img = Image.new("1", (PRINTER_WIDTH_PX, _RULE_HEIGHT_PX), color=1)
    draw = ImageDraw.Draw(img)
    top = (_RULE_HEIGHT_PX - _RULE_THICKNESS_PX) // 2
    draw.rectangle((0, top, PRINTER_WIDTH_PX - 1, top + _RULE_THICKNESS_PX - 1), fill=0)
    return img


def render_spacer(height_px: int) -> object:
    from PIL import Image

    return Image.new("1", (PRINTER_WIDTH_PX, max(1, height_px)), color=1)


def render_check(check: ClientCheck, font: object) -> list[object]:
    """Turn a check into printable image strips, rules drawn as solid bars."""
    strips = [render_rule() if row == CHECK_RULE else render_line(row, font) for row in format_client_check(check)]
    strips.append(render_spacer(PRINTER_FOOTER_SPACER_PX))
    return strips


def print_client_check(check: ClientCheck) -> None:
    """Print a client check and cut the ticket at the end."""
    try:
        from escpos.printer import Usb
    except Exception as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    font = load_printer_font()
    strips = render_check(check, font)
    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)
    for strip in strips:
        printer.image(strip)
    printer.cut()
