"""
palette_renderer.py — Render a six-token palette as a vertical strip image.

Format:
  ┌──────┬──────┬──────┬──────┬──────┬──────┐
  │TOKEN │TOKEN │TOKEN │TOKEN │TOKEN │TOKEN │  ← token name (top, inside strip)
  │      │      │      │      │      │      │  ← tall color fill
  ├──────┼──────┼──────┼──────┼──────┼──────┤
  │#hex  │#hex  │#hex  │#hex  │#hex  │#hex  │  ← hex + CMYK (bottom footer)
  └──────┴──────┴──────┴──────┴──────┴──────┘

Usage:
    from aesthetic.palette_renderer import render_palette

    path = render_palette(snapshot, output_path="out/palette.png")
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from .color_math import best_bw_for, hex_to_rgb, mix_hex, rgb_to_cmyk
from .models import Palette, Snapshot, token_label

# ── Font helpers ────────────────────────────────────────────────────────────

_FONT_CANDIDATES = [
    "/System/Library/Fonts/Helvetica.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
]

_FONT_BOLD_CANDIDATES = [
    "/System/Library/Fonts/HelveticaNeue.ttc",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
]


def _load_font(size: int, bold: bool = False):
    candidates = _FONT_BOLD_CANDIDATES if bold else _FONT_CANDIDATES
    for path in candidates:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    return ImageFont.load_default()


def _text_height(draw: ImageDraw.ImageDraw, text: str, font) -> int:
    try:
        bb = draw.textbbox((0, 0), text, font=font)
        return bb[3] - bb[1]
    except (AttributeError, TypeError):
        return getattr(font, "size", 16)


def _rgb(hex_val: str) -> Tuple[int, int, int]:
    return hex_to_rgb(hex_val) or (128, 128, 128)


def _footer_hex(hex_val: str) -> str:
    """Footer band: the swatch pulled 20% toward its readable text color."""
    return mix_hex(hex_val, best_bw_for(hex_val), 0.2)


# ── Core renderer ───────────────────────────────────────────────────────────

def render_palette_image(
    palette: Palette,
    width: int = 1800,
    height: int = 600,
    gap: int = 3,
    label_text: str = "COLOR PALETTE",
) -> Image.Image:
    """
    Render the palette as a PIL Image, one strip per token in token order.

    Text on every strip uses the best black-or-white for that strip.
    """
    tokens = list(palette.items())
    n = len(tokens)

    header_h = 44 if label_text else 0
    footer_h = max(80, int(height * 0.20))
    pad = 18
    strip_h = height - header_h

    total_gap = gap * (n - 1)
    strip_w = (width - total_gap) // n
    remainder = width - total_gap - strip_w * n

    img = Image.new("RGB", (width, height), _rgb(palette.bg))
    draw = ImageDraw.Draw(img)

    if header_h:
        draw.text((pad, 10), label_text, fill=_rgb(palette.muted), font=_load_font(max(14, header_h - 18)))

    font_name = _load_font(max(12, min(28, int(strip_w * 0.11))), bold=True)
    font_hex = _load_font(max(10, min(22, int(strip_w * 0.09))))
    font_cmyk = _load_font(max(9, min(17, int(strip_w * 0.075))))

    for i, (token, hex_val) in enumerate(tokens):
        sw = strip_w + (remainder if i == n - 1 else 0)
        sx = i * (strip_w + gap)
        sy = header_h

        footer_hex = _footer_hex(hex_val)
        draw.rectangle([sx, sy, sx + sw - 1, sy + strip_h - footer_h - 1], fill=_rgb(hex_val))
        draw.rectangle([sx, sy + strip_h - footer_h, sx + sw - 1, sy + strip_h - 1], fill=_rgb(footer_hex))

        draw.text((sx + pad, sy + 12), token_label(token).upper(), fill=_rgb(best_bw_for(hex_val)), font=font_name)

        footer_text = _rgb(best_bw_for(footer_hex))
        footer_y = sy + strip_h - footer_h + 10
        draw.text((sx + pad, footer_y), hex_val.upper(), fill=footer_text, font=font_hex)
        footer_y += _text_height(draw, hex_val, font_hex) + 6

        c, m, y, k = rgb_to_cmyk(_rgb(hex_val))
        draw.text((sx + pad, footer_y), f"C{c} M{m} Y{y} K{k}", fill=footer_text, font=font_cmyk)

    return img


# ── Standalone export ───────────────────────────────────────────────────────

def render_palette(
    snapshot: Snapshot,
    output_path: Union[str, Path],
    width: int = 1800,
    height: int = 600,
) -> Path:
    """Render the snapshot's palette and save it as PNG. Returns the saved path."""
    label = f"{snapshot.mood.value.upper()} · {snapshot.mode.value.upper()} · SEED {snapshot.seed}"
    img = render_palette_image(snapshot.palette, width=width, height=height, label_text=label)

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    img.save(str(out), "PNG")
    return out
