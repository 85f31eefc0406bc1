"""
exports.py — Copy-ready snippets for the current aesthetic.

  css_variables_snippet  :root block with the six tokens as custom properties
  font_snippet           Google Fonts <link> tags plus --display-font / --body-font
  design_tokens          JSON-ready token dump (hex / rgb / hsl per color, font stacks)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List

from .color_math import hex_to_rgb, rgb_to_cmyk, rgb_to_hsl
from .contrast import evaluate
from .fonts import font_meta, font_stack, google_fonts_href
from .models import Fonts, Palette, Snapshot, token_label


@dataclass
class ColorToken:
    """Semantic color token with all format values."""
    token: str            # e.g. "--primary"
    name: str             # e.g. "primary"
    hex: str              # e.g. "#3b82f6"
    rgb: str = ""
    hsl: str = ""
    cmyk: str = ""

    def __post_init__(self):
        rgb = hex_to_rgb(self.hex) or (0, 0, 0)
        if not self.rgb:
            self.rgb = "rgb({}, {}, {})".format(*rgb)
        if not self.hsl:
            self.hsl = "hsl({}, {}%, {}%)".format(*rgb_to_hsl(rgb))
        if not self.cmyk:
            self.cmyk = "C{} M{} Y{} K{}".format(*rgb_to_cmyk(rgb))


def color_tokens(palette: Palette) -> List[ColorToken]:
    return [ColorToken(token=f"--{t}", name=token_label(t), hex=hex_val) for t, hex_val in palette.items()]


def css_variables_snippet(palette: Palette) -> str:
    lines = "\n".join(f"  --{t}: {hex_val};" for t, hex_val in palette.items())
    return f":root {{\n{lines}\n}}"


def font_snippet(fonts: Fonts) -> str:
    href = google_fonts_href(fonts)
    return "\n".join([
        "<!-- Google Fonts -->",
        '<link rel="preconnect" href="https://fonts.googleapis.com">',
        '<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>',
        f'<link href="{href}" rel="stylesheet">',
        "\n/* CSS font-family */",
        ":root {",
        f"  --display-font: {font_stack(fonts.display)};",
        f"  --body-font: {font_stack(fonts.body)};",
        "}",
    ])


def design_tokens(snapshot: Snapshot) -> Dict:
    """Machine-readable tokens for design tools."""
    report = evaluate(snapshot.palette)
    display, body = font_meta(snapshot.fonts.display), font_meta(snapshot.fonts.body)
    return {
        "seed": snapshot.seed,
        "mode": snapshot.mode.value,
        "mood": snapshot.mood.value,
        "colors": [asdict(t) for t in color_tokens(snapshot.palette)],
        "on_primary": report.on_primary,
        "fonts": {
            "display": {
                "family": display.name,
                "category": display.category.value,
                "weights": display.weights.split(";"),
                "stack": font_stack(display.name),
            },
            "body": {
                "family": body.name,
                "category": body.category.value,
                "weights": body.weights.split(";"),
                "stack": font_stack(body.name),
            },
            "href": google_fonts_href(snapshot.fonts),
        },
        "contrast": [
            {"key": p.key, "fg": p.fg, "bg": p.bg, "ratio": round(p.ratio, 2), "pass": p.passes}
            for p in report.pairs
        ],
    }
