"""
zip_exporter.py — Bundle the current aesthetic into a shareable ZIP kit.

Creates a ZIP with:
  tokens.css          — :root custom properties for the six tokens
  fonts.html          — Google Fonts links + font-family stacks
  design-tokens.json  — hex / rgb / hsl / cmyk per token, fonts, contrast
  snapshot.json       — the versioned snapshot (same payload as the share token)
  share.txt           — share link
  palette.png         — palette strip image
"""

from __future__ import annotations

import io
import json
import logging
import re
import zipfile
from pathlib import Path
from typing import Optional

from .exports import css_variables_snippet, design_tokens, font_snippet
from .models import Snapshot
from .palette_renderer import render_palette_image
from .share import share_url

logger = logging.getLogger(__name__)


def export_kit_name(snapshot: Snapshot) -> str:
    safe_seed = re.sub(r"[^a-zA-Z0-9_-]", "_", snapshot.seed.strip())[:30] or "aesthetic"
    return f"aesthetic_{snapshot.mood.value.lower()}_{snapshot.mode.value}_{safe_seed}.zip"


def create_export_kit(
    snapshot: Snapshot,
    output_dir: Path,
    base_url: str,
    include_png: bool = True,
) -> Optional[Path]:
    """
    Write the export kit for `snapshot` into `output_dir`.

    Returns:
        Path to the created ZIP file, or None on failure.
    """
    output_dir = Path(output_dir)
    zip_path = output_dir / export_kit_name(snapshot)
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(zip_path, "w", zipfile.ZIP_DEFLATED) as zf:
            zf.writestr("tokens.css", css_variables_snippet(snapshot.palette) + "\n")
            zf.writestr("fonts.html", font_snippet(snapshot.fonts) + "\n")
            zf.writestr("design-tokens.json", json.dumps(design_tokens(snapshot), indent=2))
            zf.writestr("snapshot.json", json.dumps(snapshot.snapshot().to_payload(), indent=2))
            zf.writestr("share.txt", share_url(base_url, snapshot) + "\n")

            if include_png:
                buf = io.BytesIO()
                render_palette_image(snapshot.palette).save(buf, "PNG")
                zf.writestr("palette.png", buf.getvalue())

        logger.info(f"ZIP created: {zip_path.name} ({zip_path.stat().st_size // 1024} KB)")
        return zip_path

    except OSError as e:
        logger.warning(f"ZIP creation failed: {e}")

    return None
