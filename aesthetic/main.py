"""
Random Aesthetic Generator — command line

Usage:
  python -m aesthetic.main generate
  python -m aesthetic.main generate --seed abc123
  python -m aesthetic.main mood Neon
  python -m aesthetic.main mode dark
  python -m aesthetic.main lock primary
  python -m aesthetic.main set accent "#ff8800"
  python -m aesthetic.main fix
  python -m aesthetic.main star
  python -m aesthetic.main share
  python -m aesthetic.main open <token-or-link>
  python -m aesthetic.main export zip --output exports/
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from .config import Settings, load_settings
from .exports import css_variables_snippet, design_tokens, font_snippet
from .fonts import BODY_FONTS, DISPLAY_FONTS
from .models import TOKENS, HistoryEntry, Locks, token_label
from .moods import MOODS, Mode
from .palette_renderer import render_palette
from .share import share_url, token_from_url
from .storage import JsonFileStore
from .studio import Studio
from .url_state import StoredUrl
from .zip_exporter import create_export_kit

console = Console()

LOCKS_KEY = "rag_locks_v1"


# ── CLI ───────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aesthetic",
        description="Random Aesthetic Generator — seeded palettes and font pairings",
    )
    parser.add_argument("--store", default=None, help="Store directory (default: $AESTHETIC_STORE_DIR)")
    sub = parser.add_subparsers(dest="command")

    gen = sub.add_parser("generate", help="Generate a new aesthetic (locked groups are kept)")
    gen.add_argument("--seed", default=None, help="Use this seed instead of a random one")
    gen.add_argument("--keep-seed", action="store_true", help="Regenerate with the current seed")

    sub.add_parser("show", help="Show the current aesthetic")

    mode = sub.add_parser("mode", help="Switch light / dark")
    mode.add_argument("value", choices=["light", "dark", "toggle"])

    mood = sub.add_parser("mood", help="Switch mood")
    mood.add_argument("value", choices=[m.value for m in MOODS])

    lock = sub.add_parser("lock", help="Toggle a lock: palette, fonts or a single token")
    lock.add_argument("target", choices=["palette", "fonts", *TOKENS])

    set_ = sub.add_parser("set", help="Set one token to a hex color")
    set_.add_argument("token", choices=list(TOKENS))
    set_.add_argument("hex", help="#rrggbb")

    font = sub.add_parser("font", help="Set the display or body font")
    font.add_argument("role", choices=["display", "body"])
    font.add_argument("name", help="Font family from the catalog (see `fonts`)")

    sub.add_parser("fonts", help="List the font catalog")
    sub.add_parser("swap-fonts", help="Swap display and body fonts")
    sub.add_parser("fix", help="Auto-fix text / muted contrast")

    star = sub.add_parser("star", help="Toggle favorite for the current look or a history id")
    star.add_argument("id", nargs="?", default=None)

    for name in ("history", "favorites"):
        p = sub.add_parser(name, help=f"List {name}")
        p.add_argument("--search", default="", help="Filter by seed, mode, mood or font")

    restore = sub.add_parser("restore", help="Restore a history / favorite entry by id")
    restore.add_argument("id")

    clear = sub.add_parser("clear", help="Clear history or favorites")
    clear.add_argument("what", choices=["history", "favorites"])

    sub.add_parser("share", help="Print the share link")

    open_ = sub.add_parser("open", help="Load a share token or link")
    open_.add_argument("token")

    export = sub.add_parser("export", help="Export the current aesthetic")
    export.add_argument("kind", choices=["css", "fonts", "tokens", "png", "zip"])
    export.add_argument("--output", default=None, help="Output file (png) or directory (zip)")

    return parser


# ── Display helpers ───────────────────────────────────────────────────────────

def _notify(message: str, title: str) -> None:
    style = "yellow" if title == "Validation" else "green"
    console.print(f"  [{style}]●[/{style}] [bold]{title}[/bold] — {message}")


def show_aesthetic(studio: Studio) -> None:
    state = studio.state
    locks = state.locks

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Token")
    table.add_column("Swatch")
    table.add_column("Hex")
    table.add_column("Lock")
    for token, hex_val in state.palette.items():
        table.add_row(
            token_label(token),
            f"[on {hex_val}]      [/]",
            hex_val,
            "🔒" if locks.is_token_locked(token) else "",
        )

    header = (
        f"[bold]{state.mood.value}[/bold] · {state.mode.value} · seed [cyan]{state.seed}[/cyan]"
        f"{'  ★' if studio.is_favorite() else ''}"
    )
    console.print(Panel(table, title=header, subtitle=f"palette {'locked' if locks.palette else 'unlocked'}"))
    console.print(
        f"  Fonts: [bold]{state.fonts.display}[/bold] / {state.fonts.body}"
        f"{'  (locked)' if locks.fonts else ''}"
    )
    show_contrast(studio)


def show_contrast(studio: Studio) -> None:
    for pair in studio.report.pairs:
        badge = "[green]PASS[/green]" if pair.passes else "[red]FAIL[/red]"
        console.print(f"  {badge}  {pair.label:<24} {pair.fg} on {pair.bg} · ratio {pair.ratio:.2f}")
    if studio.report.any_failing:
        console.print("  [dim]Run `fix` to auto-correct text and muted.[/dim]")


def _format_when(created_at: int) -> str:
    try:
        return datetime.fromtimestamp(created_at / 1000).strftime("%b %d %H:%M")
    except (OverflowError, OSError, ValueError):
        return "?"


def show_entries(title: str, entries: List[HistoryEntry], studio: Studio) -> None:
    if not entries:
        console.print(f"  [dim]No {title.lower()} yet.[/dim]")
        return
    table = Table(title=title, box=box.SIMPLE)
    for col in ("Id", "Look", "Seed", "Fonts", "When", "★"):
        table.add_column(col)
    for e in entries:
        swatches = "".join(f"[on {e.palette[t]}]  [/]" for t in ("bg", "primary", "accent"))
        when = _format_when(e.created_at)
        table.add_row(
            e.id,
            f"{swatches} {e.mood.value} · {e.mode.value}",
            e.seed,
            f"{e.fonts.display} / {e.fonts.body}",
            when,
            "★" if studio.is_favorite(e) else "",
        )
    console.print(table)


# ── Lock persistence ──────────────────────────────────────────────────────────

def _load_locks(studio: Studio) -> None:
    raw = studio.store.load(LOCKS_KEY, None)
    if raw is None:
        return
    try:
        studio.apply(locks=Locks.model_validate(raw))
    except ValidationError:
        logging.getLogger(__name__).debug("Ignoring invalid stored locks")


def _save_locks(studio: Studio) -> None:
    studio.store.save(LOCKS_KEY, studio.state.locks.model_dump(mode="json"))


# ── Commands ──────────────────────────────────────────────────────────────────

def run(args: argparse.Namespace, studio: Studio, settings: Settings) -> int:
    cmd = args.command or "show"

    if cmd == "generate":
        studio.generate(new_seed=not args.keep_seed, seed=args.seed)
        show_aesthetic(studio)
    elif cmd == "show":
        show_aesthetic(studio)
    elif cmd == "mode":
        if args.value == "toggle":
            studio.toggle_mode()
        else:
            studio.set_mode(Mode(args.value))
        show_aesthetic(studio)
    elif cmd == "mood":
        studio.set_mood(args.value)
        show_aesthetic(studio)
    elif cmd == "lock":
        if args.target == "palette":
            studio.toggle_palette_lock()
        elif args.target == "fonts":
            studio.toggle_fonts_lock()
        else:
            studio.toggle_token_lock(args.target)
    elif cmd == "set":
        if not studio.update_token_hex(args.token, args.hex):
            return 2
        show_aesthetic(studio)
    elif cmd == "font":
        setter = studio.set_display_font if args.role == "display" else studio.set_body_font
        if not setter(args.name):
            return 2
        show_aesthetic(studio)
    elif cmd == "fonts":
        for title, entries in (("Display", DISPLAY_FONTS), ("Body", BODY_FONTS)):
            console.print(f"[bold]{title}[/bold]")
            for f in entries:
                console.print(f"  {f.name}  [dim]{f.category.value} · {f.weights}[/dim]")
    elif cmd == "swap-fonts":
        studio.swap_fonts()
        show_aesthetic(studio)
    elif cmd == "fix":
        studio.auto_fix()
        show_contrast(studio)
    elif cmd == "star":
        entry = studio.find_entry(args.id) if args.id else None
        if args.id and entry is None:
            console.print(f"[red]No entry with id {args.id}[/red]")
            return 1
        studio.toggle_favorite(entry)
    elif cmd in ("history", "favorites"):
        history, favorites = studio.search(args.search)
        show_entries(cmd.title(), history if cmd == "history" else favorites, studio)
    elif cmd == "restore":
        entry = studio.find_entry(args.id)
        if entry is None:
            console.print(f"[red]No entry with id {args.id}[/red]")
            return 1
        studio.restore(entry)
        show_aesthetic(studio)
    elif cmd == "clear":
        if args.what == "history":
            studio.clear_history()
        else:
            studio.clear_favorites()
    elif cmd == "share":
        console.print(share_url(settings.share_base_url, studio.current()), soft_wrap=True, highlight=False)
    elif cmd == "open":
        token = token_from_url(args.token) if "://" in args.token else args.token
        if not token or not studio.open_token(token):
            return 2
        show_aesthetic(studio)
    elif cmd == "export":
        return export(args, studio, settings)
    return 0


def export(args: argparse.Namespace, studio: Studio, settings: Settings) -> int:
    snapshot = studio.current()
    if args.kind == "css":
        console.print(css_variables_snippet(snapshot.palette), markup=False, highlight=False)
    elif args.kind == "fonts":
        console.print(font_snippet(snapshot.fonts), markup=False, highlight=False)
    elif args.kind == "tokens":
        console.print(json.dumps(design_tokens(snapshot), indent=2), markup=False, highlight=False)
    elif args.kind == "png":
        out = render_palette(snapshot, args.output or f"palette_{snapshot.seed}.png")
        console.print(f"[green]✓[/green] Saved {out}")
    elif args.kind == "zip":
        out = create_export_kit(snapshot, Path(args.output or "."), settings.share_base_url)
        if out is None:
            console.print("[red]Export failed[/red]")
            return 1
        console.print(f"[green]✓[/green] Saved {out}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()

    logging.basicConfig(
        format="%(asctime)s — %(levelname)s — %(name)s — %(message)s",
        level=settings.log_level,
    )

    store = JsonFileStore(args.store or settings.store_dir)
    studio = Studio(
        store=store,
        url=StoredUrl(store, settings.share_base_url),
        notify=_notify,
        debounce_ms=settings.url_debounce_ms,
    )
    studio.boot(announce=False)
    _load_locks(studio)

    try:
        return run(args, studio, settings)
    finally:
        studio.close()
        _save_locks(studio)


if __name__ == "__main__":
    sys.exit(main())
