from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from datetime import datetime
from functools import cache
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from canvas.scene import EMOTION_OFFSET, NAME_OFFSET, arrow_head, heading, initials
from disk.formats import Formats
from disk.storage import document_to_json
from models.catalogue import PATTERNS, emotion_for
from models.colour import Colour, Colours
from models.document import Document
from models.styling import CONNECTION_STYLES, style_for
from models.world import GRID, MEMBER_RADIUS, WORLD_HEIGHT, WORLD_WIDTH, Layer_Data, Member, Time_Layer

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Tunables
# -----------------------------------------------------------------------------
DOT_FACTOR = 0.8  # short dash threshold as a multiple of width
OUTLINE_WIDTH = 3
INITIALS_SIZE = 14
NAME_SIZE = 12
EMOTION_DOT = 8
_TTF_CANDIDATES = ("DejaVuSans-Bold.ttf", "DejaVuSans.ttf")

LAYER_TITLES = {
    Time_Layer.past: "PAST",
    Time_Layer.present: "PRESENT",
    Time_Layer.future: "FUTURE",
}


# -----------------------------------------------------------------------------
# Dashing math
# -----------------------------------------------------------------------------


def dash_seq(dash: Sequence[int] | None) -> list[int]:
    """
    Normalize a dash pattern.
    Returns an even-length sequence with no zeros; empty means 'solid'.
    """
    if not dash:
        return []
    seq = [int(p) for p in dash if p > 0]
    if len(seq) % 2 == 1:
        seq *= 2
    return seq


def iter_dash_spans(L: float, dash: Sequence[int] | None):
    """Yield (a, b, on) arc-length spans along [0, L]."""
    if L <= 0:
        return
    seq = dash_seq(dash)
    if not seq:  # solid
        yield 0.0, L, True
        return

    pos = 0.0
    idx = 0
    on = True
    while pos < L:
        b = min(L, pos + seq[idx % len(seq)])
        yield pos, b, on
        pos = b
        idx += 1
        on = not on


# -----------------------------------------------------------------------------
# PIL sub-painters
# -----------------------------------------------------------------------------


@cache
def _font(size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    for name in _TTF_CANDIDATES:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.debug("no TrueType font found, using Pillow's default at %d", size)
    return ImageFont.load_default(size)


def _stroke_dashed_line(
    draw: ImageDraw.ImageDraw,
    a: tuple[float, float],
    b: tuple[float, float],
    col: Colour,
    width: int,
    dash: Sequence[int] = (),
) -> None:
    x1, y1 = a
    dx, dy = b[0] - x1, b[1] - y1
    L = math.hypot(dx, dy)
    if L <= 0 or width <= 0:
        return
    ux, uy = dx / L, dy / L
    r = width / 2.0

    for s, e, on in iter_dash_spans(L, dash):
        if not on:
            continue
        # short dash → dot
        if e - s <= width * DOT_FACTOR:
            cx = x1 + ux * ((s + e) * 0.5)
            cy = y1 + uy * ((s + e) * 0.5)
            draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=col.rgba)
            continue
        draw.line([(x1 + ux * s, y1 + uy * s), (x1 + ux * e, y1 + uy * e)], fill=col.rgba, width=width)


def _draw_grid(draw: ImageDraw.ImageDraw, width: int, height: int) -> None:
    grid = Colours.sys.grid.rgba
    for x in range(0, width + 1, GRID):
        draw.line([(x, 0), (x, height)], fill=grid, width=1)
    for y in range(0, height + 1, GRID):
        draw.line([(0, y), (width, y)], fill=grid, width=1)


def _draw_connections(draw: ImageDraw.ImageDraw, layer: Layer_Data) -> None:
    by_id = {m.id: m for m in layer.members}
    for conn in layer.connections:
        a, b = by_id.get(conn.from_), by_id.get(conn.to)
        if a is None or b is None:
            continue
        style = style_for(conn.type)
        _stroke_dashed_line(draw, (a.x, a.y), (b.x, b.y), style.col, style.width, style.dash)


def _draw_member(draw: ImageDraw.ImageDraw, m: Member) -> None:
    ink = Colours.sys.ink
    r = MEMBER_RADIUS
    draw.ellipse([m.x - r, m.y - r, m.x + r, m.y + r], fill=Colour.from_hex(m.color).rgba)

    tip = heading(m)
    draw.line([(m.x, m.y), (tip.x, tip.y)], fill=ink.rgba, width=OUTLINE_WIDTH)
    draw.polygon([(p.x, p.y) for p in arrow_head(m)], fill=ink.rgba)

    draw.text((m.x, m.y), initials(m), fill=Colours.sys.white.rgba, font=_font(INITIALS_SIZE), anchor="mm")
    draw.text((m.x, m.y + NAME_OFFSET), m.name, fill=ink.rgba, font=_font(NAME_SIZE), anchor="mm")

    # emoji glyphs rarely exist in bundled fonts; mark the emotion with its colour
    emotion = emotion_for(m.emotion)
    if emotion is not None:
        ex, ey = m.x + EMOTION_OFFSET, m.y - EMOTION_OFFSET
        d = EMOTION_DOT
        draw.ellipse([ex - d, ey - d, ex + d, ey + d], fill=emotion.col.rgba, outline=ink.rgba)


def render_layer(layer: Layer_Data, size: tuple[int, int] = (WORLD_WIDTH, WORLD_HEIGHT)) -> Image.Image:
    """Draw one layer in world coordinates (no pan/zoom)."""
    width, height = size
    img = Image.new("RGBA", (width, height), Colours.sys.white.rgba)
    draw = ImageDraw.Draw(img)
    _draw_grid(draw, width, height)
    _draw_connections(draw, layer)
    for m in layer.members:
        _draw_member(draw, m)
    return img


# -----------------------------------------------------------------------------
# Markdown summary
# -----------------------------------------------------------------------------


def _member_lines(m: Member) -> list[str]:
    lines = [f"**{m.name}**"]
    if m.role:
        lines.append(f"- Role: {m.role}")
    lines.append(f"- Generation: {m.generation.label}")
    emotion = emotion_for(m.emotion)
    if m.emotion:
        lines.append(f"- Emotion: {m.emotion} {emotion.name if emotion else ''}".rstrip())
    lines.append(f"- Heading: {round(m.rotation)}°")
    if m.notes:
        lines.append(f"- Notes: {m.notes}")
    return lines


def summary_markdown(doc: Document, *, when: datetime | None = None) -> str:
    """Readable account of every non-empty layer, followed by the pattern appendix.

    Args;
        doc: The document to summarise; pass a flushed one.
        when: Timestamp for the header; defaults to now.

    Returns;
        Markdown text.
    """
    when = when or datetime.now()
    out = [f"# {doc.name}", f"Date: {when:%Y-%m-%d %H:%M}", ""]

    for t in Time_Layer:
        layer = doc.layers.get(t)
        if not layer.members and not layer.notes:
            continue
        out += [f"## {LAYER_TITLES[t]}", ""]

        if layer.members:
            out += [f"### Members ({len(layer.members)})", ""]
            for m in layer.members:
                out += _member_lines(m)
                out.append("")

        if layer.connections:
            out += [f"### Connections ({len(layer.connections)})", ""]
            by_id = {m.id: m for m in layer.members}
            for conn in layer.connections:
                a, b = by_id.get(conn.from_), by_id.get(conn.to)
                if a is None or b is None:
                    continue
                out.append(f"- {a.name} -> {b.name}: {CONNECTION_STYLES[conn.type].label}")
            out.append("")

        if layer.notes:
            out += ["### Notes", "", layer.notes, ""]

        out += ["---", ""]

    out += ["## Patterns to consider", ""]
    for pattern in PATTERNS:
        out += [f"### {pattern.name}", pattern.description, ""]

    return "\n".join(out)


def default_export_name(doc: Document, fmt: Formats) -> str:
    stem = "-".join(doc.name.split()) or "constellation"
    if fmt is Formats.png:
        return f"{stem}-{doc.active_layer.value}.png"
    if fmt is Formats.md:
        return f"summary-{stem}.md"
    return f"{stem}.json"


# -----------------------------------------------------------------------------
# Exporter
# -----------------------------------------------------------------------------


class Exporter:
    """
    Public API:
        - Exporter.output(doc, path) → Path
            Dispatches based on the path suffix
    """

    supported: dict[Formats, Callable[[Document, Path], Path]] = {}

    @classmethod
    def output(cls, doc: Document, path: Path) -> Path:
        if not cls.supported:
            cls.match_supported()
        fmt = Formats.check(path)
        func = cls.supported.get(fmt) if fmt else None
        if not fmt or not func:
            raise ValueError(f"Unsupported output type: {path.suffix}")
        written = func(doc, path)
        logger.info("exported %s", written)
        return written

    @classmethod
    def match_supported(cls) -> dict[Formats, Callable[[Document, Path], Path]]:
        """Build the dispatch table from Formats → handler methods."""
        sups: dict[Formats, Callable[[Document, Path], Path]] = {}
        for fmt in Formats:
            handler = getattr(cls, fmt.name, None)
            if not callable(handler):
                raise NotImplementedError(f"Exporter missing handler for '{fmt.name}'")
            sups[fmt] = handler  # pyright: ignore[reportArgumentType]
        cls.supported = sups
        return sups

    # ---------------- Public handlers ----------------
    @staticmethod
    def png(doc: Document, path: Path) -> Path:
        """Active layer only."""
        render_layer(doc.active()).save(path, format=Formats.png.upper())
        return path

    @staticmethod
    def md(doc: Document, path: Path) -> Path:
        path.write_text(summary_markdown(doc), encoding="utf-8")
        return path

    @staticmethod
    def json(doc: Document, path: Path) -> Path:
        path.write_text(document_to_json(doc), encoding="utf-8")
        return path
