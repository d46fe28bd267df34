"""Intrinsic size of an SVG document, in CSS px at the 96-DPI baseline."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET

from picrender.models import BASELINE_DPI

_PX_PER_UNIT: dict[str, float] = {
    "": 1.0,
    "px": 1.0,
    "pt": BASELINE_DPI / 72,
    "pc": BASELINE_DPI / 6,
    "in": float(BASELINE_DPI),
    "cm": BASELINE_DPI / 2.54,
    "mm": BASELINE_DPI / 25.4,
}

_LENGTH_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)\s*([a-z%]*)\s*$")


class SvgSizeError(ValueError):
    """The document is not an SVG, or declares no usable size."""


def parse_length(value: str | None) -> float | None:
    """Convert an SVG length attribute to px. Percentages and junk give None."""
    if value is None:
        return None
    m = _LENGTH_RE.match(value)
    if m is None:
        return None
    factor = _PX_PER_UNIT.get(m.group(2))
    if factor is None:
        return None
    return float(m.group(1)) * factor


def _viewbox_size(value: str | None) -> tuple[float, float] | None:
    if not value:
        return None
    parts = re.split(r"[\s,]+", value.strip())
    if len(parts) != 4:
        return None
    try:
        _, _, w, h = (float(p) for p in parts)
    except ValueError:
        return None
    return w, h


def svg_size(svg: bytes) -> tuple[float, float]:
    """Return ``(width, height)`` of the root <svg> element in px.

    Explicit width/height win; a missing or relative dimension falls back to
    the viewBox, scaled to keep the aspect ratio when the other one is known.
    """
    try:
        root = ET.fromstring(svg)
    except ET.ParseError as e:
        raise SvgSizeError(f"not well-formed XML: {e}") from e

    if root.tag.rsplit("}", 1)[-1] != "svg":
        raise SvgSizeError(f"root element is <{root.tag}>, not <svg>")

    width = parse_length(root.get("width"))
    height = parse_length(root.get("height"))
    viewbox = _viewbox_size(root.get("viewBox"))

    if viewbox is not None and viewbox[0] > 0 and viewbox[1] > 0:
        vb_w, vb_h = viewbox
        if width is None and height is None:
            width, height = vb_w, vb_h
        elif width is None:
            width = height * vb_w / vb_h
        elif height is None:
            height = width * vb_h / vb_w

    if width is None or height is None or width <= 0 or height <= 0:
        raise SvgSizeError("SVG declares no positive width/height or viewBox")
    return width, height
