"""Rasterizer backends and factory."""

from picrender.config.models import PicrenderConfig
from picrender.rasterizer.base import Rasterizer, scaled_dimension, validate_dpi
from picrender.rasterizer.cairo import CairoRasterizer
from picrender.rasterizer.inkscape import InkscapeRasterizer


def create_rasterizer(config: PicrenderConfig, backend: str | None = None) -> Rasterizer:
    """Build the rasterizer named by *backend*, or by config when omitted."""
    name = backend or config.rasterizer.backend
    if name == "cairo":
        return CairoRasterizer(background=config.rasterizer.background)
    if name == "inkscape":
        return InkscapeRasterizer(
            config.rasterizer.inkscape_path,
            cli=config.rasterizer.inkscape_cli,
            background=config.rasterizer.background,
            timeout=config.timeout,
        )
    raise ValueError(f"Unsupported rasterizer backend: {name!r}. Supported: inkscape, cairo")


__all__ = [
    "CairoRasterizer",
    "InkscapeRasterizer",
    "Rasterizer",
    "create_rasterizer",
    "scaled_dimension",
    "validate_dpi",
]
