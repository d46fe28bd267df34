"""In-process rasterization with cairosvg."""

from __future__ import annotations

import logging
from pathlib import Path

from picrender.errors import SourceFormatError, ToolUnavailableError
from picrender.models import VectorImage
from picrender.rasterizer.base import Rasterizer

logger = logging.getLogger(__name__)

try:
    import cairosvg
except (ImportError, OSError):
    # OSError: the package is installed but libcairo is not
    cairosvg = None  # type: ignore[assignment]
    logger.debug("cairosvg unavailable, cairo backend disabled")


class CairoRasterizer(Rasterizer):
    """Renders SVG with cairosvg; needs no external program."""

    def __init__(self, background: str | None = None) -> None:
        self.background = background

    def _render(
        self, image: VectorImage, dpi: int, width: int, height: int, workdir: Path
    ) -> bytes:
        if cairosvg is None:
            raise ToolUnavailableError(
                "cairosvg", "pip install cairosvg and install the cairo library"
            )
        try:
            return cairosvg.svg2png(
                bytestring=image.svg,
                dpi=dpi,
                output_width=width,
                output_height=height,
                background_color=self.background,
            )
        except Exception as e:
            raise SourceFormatError(image.source_label, f"cairosvg failed: {e}") from e
