"""Abstract rasterizer interface and the DPI scaling rule."""

from __future__ import annotations

import logging
import math
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from picrender.errors import InvalidResolutionError
from picrender.models import BASELINE_DPI, RasterImage, VectorImage

logger = logging.getLogger(__name__)


def validate_dpi(dpi: object) -> int:
    """Return *dpi* if it is a positive integer, else raise InvalidResolutionError."""
    if isinstance(dpi, bool) or not isinstance(dpi, int) or dpi <= 0:
        raise InvalidResolutionError(dpi)
    return dpi


def scaled_dimension(size: float, dpi: int) -> int:
    """Pixel length of *size* baseline px rendered at *dpi*.

    Rounds half up (``floor(x + 0.5)``) and never returns less than 1, so
    96 DPI is the identity and doubling the DPI stays within 1 px of doubling
    the output.
    """
    return max(1, math.floor(size * dpi / BASELINE_DPI + 0.5))


class Rasterizer(ABC):
    """Converts a vector image into a PNG at a requested resolution."""

    def rasterize(
        self, image: VectorImage, dpi: int, workdir: Path | None = None
    ) -> RasterImage:
        """Render *image* at *dpi*.

        *workdir* is a directory owned by the caller for intermediate files;
        without one a private temporary directory is used and removed.
        """
        dpi = validate_dpi(dpi)
        width = scaled_dimension(image.width, dpi)
        height = scaled_dimension(image.height, dpi)

        if workdir is None:
            with tempfile.TemporaryDirectory(prefix="picrender-") as tmp:
                data = self._render(image, dpi, width, height, Path(tmp))
        else:
            data = self._render(image, dpi, width, height, workdir)

        logger.info(
            "rasterized %s at %d dpi (%d x %d px)", image.source_label, dpi, width, height
        )
        return RasterImage(data=data, width=width, height=height, dpi=dpi)

    @abstractmethod
    def _render(
        self, image: VectorImage, dpi: int, width: int, height: int, workdir: Path
    ) -> bytes:
        """Produce PNG bytes of exactly ``width`` x ``height`` pixels."""
        ...

    def required_tools(self) -> list[str]:
        return []
