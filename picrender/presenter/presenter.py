"""Delivers a raster image to its sink."""

from __future__ import annotations

import logging

from picrender.errors import RenderError, SinkWriteError
from picrender.models import RasterImage
from picrender.presenter.sinks import OutputSink

logger = logging.getLogger(__name__)


class Presenter:
    """The only stage with an effect visible outside the pipeline."""

    def present(self, image: RasterImage, sink: OutputSink) -> None:
        if not image.data:
            raise SinkWriteError(sink.destination, ValueError("refusing to write an empty image"))
        try:
            sink.write(image)
        except RenderError:
            raise
        except OSError as e:
            raise SinkWriteError(sink.destination, e) from e
        logger.debug("presented %dx%d image to %s", image.width, image.height, sink.destination)
