"""Pipeline orchestrator: vectorize, rasterize, present."""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from picrender.config.models import PicrenderConfig
from picrender.errors import RenderError
from picrender.models import DiagramFormat, DiagramSource, RasterImage
from picrender.presenter import OutputSink, Presenter
from picrender.rasterizer import Rasterizer, create_rasterizer, validate_dpi
from picrender.vectorizer import Vectorizer, create_vectorizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderRequest:
    """Everything one pipeline run needs."""

    source: DiagramSource
    sink: OutputSink
    dpi: int = 100
    output_format: str = "png"


@dataclass
class RenderOutcome:
    """Result of one request in a batch: an image or the error that stopped it."""

    request: RenderRequest
    image: RasterImage | None = None
    error: RenderError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RenderPipeline:
    """Runs each stage once per request and stops at the first failure.

    Vectorizers are looked up by the source's diagram format, so one pipeline
    can serve pic and dot sources side by side. Nothing is cached between
    requests; every run gets its own temporary directory.
    """

    def __init__(
        self,
        vectorizers: dict[DiagramFormat, Vectorizer] | Callable[[DiagramFormat], Vectorizer],
        rasterizer: Rasterizer,
        presenter: Presenter | None = None,
    ) -> None:
        self._vectorizers = vectorizers
        self.rasterizer = rasterizer
        self.presenter = presenter or Presenter()

    @classmethod
    def from_config(
        cls, config: PicrenderConfig, backend: str | None = None
    ) -> RenderPipeline:
        return cls(
            lambda fmt: create_vectorizer(config, fmt),
            create_rasterizer(config, backend),
        )

    def vectorizer_for(self, fmt: DiagramFormat) -> Vectorizer:
        if callable(self._vectorizers):
            return self._vectorizers(fmt)
        try:
            return self._vectorizers[fmt]
        except KeyError:
            raise ValueError(f"No vectorizer configured for {fmt.value} diagrams") from None

    def _check_supported(self, request: RenderRequest) -> Vectorizer:
        """Raise ValueError for a request this pipeline is not configured to serve."""
        if request.output_format != "png":
            raise ValueError(f"Unsupported output format: {request.output_format!r}")
        return self.vectorizer_for(request.source.format)

    def run(self, request: RenderRequest) -> RasterImage:
        """Render one request end to end and return the presented image."""
        dpi = validate_dpi(request.dpi)
        vectorizer = self._check_supported(request)
        request.sink.check_writable()

        with tempfile.TemporaryDirectory(prefix="picrender-") as tmp:
            vector = vectorizer.vectorize(request.source)
            raster = self.rasterizer.rasterize(vector, dpi, workdir=Path(tmp))

        self.presenter.present(raster, request.sink)
        return raster

    def run_many(
        self, requests: Sequence[RenderRequest], max_workers: int = 4
    ) -> list[RenderOutcome]:
        """Run independent requests concurrently; outcomes keep input order.

        A RenderError in one request is recorded in its outcome and the rest
        carry on. Configuration errors (an unsupported output format, a
        diagram format with no vectorizer) are ValueErrors raised for the
        whole batch before any request starts.
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        for request in requests:
            self._check_supported(request)

        def _one(request: RenderRequest) -> RenderOutcome:
            try:
                return RenderOutcome(request, image=self.run(request))
            except RenderError as e:
                logger.warning("render of %s failed: %s", request.source.label, e)
                return RenderOutcome(request, error=e)

        if not requests:
            return []
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            return list(pool.map(_one, requests))
