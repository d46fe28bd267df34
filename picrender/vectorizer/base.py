"""Abstract vectorizer interface: diagram description in, SVG out."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from picrender.errors import SourceFormatError
from picrender.models import DiagramFormat, DiagramSource, VectorImage
from picrender.tools import require_tool, run_tool
from picrender.vectorizer.svg import SvgSizeError, svg_size

logger = logging.getLogger(__name__)


class Vectorizer(ABC):
    """Converts a diagram description document into a scalable vector image."""

    #: Diagram language this backend accepts.
    format: DiagramFormat

    @abstractmethod
    def vectorize(self, source: DiagramSource) -> VectorImage:
        """Render *source* to SVG."""
        ...

    def required_tools(self) -> list[str]:
        """External executables this backend shells out to."""
        return []


class ExternalVectorizer(Vectorizer):
    """Vectorizer backed by a program that reads the diagram on stdin and
    writes SVG to stdout.
    """

    def __init__(self, executable: str, timeout: float | None = None) -> None:
        self.executable = executable
        self.timeout = timeout

    @abstractmethod
    def arguments(self) -> list[str]:
        """Command-line arguments passed after the executable."""
        ...

    def required_tools(self) -> list[str]:
        return [self.executable]

    def vectorize(self, source: DiagramSource) -> VectorImage:
        if source.format != self.format:
            raise SourceFormatError(
                source.label,
                f"{type(self).__name__} renders {self.format.value} diagrams, "
                f"not {source.format.value}",
            )

        document = source.read()
        if not document.strip():
            raise SourceFormatError(source.label, "document is empty")

        executable = require_tool(self.executable)
        result = run_tool([executable, *self.arguments()], input=document, timeout=self.timeout)
        if not result.ok:
            raise SourceFormatError(source.label, result.error_detail())
        if not result.stdout.strip():
            raise SourceFormatError(source.label, f"{self.executable} produced no SVG")

        try:
            width, height = svg_size(result.stdout)
        except SvgSizeError as e:
            raise SourceFormatError(source.label, f"unusable SVG output: {e}") from e

        logger.info("vectorized %s (%.1f x %.1f px)", source.label, width, height)
        return VectorImage(
            svg=result.stdout, width=width, height=height, source_label=source.label
        )
