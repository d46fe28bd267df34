"""Pydantic models passed between pipeline stages."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

from picrender.errors import SourceFormatError

# CSS reference resolution; a vector image's intrinsic size is expressed in
# pixels at this density.
BASELINE_DPI = 96


class DiagramFormat(str, Enum):
    """Diagram description languages the vectorizers understand."""

    pic = "pic"
    dot = "dot"


_SUFFIX_FORMATS: dict[str, DiagramFormat] = {
    ".pic": DiagramFormat.pic,
    ".dot": DiagramFormat.dot,
    ".gv": DiagramFormat.dot,
}


class DiagramSource(BaseModel):
    """A diagram description document, on disk or in memory."""

    model_config = ConfigDict(frozen=True)

    format: DiagramFormat
    path: Path | None = None
    content: bytes | None = None

    @model_validator(mode="after")
    def check_origin(self) -> DiagramSource:
        if (self.path is None) == (self.content is None):
            raise ValueError("DiagramSource needs exactly one of path or content")
        return self

    @classmethod
    def from_path(
        cls, path: str | Path, format: DiagramFormat | str | None = None
    ) -> DiagramSource:
        """Build a source from a file, inferring the format from its suffix."""
        path = Path(path)
        if format is None:
            fmt = _SUFFIX_FORMATS.get(path.suffix.lower())
            if fmt is None:
                raise SourceFormatError(
                    str(path),
                    f"unknown diagram suffix {path.suffix!r}; "
                    f"expected one of {', '.join(sorted(_SUFFIX_FORMATS))}",
                )
        else:
            fmt = DiagramFormat(format)
        return cls(format=fmt, path=path)

    @property
    def label(self) -> str:
        return str(self.path) if self.path is not None else "<memory>"

    def read(self) -> bytes:
        """Return the document bytes. Unreadable files are a source error."""
        if self.content is not None:
            return self.content
        try:
            return self.path.read_bytes()
        except OSError as e:
            raise SourceFormatError(self.label, f"unreadable: {e}") from e


class VectorImage(BaseModel):
    """SVG produced by a vectorizer, with its intrinsic size in baseline px."""

    model_config = ConfigDict(frozen=True)

    svg: bytes
    width: float
    height: float
    source_label: str = "<memory>"

    def write_to(self, directory: Path, stem: str = "diagram") -> Path:
        """Materialize the SVG inside a run-owned directory."""
        dest = directory / f"{stem}.svg"
        dest.write_bytes(self.svg)
        return dest


class RasterImage(BaseModel):
    """A PNG bitmap with its pixel size and the DPI it was rendered at."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    width: int
    height: int
    dpi: int
    format: Literal["png"] = "png"
