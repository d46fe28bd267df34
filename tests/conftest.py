"""Shared test fixtures for picrender."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from picrender.config.models import PicrenderConfig
from picrender.errors import SourceFormatError
from picrender.models import DiagramFormat, DiagramSource, VectorImage
from picrender.rasterizer.base import Rasterizer
from picrender.vectorizer.base import Vectorizer

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"

MINIMAL_PIC = b""".PS
box "hello"
.PE
"""

MINIMAL_SVG = (
    b'<?xml version="1.0" encoding="UTF-8"?>\n'
    b'<svg xmlns="http://www.w3.org/2000/svg" width="192" height="96" '
    b'viewBox="0 0 192 96"><rect width="192" height="96"/></svg>\n'
)


class FakeVectorizer(Vectorizer):
    """Turns any non-empty document into a fixed-size SVG."""

    format = DiagramFormat.pic

    def __init__(self, width: float = 192.0, height: float = 96.0) -> None:
        self.width = width
        self.height = height
        self.calls: list[DiagramSource] = []
        self._lock = threading.Lock()

    def vectorize(self, source: DiagramSource) -> VectorImage:
        with self._lock:
            self.calls.append(source)
        document = source.read()
        if not document.strip() or b".PS" not in document:
            raise SourceFormatError(source.label, "not a pic document")
        # Embed the document so outputs of different sources differ.
        svg = MINIMAL_SVG.replace(b"</svg>", b"<!--" + document.strip() + b"--></svg>")
        return VectorImage(
            svg=svg, width=self.width, height=self.height, source_label=source.label
        )


class FakeRasterizer(Rasterizer):
    """Returns PNG-looking bytes that carry the SVG, and records workdirs."""

    def __init__(self) -> None:
        self.calls: list[tuple[int, int, int]] = []
        self.workdirs: list[Path] = []
        self._lock = threading.Lock()

    def _render(self, image, dpi, width, height, workdir):
        svg_path = image.write_to(workdir)
        with self._lock:
            self.calls.append((dpi, width, height))
            self.workdirs.append(workdir)
        return PNG_MAGIC + svg_path.read_bytes()


@pytest.fixture
def sample_config():
    return PicrenderConfig()


@pytest.fixture
def fake_vectorizer():
    return FakeVectorizer()


@pytest.fixture
def fake_rasterizer():
    return FakeRasterizer()


@pytest.fixture
def pic_file(tmp_path):
    path = tmp_path / "diagram.pic"
    path.write_bytes(MINIMAL_PIC)
    return path


@pytest.fixture
def vector_image():
    return VectorImage(svg=MINIMAL_SVG, width=192.0, height=96.0, source_label="diagram.pic")
