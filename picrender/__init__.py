"""picrender - diagram description to SVG to PNG, one process per stage."""

from picrender.config import PicrenderConfig, load_config
from picrender.errors import (
    InvalidResolutionError,
    RenderError,
    SinkWriteError,
    SourceFormatError,
    ToolTimeoutError,
    ToolUnavailableError,
)
from picrender.models import DiagramFormat, DiagramSource, RasterImage, VectorImage
from picrender.pipeline import RenderOutcome, RenderPipeline, RenderRequest
from picrender.presenter import FileSink, Presenter, StreamSink, ViewerSink

__version__ = "0.1.0"

__all__ = [
    "DiagramFormat",
    "DiagramSource",
    "FileSink",
    "InvalidResolutionError",
    "PicrenderConfig",
    "Presenter",
    "RasterImage",
    "RenderError",
    "RenderOutcome",
    "RenderPipeline",
    "RenderRequest",
    "SinkWriteError",
    "SourceFormatError",
    "StreamSink",
    "ToolTimeoutError",
    "ToolUnavailableError",
    "VectorImage",
    "ViewerSink",
    "load_config",
]
