"""Output sinks and the presenter stage."""

from picrender.presenter.presenter import Presenter
from picrender.presenter.sinks import FileSink, OutputSink, StreamSink, ViewerSink

__all__ = [
    "FileSink",
    "OutputSink",
    "Presenter",
    "StreamSink",
    "ViewerSink",
]
