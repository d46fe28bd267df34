"""Destinations a finished raster image can be delivered to."""

from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

from picrender.errors import SinkWriteError
from picrender.models import RasterImage
from picrender.tools import require_tool

logger = logging.getLogger(__name__)


def _check_path_writable(path: Path) -> None:
    """Raise SinkWriteError unless *path* can be created or overwritten."""
    if path.is_dir():
        raise SinkWriteError(str(path), IsADirectoryError(f"{path} is a directory"))
    if path.exists():
        if not os.access(path, os.W_OK):
            raise SinkWriteError(str(path), PermissionError(f"{path} is read-only"))
        return
    # The nearest existing ancestor must let us create the missing directories.
    parent = path.parent
    while not parent.exists() and parent != parent.parent:
        parent = parent.parent
    if not parent.is_dir() or not os.access(parent, os.W_OK | os.X_OK):
        raise SinkWriteError(str(path), PermissionError(f"{parent} is not writable"))


def _write_file(path: Path, data: bytes) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise SinkWriteError(str(path), e) from e


class OutputSink(ABC):
    """Where the presenter sends the PNG bytes."""

    @property
    @abstractmethod
    def destination(self) -> str:
        """Human-readable name of the destination."""
        ...

    def check_writable(self) -> None:
        """Fail early with SinkWriteError if a later write cannot succeed."""

    @abstractmethod
    def write(self, image: RasterImage) -> None:
        ...


class FileSink(OutputSink):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    @property
    def destination(self) -> str:
        return str(self.path)

    def check_writable(self) -> None:
        _check_path_writable(self.path)

    def write(self, image: RasterImage) -> None:
        _write_file(self.path, image.data)
        logger.info("wrote %s (%d bytes)", self.path, len(image.data))


class StreamSink(OutputSink):
    """Writes to an already-open binary stream, e.g. ``sys.stdout.buffer``."""

    def __init__(self, stream: BinaryIO, name: str = "<stream>") -> None:
        self.stream = stream
        self.name = name

    @property
    def destination(self) -> str:
        return self.name

    def check_writable(self) -> None:
        if self.stream.closed:
            raise SinkWriteError(self.name, ValueError("stream is closed"))

    def write(self, image: RasterImage) -> None:
        try:
            self.stream.write(image.data)
            self.stream.flush()
        except (OSError, ValueError) as e:
            raise SinkWriteError(self.name, e) from e


class ViewerSink(OutputSink):
    """Saves the image, then opens it in an external viewer without waiting.

    Without an explicit *path* the image goes to a temporary file that is
    left behind for the viewer to read.

    The launched viewer is never waited on. Its handle is kept on
    ``process``; callers that open many viewers from one long-lived process
    own that handle and should ``wait()`` or ``poll()`` it to reap the child.
    """

    def __init__(self, command: list[str], path: str | Path | None = None) -> None:
        if not command:
            raise ValueError("viewer command must not be empty")
        self.command = list(command)
        self.path = Path(path) if path is not None else None
        self.process: subprocess.Popen | None = None

    @property
    def destination(self) -> str:
        return f"{self.command[0]} ({self.path or 'temporary file'})"

    def check_writable(self) -> None:
        require_tool(self.command[0])
        if self.path is not None:
            _check_path_writable(self.path)

    def write(self, image: RasterImage) -> None:
        executable = require_tool(self.command[0])
        target = self.path or self._temporary_path()
        _write_file(target, image.data)
        try:
            self.process = subprocess.Popen(
                [executable, *self.command[1:], str(target)],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise SinkWriteError(self.destination, e) from e
        logger.info("opened %s in %s (pid %d)", target, self.command[0], self.process.pid)

    @staticmethod
    def _temporary_path() -> Path:
        try:
            fd, name = tempfile.mkstemp(prefix="picrender-", suffix=".png")
        except OSError as e:
            raise SinkWriteError(tempfile.gettempdir(), e) from e
        os.close(fd)
        return Path(name)
