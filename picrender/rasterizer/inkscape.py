"""Rasterization through the inkscape command line."""

from __future__ import annotations

import logging
import re
import threading
from pathlib import Path
from typing import Literal

from picrender.errors import SourceFormatError
from picrender.models import VectorImage
from picrender.rasterizer.base import Rasterizer
from picrender.tools import require_tool, run_tool

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(r"Inkscape\s+(\d+)\.(\d+)")


class InkscapeRasterizer(Rasterizer):
    """Exports PNGs with inkscape.

    inkscape 0.92 and 1.x take different export flags; ``cli="auto"`` asks
    the installed binary for its version the first time it is needed.
    """

    def __init__(
        self,
        executable: str = "inkscape",
        cli: Literal["auto", "legacy", "modern"] = "auto",
        background: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.executable = executable
        self.cli = cli
        self.background = background
        self.timeout = timeout
        self._resolved_cli: str | None = None if cli == "auto" else cli
        self._lock = threading.Lock()

    def required_tools(self) -> list[str]:
        return [self.executable]

    def dialect(self, executable: str) -> str:
        """Return ``"legacy"`` or ``"modern"`` for the installed inkscape."""
        with self._lock:
            if self._resolved_cli is None:
                result = run_tool([executable, "--version"], timeout=self.timeout)
                self._resolved_cli = _dialect_from_version(
                    result.stdout.decode("utf-8", errors="replace")
                )
                logger.debug("inkscape command line: %s", self._resolved_cli)
            return self._resolved_cli

    def build_command(
        self,
        executable: str,
        dialect: str,
        svg_path: Path,
        png_path: Path,
        dpi: int,
        width: int,
        height: int,
    ) -> list[str]:
        if dialect == "legacy":
            argv = [
                executable, "-z",
                "-d", str(dpi),
                "-w", str(width),
                "-h", str(height),
                "-e", str(png_path),
            ]
            if self.background:
                argv += ["-b", self.background]
        else:
            argv = [
                executable,
                "--export-type=png",
                f"--export-dpi={dpi}",
                f"--export-width={width}",
                f"--export-height={height}",
                f"--export-filename={png_path}",
            ]
            if self.background:
                argv.append(f"--export-background={self.background}")
        argv.append(str(svg_path))
        return argv

    def _render(
        self, image: VectorImage, dpi: int, width: int, height: int, workdir: Path
    ) -> bytes:
        executable = require_tool(self.executable)
        svg_path = image.write_to(workdir)
        png_path = workdir / f"{svg_path.stem}.png"

        argv = self.build_command(
            executable, self.dialect(executable), svg_path, png_path, dpi, width, height
        )
        result = run_tool(argv, timeout=self.timeout)
        if not result.ok:
            raise SourceFormatError(image.source_label, result.error_detail())
        # inkscape exits 0 on some unreadable inputs; the missing PNG tells us.
        if not png_path.is_file() or png_path.stat().st_size == 0:
            raise SourceFormatError(
                image.source_label, f"inkscape wrote no PNG ({result.error_detail()})"
            )
        return png_path.read_bytes()


def _dialect_from_version(output: str) -> str:
    m = _VERSION_RE.search(output)
    if m is None:
        return "modern"
    return "legacy" if int(m.group(1)) < 1 else "modern"
