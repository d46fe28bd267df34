"""Locating and invoking the external rendering programs."""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass

from picrender.errors import ToolTimeoutError, ToolUnavailableError

logger = logging.getLogger(__name__)

# Package that provides each tool on Debian/Ubuntu, used in remediation hints.
_PACKAGE_HINTS: dict[str, str] = {
    "dpic": "dpic",
    "dot": "graphviz",
    "inkscape": "inkscape",
    "eog": "eog",
}


def install_hint(tool: str) -> str:
    """Return a human-readable remediation hint for a missing tool."""
    name = tool.rsplit("/", 1)[-1]
    package = _PACKAGE_HINTS.get(name)
    if package:
        return f"install the {package!r} package (e.g. apt-get install {package})"
    return f"install {name!r} and make sure it is on PATH"


def require_tool(tool: str) -> str:
    """Resolve *tool* to an executable path or raise ToolUnavailableError."""
    resolved = shutil.which(tool)
    if resolved is None:
        raise ToolUnavailableError(tool, install_hint(tool))
    return resolved


@dataclass
class ToolResult:
    """Captured output of one external tool invocation."""

    returncode: int
    stdout: bytes
    stderr: bytes

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def error_detail(self, limit: int = 240) -> str:
        detail = self.stderr.decode("utf-8", errors="replace").strip()
        if len(detail) > limit:
            detail = detail[:limit] + "..."
        return detail or f"exit status {self.returncode}"


def run_tool(
    argv: Sequence[str],
    *,
    input: bytes | None = None,
    timeout: float | None = None,
) -> ToolResult:
    """Run an external tool to completion, capturing stdout and stderr.

    ``subprocess.run`` kills the child when the timeout expires; the partial
    output is dropped and ToolTimeoutError raised. A vanished executable is
    reported as ToolUnavailableError.
    """
    tool = argv[0]
    logger.debug("running %s", " ".join(argv))
    try:
        proc = subprocess.run(
            list(argv),
            input=input,
            capture_output=True,
            check=False,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise ToolTimeoutError(tool, timeout or 0.0) from e
    except FileNotFoundError as e:
        raise ToolUnavailableError(tool, install_hint(tool)) from e
    except PermissionError as e:
        raise ToolUnavailableError(tool, f"{tool} is not executable: {e}") from e

    if proc.returncode != 0:
        logger.debug("%s exited with %d", tool, proc.returncode)
    return ToolResult(proc.returncode, proc.stdout or b"", proc.stderr or b"")
