"""Error taxonomy for the render pipeline."""

from __future__ import annotations


class RenderError(Exception):
    """Base class for every failure a pipeline stage can raise."""

    exit_code: int = 1
    retryable: bool = False


class SourceFormatError(RenderError):
    """The diagram document is empty, malformed, or of an unsupported format."""

    exit_code = 2

    def __init__(self, source: str, detail: str) -> None:
        self.source = source
        self.detail = detail
        super().__init__(f"cannot render {source}: {detail}")


class ToolUnavailableError(RenderError):
    """A required external rendering capability is not installed."""

    exit_code = 3

    def __init__(self, tool: str, hint: str | None = None) -> None:
        self.tool = tool
        self.hint = hint or f"install {tool!r} and make sure it is on PATH"
        super().__init__(f"{tool} is not available ({self.hint})")


class InvalidResolutionError(RenderError):
    """A non-positive DPI was requested."""

    exit_code = 4

    def __init__(self, dpi: object) -> None:
        self.dpi = dpi
        super().__init__(f"DPI must be a positive integer, got {dpi!r}")


class SinkWriteError(RenderError):
    """The output destination could not be written."""

    exit_code = 5

    def __init__(self, destination: str, cause: BaseException | None = None) -> None:
        self.destination = destination
        message = f"cannot write to {destination}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.__cause__ = cause


class ToolTimeoutError(RenderError):
    """An external tool did not finish within the configured timeout."""

    exit_code = 6
    retryable = True

    def __init__(self, tool: str, timeout: float) -> None:
        self.tool = tool
        self.timeout = timeout
        super().__init__(f"{tool} timed out after {timeout:g}s")
