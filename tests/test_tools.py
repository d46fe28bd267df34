"""Tests for external tool lookup and invocation."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from picrender.errors import ToolTimeoutError, ToolUnavailableError
from picrender.tools import ToolResult, install_hint, require_tool, run_tool


def test_require_tool_returns_resolved_path():
    with patch("picrender.tools.shutil.which", return_value="/usr/bin/dpic"):
        assert require_tool("dpic") == "/usr/bin/dpic"


def test_require_tool_missing_names_package():
    with patch("picrender.tools.shutil.which", return_value=None):
        with pytest.raises(ToolUnavailableError) as exc_info:
            require_tool("dot")
    assert exc_info.value.tool == "dot"
    assert "graphviz" in exc_info.value.hint


def test_install_hint_for_unknown_tool():
    assert "on PATH" in install_hint("/opt/bin/mytool")


def test_run_tool_captures_output():
    completed = subprocess.CompletedProcess(["dpic"], 0, stdout=b"<svg/>", stderr=b"")
    with patch("picrender.tools.subprocess.run", return_value=completed) as mock_run:
        result = run_tool(["dpic", "-v"], input=b".PS\n.PE", timeout=5)

    assert result.ok
    assert result.stdout == b"<svg/>"
    kwargs = mock_run.call_args.kwargs
    assert kwargs["input"] == b".PS\n.PE"
    assert kwargs["timeout"] == 5
    assert kwargs["capture_output"] is True


def test_run_tool_nonzero_exit_is_returned_not_raised():
    completed = subprocess.CompletedProcess(["dot"], 1, stdout=b"", stderr=b"syntax error")
    with patch("picrender.tools.subprocess.run", return_value=completed):
        result = run_tool(["dot", "-Tsvg"])
    assert not result.ok
    assert result.error_detail() == "syntax error"


def test_run_tool_timeout():
    with patch(
        "picrender.tools.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="inkscape", timeout=2),
    ):
        with pytest.raises(ToolTimeoutError) as exc_info:
            run_tool(["inkscape", "x.svg"], timeout=2)
    assert exc_info.value.tool == "inkscape"
    assert exc_info.value.retryable
    assert isinstance(exc_info.value.__cause__, subprocess.TimeoutExpired)


def test_run_tool_missing_executable():
    with patch("picrender.tools.subprocess.run", side_effect=FileNotFoundError("dpic")):
        with pytest.raises(ToolUnavailableError):
            run_tool(["dpic", "-v"])


class TestToolResult:
    def test_error_detail_truncates(self):
        result = ToolResult(2, b"", b"x" * 500)
        detail = result.error_detail(limit=10)
        assert detail == "x" * 10 + "..."

    def test_error_detail_falls_back_to_status(self):
        assert ToolResult(3, b"", b"  ").error_detail() == "exit status 3"

    def test_ok(self):
        assert ToolResult(0, b"", b"").ok
        assert not ToolResult(1, b"", b"").ok
