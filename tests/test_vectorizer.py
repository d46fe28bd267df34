"""Tests for the dpic and graphviz vectorizers."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from picrender.config.models import PicrenderConfig, VectorizerConfig
from picrender.errors import SourceFormatError, ToolTimeoutError, ToolUnavailableError
from picrender.models import DiagramFormat, DiagramSource
from picrender.tools import ToolResult
from picrender.vectorizer import (
    DpicVectorizer,
    GraphvizVectorizer,
    create_vectorizer,
)

SVG_OUT = (
    b'<svg xmlns="http://www.w3.org/2000/svg" width="144pt" height="72pt">'
    b"<path d='M0 0'/></svg>"
)


def _pic(content: bytes = b'.PS\nbox "hi"\n.PE\n') -> DiagramSource:
    return DiagramSource(format=DiagramFormat.pic, content=content)


@pytest.fixture
def which_ok():
    with patch("picrender.vectorizer.base.require_tool", side_effect=lambda t: f"/usr/bin/{t}"):
        yield


class TestDpicVectorizer:
    def test_success(self, which_ok):
        with patch(
            "picrender.vectorizer.base.run_tool", return_value=ToolResult(0, SVG_OUT, b"")
        ) as mock_run:
            image = DpicVectorizer(timeout=7).vectorize(_pic())

        argv = mock_run.call_args.args[0]
        assert argv == ["/usr/bin/dpic", "-v"]
        assert mock_run.call_args.kwargs["input"].startswith(b".PS")
        assert mock_run.call_args.kwargs["timeout"] == 7
        assert image.svg == SVG_OUT
        assert image.width == pytest.approx(192.0)
        assert image.height == pytest.approx(96.0)
        assert image.source_label == "<memory>"

    def test_reads_source_file(self, which_ok, pic_file):
        with patch(
            "picrender.vectorizer.base.run_tool", return_value=ToolResult(0, SVG_OUT, b"")
        ) as mock_run:
            image = DpicVectorizer().vectorize(DiagramSource.from_path(pic_file))
        assert mock_run.call_args.kwargs["input"] == pic_file.read_bytes()
        assert image.source_label == str(pic_file)

    @pytest.mark.parametrize("content", [b"", b"   \n\t"])
    def test_empty_document_never_calls_tool(self, which_ok, content):
        with patch("picrender.vectorizer.base.run_tool") as mock_run:
            with pytest.raises(SourceFormatError, match="empty"):
                DpicVectorizer().vectorize(_pic(content))
        mock_run.assert_not_called()

    def test_tool_failure_is_source_error(self, which_ok):
        failed = ToolResult(1, b"", b"dpic: ERROR: syntax error near line 2")
        with patch("picrender.vectorizer.base.run_tool", return_value=failed):
            with pytest.raises(SourceFormatError) as exc_info:
                DpicVectorizer().vectorize(_pic(b".PS\nbox box box\n"))
        assert "syntax error" in str(exc_info.value)
        assert exc_info.value.source == "<memory>"

    def test_no_output_is_source_error(self, which_ok):
        with patch("picrender.vectorizer.base.run_tool", return_value=ToolResult(0, b"", b"")):
            with pytest.raises(SourceFormatError, match="no SVG"):
                DpicVectorizer().vectorize(_pic())

    def test_garbage_output_is_source_error(self, which_ok):
        with patch(
            "picrender.vectorizer.base.run_tool", return_value=ToolResult(0, b"not svg", b"")
        ):
            with pytest.raises(SourceFormatError, match="unusable SVG"):
                DpicVectorizer().vectorize(_pic())

    def test_missing_tool(self):
        with patch("picrender.tools.shutil.which", return_value=None):
            with pytest.raises(ToolUnavailableError) as exc_info:
                DpicVectorizer().vectorize(_pic())
        assert exc_info.value.tool == "dpic"

    def test_timeout_propagates(self, which_ok):
        with patch(
            "picrender.vectorizer.base.run_tool", side_effect=ToolTimeoutError("dpic", 1.0)
        ):
            with pytest.raises(ToolTimeoutError):
                DpicVectorizer(timeout=1.0).vectorize(_pic())

    def test_rejects_dot_source(self, which_ok):
        src = DiagramSource(format=DiagramFormat.dot, content=b"digraph { a -> b }")
        with pytest.raises(SourceFormatError, match="renders pic"):
            DpicVectorizer().vectorize(src)

    def test_required_tools(self):
        assert DpicVectorizer("/opt/dpic").required_tools() == ["/opt/dpic"]


class TestGraphvizVectorizer:
    def test_arguments_include_layout(self, which_ok):
        src = DiagramSource(format=DiagramFormat.dot, content=b"digraph { a -> b }")
        with patch(
            "picrender.vectorizer.base.run_tool", return_value=ToolResult(0, SVG_OUT, b"")
        ) as mock_run:
            GraphvizVectorizer(layout="neato").vectorize(src)
        assert mock_run.call_args.args[0] == ["/usr/bin/dot", "-Kneato", "-Tsvg"]


class TestCreateVectorizer:
    def test_pic_uses_dpic(self):
        cfg = PicrenderConfig(vectorizer=VectorizerConfig(dpic_path="/opt/dpic"), timeout=5)
        v = create_vectorizer(cfg, "pic")
        assert isinstance(v, DpicVectorizer)
        assert v.executable == "/opt/dpic"
        assert v.timeout == 5

    def test_dot_uses_graphviz(self, sample_config):
        v = create_vectorizer(sample_config, DiagramFormat.dot)
        assert isinstance(v, GraphvizVectorizer)
        assert v.layout == "dot"

    def test_unknown_format(self, sample_config):
        with pytest.raises(ValueError):
            create_vectorizer(sample_config, "plantuml")
