"""Vectorizer backends and factory."""

from picrender.config.models import PicrenderConfig
from picrender.models import DiagramFormat
from picrender.vectorizer.base import ExternalVectorizer, Vectorizer
from picrender.vectorizer.dpic import DpicVectorizer
from picrender.vectorizer.graphviz import GraphvizVectorizer
from picrender.vectorizer.svg import SvgSizeError, parse_length, svg_size


def create_vectorizer(config: PicrenderConfig, format: DiagramFormat | str) -> Vectorizer:
    """Pick the vectorizer backend for a diagram format."""
    fmt = DiagramFormat(format)
    if fmt is DiagramFormat.pic:
        return DpicVectorizer(config.vectorizer.dpic_path, timeout=config.timeout)
    return GraphvizVectorizer(
        config.vectorizer.dot_path,
        layout=config.vectorizer.dot_layout,
        timeout=config.timeout,
    )


__all__ = [
    "DpicVectorizer",
    "ExternalVectorizer",
    "GraphvizVectorizer",
    "SvgSizeError",
    "Vectorizer",
    "create_vectorizer",
    "parse_length",
    "svg_size",
]
