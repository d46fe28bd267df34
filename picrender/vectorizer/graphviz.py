"""Graphviz dot diagrams."""

from __future__ import annotations

from picrender.models import DiagramFormat
from picrender.vectorizer.base import ExternalVectorizer


class GraphvizVectorizer(ExternalVectorizer):
    format = DiagramFormat.dot

    def __init__(
        self,
        executable: str = "dot",
        layout: str = "dot",
        timeout: float | None = None,
    ) -> None:
        super().__init__(executable, timeout)
        self.layout = layout

    def arguments(self) -> list[str]:
        return [f"-K{self.layout}", "-Tsvg"]
