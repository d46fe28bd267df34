"""pic diagrams rendered with dpic."""

from __future__ import annotations

from picrender.models import DiagramFormat
from picrender.vectorizer.base import ExternalVectorizer


class DpicVectorizer(ExternalVectorizer):
    """Runs ``dpic -v``, which translates pic to SVG."""

    format = DiagramFormat.pic

    def __init__(self, executable: str = "dpic", timeout: float | None = None) -> None:
        super().__init__(executable, timeout)

    def arguments(self) -> list[str]:
        return ["-v"]
