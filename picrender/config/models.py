from typing import Literal

from pydantic import BaseModel, Field


class VectorizerConfig(BaseModel):
    dpic_path: str = "dpic"
    dot_path: str = "dot"
    dot_layout: str = "dot"


class RasterizerConfig(BaseModel):
    backend: Literal["inkscape", "cairo"] = "inkscape"
    inkscape_path: str = "inkscape"
    inkscape_cli: Literal["auto", "legacy", "modern"] = "auto"
    background: str | None = None


class ViewerConfig(BaseModel):
    command: list[str] = Field(default_factory=lambda: ["eog"])


class PicrenderConfig(BaseModel):
    vectorizer: VectorizerConfig = Field(default_factory=VectorizerConfig)
    rasterizer: RasterizerConfig = Field(default_factory=RasterizerConfig)
    viewer: ViewerConfig = Field(default_factory=ViewerConfig)
    default_dpi: int = Field(default=100, gt=0)
    timeout: float = Field(default=60.0, gt=0)
    max_workers: int = Field(default=4, gt=0)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
