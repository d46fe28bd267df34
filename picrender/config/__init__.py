from .loader import load_config
from .models import (
    PicrenderConfig,
    RasterizerConfig,
    VectorizerConfig,
    ViewerConfig,
)

__all__ = [
    "PicrenderConfig",
    "RasterizerConfig",
    "VectorizerConfig",
    "ViewerConfig",
    "load_config",
]
