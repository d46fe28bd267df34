"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import PicrenderConfig


def load_config(cli_path: str | None = None) -> PicrenderConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./picrender.yaml"),
        Path.home() / ".picrender" / "config.yaml",
    ]

    if cli_path and not Path(cli_path).exists():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                raw = _expand_env_vars(raw)
                return PicrenderConfig(**raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except (ValidationError, TypeError) as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return PicrenderConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `picrender config init`
DEFAULT_CONFIG_TEMPLATE = """\
# picrender.yaml

# Diagram -> SVG
vectorizer:
  dpic_path: "dpic"            # pic diagrams
  dot_path: "dot"              # graphviz diagrams
  dot_layout: "dot"            # dot | neato | circo | twopi | fdp

# SVG -> PNG
rasterizer:
  backend: "inkscape"          # inkscape | cairo
  inkscape_path: "inkscape"
  inkscape_cli: "auto"         # auto | legacy (0.92) | modern (1.x)
  # background: "white"

# Viewer launched by `picrender render --view`
viewer:
  command: ["eog"]

default_dpi: 100
timeout: 60                    # seconds per external tool call
max_workers: 4                 # concurrent renders for `picrender batch`

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
