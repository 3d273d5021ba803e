from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_PATH = Path("config.toml")
ENV_PREFIX = "API2HTML_"
DEFAULT_THEME = "darkula"
CUSTOM_CSS_PLACEHOLDER = "/* place your custom CSS overrides here */"

__all__ = ["DEFAULT_CONFIG_PATH", "ENV_PREFIX", "DEFAULT_THEME", "CUSTOM_CSS_PLACEHOLDER"]
