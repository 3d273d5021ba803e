"""Map highlight.js theme names onto Pygments styles."""

from __future__ import annotations

from functools import lru_cache

from pygments.formatters import HtmlFormatter
from pygments.styles import get_all_styles

FALLBACK_STYLE = "monokai"

HIGHLIGHTJS_ALIASES: dict[str, str] = {
    "darkula": "monokai",
    "darcula": "monokai",
    "default": "default",
    "github": "friendly",
    "github-gist": "friendly",
    "atom-one-dark": "one-dark",
    "atom-one-light": "default",
    "vs2015": "native",
    "xcode": "xcode",
    "tomorrow": "tango",
    "tomorrow-night": "native",
    "solarized-dark": "solarized-dark",
    "solarized-light": "solarized-light",
    "zenburn": "zenburn",
    "monokai-sublime": "monokai",
    "androidstudio": "native",
    "railscasts": "native",
}


@lru_cache(maxsize=None)
def available_styles() -> frozenset[str]:
    return frozenset(get_all_styles())


def resolve_style(theme: str) -> str:
    """Return the Pygments style used for *theme*."""

    name = theme.strip().lower()
    styles = available_styles()
    if name in styles:
        return name
    alias = HIGHLIGHTJS_ALIASES.get(name)
    if alias in styles:
        return alias
    return FALLBACK_STYLE


@lru_cache(maxsize=32)
def style_definitions(style: str) -> str:
    return HtmlFormatter(style=style).get_style_defs(".highlight")


__all__ = ["resolve_style", "style_definitions", "FALLBACK_STYLE"]
