"""Markdown to single file HTML rendering.

The page layout follows the three column Slate design: navigation on the
left, prose in the middle and code samples on the right. Every asset (styles,
script and logo) is inlined so the resulting file has no external references.
"""

from __future__ import annotations

import base64
import html
import mimetypes
import re
from importlib import resources
from pathlib import Path
from string import Template
from typing import Any, Callable

import markdown

from ..constraint import CUSTOM_CSS_PLACEHOLDER, DEFAULT_THEME
from ..models import RenderOptions
from .frontmatter import language_tabs, split_front_matter
from .highlight import resolve_style, style_definitions

RenderCallback = Callable[[Exception | None, str | None], None]

SCRIPT_TAG_RE = re.compile(r"<(/?)script\b", re.IGNORECASE)

MARKDOWN_EXTENSIONS = ["tables", "fenced_code", "codehilite", "toc", "attr_list"]


def _asset(name: str) -> str:
    return resources.files(__package__).joinpath("assets", name).read_text(encoding="utf-8")


def _inline_logo(options: RenderOptions) -> str:
    if not options.logo:
        return ""
    logo_path = Path(options.logo).resolve()
    mime, _ = mimetypes.guess_type(logo_path.name)
    payload = base64.b64encode(logo_path.read_bytes()).decode("ascii")
    image = f'<img src="data:{mime or "application/octet-stream"};base64,{payload}" class="logo" alt="Logo">'
    if options.logo_url:
        return f'<a href="{html.escape(options.logo_url, quote=True)}">{image}</a>'
    return image


def _lang_selector(tabs: list[tuple[str, str]]) -> str:
    if not tabs:
        return ""
    links = "".join(
        f'<a href="#" data-language-name="{html.escape(key, quote=True)}">{html.escape(label)}</a>'
        for key, label in tabs
    )
    return f'<div class="lang-selector">{links}</div>'


def _search_box(enabled: bool) -> str:
    if not enabled:
        return ""
    return (
        '<div class="search"><input type="search" class="search" id="input-search" '
        'placeholder="Search" aria-label="Search"></div>'
    )


def _toc_items(tokens: list[dict[str, Any]], level: int = 1) -> str:
    items: list[str] = []
    for token in tokens:
        name = html.escape(html.unescape(str(token.get("name", ""))))
        anchor = html.escape(str(token.get("id", "")), quote=True)
        children = token.get("children") or []
        nested = ""
        if children:
            nested = f'<ul class="toc-list-h{level + 1}">{_toc_items(children, level + 1)}</ul>'
        items.append(f'<li><a href="#{anchor}" class="toc-h{level} toc-link">{name}</a>{nested}</li>')
    return "\n".join(items)


def _toc_footers(front: dict[str, Any]) -> str:
    footers = [str(item) for item in front.get("toc_footers") or []]
    if not footers:
        return ""
    rendered = "".join(f"<li>{markdown.markdown(item)}</li>" for item in footers)
    return f'<ul class="toc-footer">{rendered}</ul>'


def _with_includes(body: str, includes: list[Any]) -> str:
    parts = [body]
    for include in includes:
        parts.append(Path(str(include)).read_text(encoding="utf-8"))
    return "\n\n".join(parts)


def render_html(source: str, options: RenderOptions) -> str:
    """Render Slate Markdown *source* into a complete HTML page."""

    front, body = split_front_matter(source)
    body = _with_includes(body, list(front.get("includes") or []))
    heading_level = max(1, min(int(front.get("headingLevel") or 2), 6))

    converter = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs={
            "codehilite": {"css_class": "highlight", "guess_lang": False, "pygments_lang_class": True},
            "toc": {"toc_depth": f"1-{heading_level}"},
        },
        output_format="html",
    )
    content = converter.convert(body)
    if not options.unsafe:
        content = SCRIPT_TAG_RE.sub(lambda match: f"&lt;{match.group(1)}script", content)

    theme = str(front.get("highlight_theme") or DEFAULT_THEME)
    tabs = language_tabs(front)
    custom_css = ""
    if options.custom_css:
        custom_css = f'<style id="custom-css">\n{CUSTOM_CSS_PLACEHOLDER}\n</style>'

    page = Template(_asset("page.html"))
    return page.substitute(
        title=html.escape(str(front.get("title") or "API Reference")),
        screen_css=_asset("screen.css"),
        highlight_css=style_definitions(resolve_style(theme)),
        custom_css=custom_css,
        theme=html.escape(theme, quote=True),
        languages=html.escape(" ".join(key for key, _ in tabs), quote=True),
        logo=_inline_logo(options),
        lang_selector=_lang_selector(tabs),
        search=_search_box(bool(front.get("search", True))),
        toc=_toc_items(getattr(converter, "toc_tokens", [])),
        toc_footers=_toc_footers(front),
        content=content,
        script=_asset("app.js"),
    )


def render(source: str, options: RenderOptions, callback: RenderCallback) -> None:
    """Render *source* and report the page, or the failure, through *callback*."""

    try:
        page = render_html(source, options)
    except Exception as exc:  # handed to the caller through the callback
        callback(exc, None)
        return
    callback(None, page)


__all__ = ["render", "render_html", "RenderCallback"]
